"""
Pydantic schemas for API request and response validation.

All FastAPI endpoints use Pydantic models with explicit types. The only
loosely-typed field is RecommendationQueryResponse.results, which carries
whatever payload shape the model produced.
"""
