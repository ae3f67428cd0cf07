"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (recommendations, viewings, health).
Routes authenticate, validate, call the service layer, and map the result to
a response model; they hold no business logic.
"""
