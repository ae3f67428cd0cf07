"""
AI Components for the BFFlix backend.

1. Recommendation System (single-shot LLM workflow)
   - Prompt templates, viewing profile builder, JSON extractor and the
     Gemini model client live in bfflix/agents/recommendation/
   - Orchestration (cache, history, fallback branch) lives in
     bfflix/services/recommendation_service.py

The model is called once per cache miss with a complete prompt; there is no
tool calling and no multi-agent coordination.
"""
