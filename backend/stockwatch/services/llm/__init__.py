"""
LLM Orchestration Service

CONTRACT:
    Research Layer:
        Input:  ResearchRequest (series + indicators)
        Output: AnalysisResult

    Web-search research (symbol in, model out):
        lookup_symbol, fetch_market_context, fetch_news,
        fetch_company_profile, fetch_investment_strategy

LLM USAGE:
    - Primary: Gemini (with Google Search grounding)
    - Fallback: Claude / GPT when their keys are configured

CRITICAL RULES:
    - LLM does NO math - all numbers come from Indicator Engine
    - LLM interprets and summarizes, never calculates

FALLBACK BEHAVIOR:
    - Trading signal falls back to rule-based output
    - Everything else falls back to empty / None results
    - System remains functional without LLM API keys
"""

from stockwatch.services.llm.interface import ResearchServiceInterface
from stockwatch.services.llm.client import (
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    ModelTier,
    get_llm_client,
)
from stockwatch.services.llm.research import ResearchService, get_research_service

__all__ = [
    # Interfaces
    "ResearchServiceInterface",
    # Client
    "LLMClient",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "ModelTier",
    "get_llm_client",
    # Services
    "ResearchService",
    "get_research_service",
]
