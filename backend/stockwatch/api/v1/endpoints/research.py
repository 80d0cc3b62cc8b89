"""
AI Research API Endpoints

Symbol lookup, trading signal, news digest, company profile and strategy.
All LLM-backed; failures degrade to neutral / empty answers.
"""

from fastapi import APIRouter, HTTPException, Query

from stockwatch.core.config import settings
from stockwatch.schemas.research import (
    ResearchRequest,
    AnalysisResult,
    StockSymbol,
    MarketContext,
    CompanyProfile,
    InvestmentStrategy,
)
from stockwatch.services.indicators import get_indicator_service
from stockwatch.services.llm import get_research_service
from stockwatch.api.v1.endpoints.market import load_series

router = APIRouter()


@router.get("/lookup", response_model=StockSymbol)
async def lookup_symbol(
    q: str = Query(..., min_length=1, max_length=100, description="Company name or ticker"),
):
    """
    Resolve a free-text query to a ticker.

    Example: `/research/lookup?q=Apple`
    """
    result = await get_research_service().lookup_symbol(q)

    if result is None:
        raise HTTPException(status_code=404, detail=f"No stock symbol found for {q!r}")

    return result


@router.get("/{symbol}/analysis", response_model=AnalysisResult)
async def get_analysis(
    symbol: str,
    days: int = Query(default=settings.default_lookback_days, ge=1, le=1000),
):
    """
    Get BUY / SELL / HOLD signal with reasoning.

    Indicators are computed here and handed to the LLM; if the LLM is
    unavailable a rule-based signal is returned (source = "rules").
    """
    series = await load_series(symbol, days)
    if not series.bars:
        raise HTTPException(status_code=404, detail=f"No trading days in the last {days} days")

    indicators = get_indicator_service().calculate_for_bars(series.symbol, series.bars)
    request = ResearchRequest(
        symbol=series.symbol,
        bars=series.bars,
        indicators=indicators.indicators,
    )
    return await get_research_service().execute(request)


@router.get("/{symbol}/context", response_model=MarketContext)
async def get_market_context(symbol: str):
    """
    Get real-time price text and the top headline of the day.
    """
    return await get_research_service().fetch_market_context(symbol.upper().strip())


@router.get("/{symbol}/news")
async def get_news(symbol: str):
    """
    Get latest news articles for a symbol.

    Example: `/research/NVDA/news`
    """
    symbol = symbol.upper().strip()
    articles = await get_research_service().fetch_news(symbol)

    return {
        "symbol": symbol,
        "count": len(articles),
        "articles": [a.model_dump() for a in articles],
    }


@router.get("/{symbol}/profile", response_model=CompanyProfile)
async def get_company_profile(symbol: str):
    """
    Get company fact sheet (CEO, HQ, market cap, ...).
    """
    profile = await get_research_service().fetch_company_profile(symbol.upper().strip())

    if profile is None:
        raise HTTPException(status_code=404, detail=f"Company profile unavailable for {symbol}")

    return profile


@router.get("/{symbol}/strategy", response_model=InvestmentStrategy)
async def get_strategy(
    symbol: str,
    days: int = Query(default=settings.default_lookback_days, ge=1, le=1000),
):
    """
    Get the high-risk / high-reward strategy report.

    Uses the current price and the last 20 bars of the series.
    """
    series = await load_series(symbol, days)
    if not series.bars:
        raise HTTPException(status_code=404, detail=f"No trading days in the last {days} days")

    strategy = await get_research_service().fetch_investment_strategy(
        series.symbol,
        series.current_price,
        series.bars,
    )

    if strategy is None:
        raise HTTPException(status_code=404, detail=f"Strategy unavailable for {symbol}")

    return strategy
