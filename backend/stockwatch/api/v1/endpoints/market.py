"""
Market Data API Endpoints

Endpoints for prices, synthetic series and the dashboard bundle.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from stockwatch.core.config import settings
from stockwatch.core.market_calendar import get_market_status
from stockwatch.schemas.market import SeriesRequest, SeriesResult, LivePrice, PriceSource
from stockwatch.schemas.watchlist import DashboardSnapshot
from stockwatch.services.base import ServiceError
from stockwatch.services.market_data import get_market_data_service, get_fallback_price
from stockwatch.services.indicators import get_indicator_service
from stockwatch.services.alerts import check_alert
from stockwatch.services.watchlist import get_watchlist_store

logger = logging.getLogger(__name__)

router = APIRouter()


async def load_series(
    symbol: str,
    days: int,
    anchor_price: Optional[float] = None,
    use_live_price: bool = True,
) -> SeriesResult:
    """Run the market data service, mapping bad input to 400."""
    service = get_market_data_service()
    try:
        request = SeriesRequest(
            symbol=symbol,
            days=days,
            anchor_price=anchor_price,
            use_live_price=use_live_price,
        )
        return await service.execute(request)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/status")
async def market_status():
    """Get current market session."""
    return get_market_status()


@router.get("/fallback-price/{symbol}")
async def fallback_price(symbol: str):
    """
    Get the static fallback price used when no live quote is available.
    """
    symbol = symbol.upper().strip()
    return {"symbol": symbol, "price": get_fallback_price(symbol)}


@router.get("/price/{symbol}", response_model=LivePrice)
async def live_price(symbol: str):
    """
    Get real-time price for a symbol.

    Primary source: Yahoo Finance
    Fallback: LLM web search
    """
    service = get_market_data_service()
    quote = await service.get_live_price(symbol.upper().strip())

    if quote is None:
        raise HTTPException(status_code=404, detail=f"Live price unavailable for {symbol}")

    return quote


@router.get("/series/{symbol}", response_model=SeriesResult)
async def get_series(
    symbol: str,
    days: int = Query(default=settings.default_lookback_days, ge=1, le=1000),
    price: Optional[float] = Query(default=None, gt=0, description="Anchor price override"),
    live: bool = Query(default=True, description="Try a live lookup for the anchor"),
):
    """
    Get the synthetic daily series for a symbol.

    The last close always equals the anchor price (rounded to cents).
    """
    return await load_series(symbol, days, anchor_price=price, use_live_price=live)


@router.get("/dashboard/{symbol}", response_model=DashboardSnapshot)
async def get_dashboard(
    symbol: str,
    days: int = Query(default=settings.default_lookback_days, ge=1, le=1000),
):
    """
    Get everything the chart tab needs.

    Returns:
        - Series anchored at the live price (fallback table if unavailable)
        - RSI / MACD for the newest bar
        - Alert check when the symbol has an alert price and the price is live
    """
    series = await load_series(symbol, days)
    if not series.bars:
        raise HTTPException(status_code=404, detail=f"No trading days in the last {days} days")

    indicators = get_indicator_service().calculate_for_bars(series.symbol, series.bars)

    alert = None
    stock = get_watchlist_store().get(series.symbol)
    if stock and stock.alert_price and series.price_source == PriceSource.LIVE:
        alert = check_alert(series.symbol, series.anchor_price, stock.alert_price)
        if alert.triggered:
            logger.info(
                f"Alert for {series.symbol}: live {series.anchor_price} near target {stock.alert_price}"
            )

    return DashboardSnapshot(
        series=series,
        indicators=indicators.indicators,
        alert=alert,
    )
