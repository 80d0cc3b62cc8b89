"""
Indicator API Endpoints

Endpoints for technical indicator calculations.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from stockwatch.core.config import settings
from stockwatch.schemas.indicators import IndicatorOutput, IndicatorRequest
from stockwatch.services.indicators import get_indicator_service
from stockwatch.api.v1.endpoints.market import load_series

router = APIRouter()


@router.post("/compute", response_model=IndicatorOutput)
async def compute_indicators(request: IndicatorRequest):
    """
    Calculate RSI / MACD for caller-supplied bars (oldest first).
    """
    indicator_service = get_indicator_service()
    try:
        return indicator_service.calculate_for_bars(request.symbol, request.bars)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{symbol}", response_model=IndicatorOutput)
async def get_indicators(
    symbol: str,
    days: int = Query(default=settings.default_lookback_days, ge=1, le=1000),
    price: Optional[float] = Query(default=None, gt=0, description="Anchor price override"),
):
    """
    Get indicator analysis for a symbol.

    Returns:
        - RSI (14) - 50 when fewer than 15 bars
        - MACD (12, 26) line, signal (0.9 x line) and histogram
        - Latest bar summary
    """
    series = await load_series(symbol, days, anchor_price=price)

    indicator_service = get_indicator_service()
    try:
        return await indicator_service.execute(series)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
