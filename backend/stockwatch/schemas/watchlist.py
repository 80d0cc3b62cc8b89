"""
CONTRACT 4: Watchlist & Alerts

The watchlist is session-scoped (in-memory). Alerts fire when a fresh live
price lands within a proximity threshold of the user's target price.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from stockwatch.schemas.research import StockSymbol
from stockwatch.schemas.market import SeriesResult
from stockwatch.schemas.indicators import TechnicalIndicators


class UpdateAlertRequest(BaseModel):
    """
    Set or clear (None) the alert price for a symbol.
    Accepts alertPrice, the key StockSymbol is serialized with.
    """

    model_config = ConfigDict(populate_by_name=True)

    alert_price: Optional[float] = Field(default=None, gt=0, alias="alertPrice")


class AlertCheck(BaseModel):
    """Outcome of comparing a live price against an alert target."""

    symbol: str
    target_price: float = Field(..., gt=0)
    live_price: float = Field(..., gt=0)
    triggered: bool
    distance_percent: float = Field(..., ge=0, description="|live - target| / live * 100")


class WatchlistState(BaseModel):
    """Current watchlist plus selection."""

    stocks: list[StockSymbol]
    selected_symbol: Optional[str] = None


class DashboardSnapshot(BaseModel):
    """Everything the chart tab needs for the selected symbol."""

    series: SeriesResult
    indicators: TechnicalIndicators
    alert: Optional[AlertCheck] = None
