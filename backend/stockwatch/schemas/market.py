"""
CONTRACT 1: Market Data Layer

Input: SeriesRequest
Output: SeriesResult

This module describes the synthetic daily price series shown on the chart
and fed to the indicator engine and the AI prompts. The series is anchored
to a single latest price (live or fallback) - it is not historical data.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class PriceSource(str, Enum):
    LIVE = "live"  # Real-time lookup succeeded
    FALLBACK = "fallback"  # Static fallback price table
    REQUEST = "request"  # Supplied by the caller


# =============================================================================
# INPUT: SeriesRequest
# =============================================================================


class SeriesRequest(BaseModel):
    """
    Request for a synthetic price series.
    Sent by: Frontend / Research Service
    Received by: Market Data Service
    """

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Ticker symbol (e.g., 'AAPL', 'TSM')",
    )
    days: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Calendar-day window, weekends are skipped",
    )
    anchor_price: Optional[float] = Field(
        default=None,
        gt=0,
        description="Price the series must end at (skips the live lookup)",
    )
    use_live_price: bool = Field(
        default=True,
        description="Try a real-time lookup before the fallback table",
    )


# =============================================================================
# OUTPUT: Series Components
# =============================================================================


class OHLCBar(BaseModel):
    """
    Single daily bar, prices rounded to cents.

    high/low are not validated against open/close. Sub-cent anchors round
    down to 0.0, hence ge=0.
    """

    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)
    volume: int = Field(..., ge=0)


class LivePrice(BaseModel):
    """Result of a real-time price lookup."""

    symbol: str
    price: float = Field(..., gt=0)
    source: str = Field(..., description="Provider that answered")
    timestamp: datetime


# =============================================================================
# OUTPUT: SeriesResult (Complete Response)
# =============================================================================


class SeriesResult(BaseModel):
    """
    Synthetic series plus the anchor it was built from.
    Returned by: Market Data Service
    Consumed by: Indicator Engine, chart, LLM prompts
    """

    symbol: str
    anchor_price: float = Field(..., gt=0)
    price_source: PriceSource
    bars: list[OHLCBar]
    generated_at: datetime
    warnings: list[str] = Field(default_factory=list)

    @property
    def current_price(self) -> float:
        """Close of the newest bar (equals the rounded anchor)."""
        return self.bars[-1].close if self.bars else round(self.anchor_price, 2)

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "AAPL",
                "anchor_price": 230.0,
                "price_source": "fallback",
                "bars": [
                    {
                        "date": "2024-02-05",
                        "open": 228.41,
                        "high": 231.02,
                        "low": 227.15,
                        "close": 230.0,
                        "volume": 1024311,
                    }
                ],
                "generated_at": "2024-02-05T10:30:00-05:00",
                "warnings": ["Live price unavailable for AAPL, using fallback"],
            }
        }
