"""
CONTRACT 2: Indicator Engine

Input: SeriesResult (or a bare list of OHLCBar)
Output: IndicatorOutput

This module performs ALL mathematical calculations.
Pure Python/NumPy - NO LLM involvement.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from stockwatch.schemas.market import OHLCBar


# =============================================================================
# INPUT: IndicatorRequest
# =============================================================================


class IndicatorRequest(BaseModel):
    """
    Request for indicator calculation on caller-supplied bars.
    Sent by: API
    Received by: Indicator Service
    """

    symbol: str = Field(default="CUSTOM", description="Label for the bars")
    bars: list[OHLCBar] = Field(..., min_length=1)


# =============================================================================
# OUTPUT: Indicator Components
# =============================================================================


class MACDData(BaseModel):
    """
    MACD indicator values.

    signal_line is a fixed 0.9 fraction of macd_line, not an EMA of it.
    Serialized as macdLine / signalLine for the chart client.
    """

    model_config = ConfigDict(populate_by_name=True)

    macd_line: float = Field(..., alias="macdLine")
    signal_line: float = Field(..., alias="signalLine")
    histogram: float


class TechnicalIndicators(BaseModel):
    """Indicators consumed by the analysis panel and the AI prompts."""

    rsi: float = Field(..., ge=0, le=100)
    macd: MACDData


class PriceData(BaseModel):
    """Latest bar summary."""

    current: float
    open: float
    high: float
    low: float
    previous_close: float
    change: float
    change_percent: float
    volume: int


# =============================================================================
# OUTPUT: IndicatorOutput (Complete Response)
# =============================================================================


class IndicatorOutput(BaseModel):
    """
    Indicator analysis for a symbol.
    Returned by: Indicator Service
    Consumed by: Research Service, analysis panel
    """

    symbol: str
    timestamp: datetime
    price: PriceData
    indicators: TechnicalIndicators
    bar_count: int = Field(..., ge=0)
    rsi_zone: Optional[str] = Field(
        default=None,
        description="OVERBOUGHT / OVERSOLD / NEUTRAL",
    )

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "AAPL",
                "timestamp": "2024-02-05T10:30:00-05:00",
                "price": {
                    "current": 230.0,
                    "open": 228.41,
                    "high": 231.02,
                    "low": 227.15,
                    "previous_close": 228.9,
                    "change": 1.1,
                    "change_percent": 0.48,
                    "volume": 1024311,
                },
                "indicators": {
                    "rsi": 56.2,
                    "macd": {"macdLine": 0.84, "signalLine": 0.756, "histogram": 0.084},
                },
                "bar_count": 72,
                "rsi_zone": "NEUTRAL",
            }
        }
