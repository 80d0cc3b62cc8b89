"""
Indicator Engine Service

CONTRACT:
    Input:  SeriesResult (daily OHLCV bars)
    Output: IndicatorOutput

RESPONSIBILITIES:
    - RSI (14) over the last window of closes
    - MACD (12, 26) with a proportional signal line
    - Latest bar price summary

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from stockwatch.services.indicators.interface import IndicatorServiceInterface
from stockwatch.services.indicators.calculations import (
    compute_rsi,
    compute_macd,
    latest_indicators,
)
from stockwatch.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "compute_rsi",
    "compute_macd",
    "latest_indicators",
    "IndicatorService",
    "get_indicator_service",
]
