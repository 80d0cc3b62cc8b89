"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from stockwatch.services.base import BaseService
from stockwatch.schemas.market import SeriesResult, OHLCBar
from stockwatch.schemas.indicators import IndicatorOutput


class IndicatorServiceInterface(BaseService[SeriesResult, IndicatorOutput]):
    """
    Indicator Engine Service Contract.

    INPUT: SeriesResult
        - bars: Daily OHLCV series, oldest first

    OUTPUT: IndicatorOutput
        - indicators: RSI(14) and MACD(12, 26) with proportional signal
        - price: Latest bar summary
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: SeriesResult) -> IndicatorOutput:
        """Calculate indicators for a generated series."""
        pass

    @abstractmethod
    def calculate_for_bars(self, symbol: str, bars: list[OHLCBar]) -> IndicatorOutput:
        """Calculate indicators for arbitrary bars."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
