"""
Indicator Engine Service Implementation

Calculates technical indicators from a daily series.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations.
"""

import logging
from typing import Optional

from stockwatch.core.market_calendar import get_market_now
from stockwatch.schemas.market import SeriesResult, OHLCBar
from stockwatch.schemas.indicators import IndicatorOutput, PriceData
from stockwatch.services.indicators.interface import IndicatorServiceInterface
from stockwatch.services.indicators.calculations import latest_indicators, rsi_zone

logger = logging.getLogger(__name__)


def _price_summary(bars: list[OHLCBar]) -> PriceData:
    latest = bars[-1]
    prev_close = bars[-2].close if len(bars) > 1 else latest.close
    change = latest.close - prev_close

    return PriceData(
        current=latest.close,
        open=latest.open,
        high=latest.high,
        low=latest.low,
        previous_close=prev_close,
        change=round(change, 2),
        change_percent=round((change / prev_close) * 100, 2),
        volume=latest.volume,
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Recomputes on every call, nothing is cached.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: SeriesResult) -> IndicatorOutput:
        return self.calculate_for_bars(input_data.symbol, input_data.bars)

    def calculate_for_bars(self, symbol: str, bars: list[OHLCBar]) -> IndicatorOutput:
        """Calculate indicators for a non-empty series."""
        if not bars:
            raise ValueError(f"No bars to analyse for {symbol}")

        indicators = latest_indicators(bars)
        logger.debug(
            f"{symbol}: RSI={indicators.rsi:.2f} MACD={indicators.macd.macd_line:.4f} "
            f"over {len(bars)} bars"
        )

        return IndicatorOutput(
            symbol=symbol,
            timestamp=get_market_now(),
            price=_price_summary(bars),
            indicators=indicators,
            bar_count=len(bars),
            rsi_zone=rsi_zone(indicators.rsi),
        )

    async def health_check(self) -> bool:
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
