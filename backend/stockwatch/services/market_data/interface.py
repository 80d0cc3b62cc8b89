"""
Market Data Service Interface

Defines the contract for the market data layer.
"""

from abc import abstractmethod
from typing import Optional

from stockwatch.services.base import BaseService
from stockwatch.schemas.market import SeriesRequest, SeriesResult, LivePrice


class MarketDataServiceInterface(BaseService[SeriesRequest, SeriesResult]):
    """
    Market Data Service Contract.

    INPUT: SeriesRequest
        - symbol: Ticker to build the series for
        - days: Calendar-day window
        - anchor_price: Optional explicit anchor
        - use_live_price: Whether to try a real-time lookup

    OUTPUT: SeriesResult
        - bars: Synthetic OHLCV series, oldest first, ending at the anchor
        - price_source: live / fallback / request
        - warnings: Non-fatal issues (e.g. live lookup failed)
    """

    @property
    def name(self) -> str:
        return "MarketDataService"

    @abstractmethod
    async def execute(self, input_data: SeriesRequest) -> SeriesResult:
        """Resolve the anchor price and generate the series."""
        pass

    @abstractmethod
    async def get_live_price(self, symbol: str) -> Optional[LivePrice]:
        """Get real-time price for a single symbol, None when unavailable."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Series generation is pure computation."""
        pass
