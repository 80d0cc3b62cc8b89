"""
Market Data Service Implementation

Resolves an anchor price and builds the synthetic series around it.
Caller-supplied anchor > live price > static fallback table.
"""

import asyncio
import logging
import re
from datetime import date
from typing import Optional

from stockwatch.core.config import settings
from stockwatch.core.market_calendar import get_market_now
from stockwatch.schemas.market import (
    SeriesRequest,
    SeriesResult,
    LivePrice,
    PriceSource,
)
from stockwatch.services.base import ValidationError
from stockwatch.services.market_data.interface import MarketDataServiceInterface
from stockwatch.services.market_data.generator import generate_series, get_fallback_price
from stockwatch.services.market_data.live_price import (
    LivePriceFetcher,
    get_live_price_fetcher,
)

logger = logging.getLogger(__name__)

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.\-^=]+$")


class MarketDataService(MarketDataServiceInterface):
    """
    Market Data Service.

    Never fails because a provider is down: a missing live price only adds a
    warning and the fallback table takes over.
    """

    def __init__(self, price_fetcher: Optional[LivePriceFetcher] = None):
        self._price_fetcher = price_fetcher

    @property
    def price_fetcher(self) -> LivePriceFetcher:
        if self._price_fetcher is None:
            self._price_fetcher = get_live_price_fetcher()
        return self._price_fetcher

    @property
    def name(self) -> str:
        return "MarketDataService"

    async def validate_input(self, input_data: SeriesRequest) -> SeriesRequest:
        symbol = input_data.symbol.upper().strip()
        if not SYMBOL_PATTERN.match(symbol):
            raise ValidationError(
                self.name,
                f"Invalid symbol: {input_data.symbol!r}",
                {"symbol": input_data.symbol},
            )
        return input_data.model_copy(update={"symbol": symbol})

    async def execute(self, input_data: SeriesRequest) -> SeriesResult:
        """Resolve anchor and generate the series."""
        request = await self.validate_input(input_data)
        symbol = request.symbol
        warnings: list[str] = []

        if request.anchor_price is not None:
            return self.build_series(
                symbol, request.days, request.anchor_price, PriceSource.REQUEST
            )

        if request.use_live_price and settings.enable_live_prices:
            quote = await self.get_live_price(symbol)
            if quote is not None:
                return self.build_series(
                    symbol, request.days, quote.price, PriceSource.LIVE
                )
            warnings.append(f"Live price unavailable for {symbol}, using fallback")

        return self.build_series(
            symbol,
            request.days,
            get_fallback_price(symbol),
            PriceSource.FALLBACK,
            warnings=warnings,
        )

    def build_series(
        self,
        symbol: str,
        days: int,
        anchor_price: float,
        price_source: PriceSource,
        warnings: Optional[list[str]] = None,
        end_date: Optional[date] = None,
    ) -> SeriesResult:
        """Generate the series for an already-resolved anchor."""
        bars = generate_series(symbol, days, anchor_price, end_date=end_date)
        return SeriesResult(
            symbol=symbol,
            anchor_price=anchor_price,
            price_source=price_source,
            bars=bars,
            generated_at=get_market_now(),
            warnings=warnings or [],
        )

    async def get_live_price(self, symbol: str) -> Optional[LivePrice]:
        """Live lookup bounded by the configured timeout."""
        try:
            return await asyncio.wait_for(
                self.price_fetcher.fetch_quote(symbol),
                timeout=settings.live_price_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Live price lookup timed out for {symbol}")
            return None

    async def health_check(self) -> bool:
        return True


# Singleton instance
_service_instance: Optional[MarketDataService] = None


def get_market_data_service() -> MarketDataService:
    """Get or create market data service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = MarketDataService()
    return _service_instance
