"""
Market Data Service

CONTRACT:
    Input:  SeriesRequest
    Output: SeriesResult

RESPONSIBILITIES:
    - Resolve the anchor price (caller, live lookup, fallback table)
    - Generate the synthetic daily OHLCV series ending at the anchor
    - Report where the anchor came from and any degraded paths

The series is synthetic - only its last close is real.
"""

from stockwatch.services.market_data.interface import MarketDataServiceInterface
from stockwatch.services.market_data.generator import (
    generate_series,
    get_fallback_price,
)
from stockwatch.services.market_data.live_price import (
    LivePriceFetcher,
    get_live_price_fetcher,
)
from stockwatch.services.market_data.service import (
    MarketDataService,
    get_market_data_service,
)

__all__ = [
    "MarketDataServiceInterface",
    "generate_series",
    "get_fallback_price",
    "LivePriceFetcher",
    "get_live_price_fetcher",
    "MarketDataService",
    "get_market_data_service",
]
