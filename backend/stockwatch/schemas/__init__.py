"""
StockWatch Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from stockwatch.schemas.market import (
    SeriesRequest,
    SeriesResult,
    OHLCBar,
    LivePrice,
    PriceSource,
)
from stockwatch.schemas.indicators import (
    IndicatorRequest,
    IndicatorOutput,
    TechnicalIndicators,
    MACDData,
    PriceData,
)
from stockwatch.schemas.research import (
    ResearchRequest,
    StockSymbol,
    TradeSignal,
    AnalysisResult,
    MarketContext,
    NewsItem,
    CompanyProfile,
    InvestmentStrategy,
)
from stockwatch.schemas.watchlist import (
    AlertCheck,
    UpdateAlertRequest,
    WatchlistState,
    DashboardSnapshot,
)

__all__ = [
    # Market
    "SeriesRequest",
    "SeriesResult",
    "OHLCBar",
    "LivePrice",
    "PriceSource",
    # Indicators
    "IndicatorRequest",
    "IndicatorOutput",
    "TechnicalIndicators",
    "MACDData",
    "PriceData",
    # Research
    "ResearchRequest",
    "StockSymbol",
    "TradeSignal",
    "AnalysisResult",
    "MarketContext",
    "NewsItem",
    "CompanyProfile",
    "InvestmentStrategy",
    # Watchlist
    "AlertCheck",
    "UpdateAlertRequest",
    "WatchlistState",
    "DashboardSnapshot",
]
