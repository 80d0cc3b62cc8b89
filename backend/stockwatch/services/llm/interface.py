"""
LLM Service Interfaces

Defines the contract for the research layer.
"""

from abc import abstractmethod
from typing import Optional

from stockwatch.services.base import BaseService
from stockwatch.schemas.market import OHLCBar
from stockwatch.schemas.research import (
    ResearchRequest,
    AnalysisResult,
    StockSymbol,
    MarketContext,
    NewsItem,
    CompanyProfile,
    InvestmentStrategy,
)


class ResearchServiceInterface(BaseService[ResearchRequest, AnalysisResult]):
    """
    Research Service Contract.

    INPUT: ResearchRequest
        - symbol: Ticker being analysed
        - bars: Daily series (last 5 go into the prompt)
        - indicators: RSI / MACD from the Indicator Engine

    OUTPUT: AnalysisResult
        - signal: BUY / SELL / HOLD
        - reasoning: Short explanation in the display language
        - confidence: 0-100

    RULES:
        - NEVER let the LLM compute indicators
        - NEVER raise to the caller because the LLM failed - degrade instead
    """

    @property
    def name(self) -> str:
        return "ResearchService"

    @abstractmethod
    async def execute(self, input_data: ResearchRequest) -> AnalysisResult:
        """Generate a trading signal."""
        pass

    @abstractmethod
    async def lookup_symbol(self, query: str) -> Optional[StockSymbol]:
        """Resolve free text ('Apple', '2330') to a ticker, None if unknown."""
        pass

    @abstractmethod
    async def fetch_market_context(self, symbol: str) -> MarketContext:
        """Real-time price text plus one-line news summary."""
        pass

    @abstractmethod
    async def fetch_news(self, symbol: str) -> list[NewsItem]:
        """Latest news articles, empty on failure."""
        pass

    @abstractmethod
    async def fetch_company_profile(self, symbol: str) -> Optional[CompanyProfile]:
        """Company fact sheet, None on failure."""
        pass

    @abstractmethod
    async def fetch_investment_strategy(
        self, symbol: str, current_price: float, bars: list[OHLCBar]
    ) -> Optional[InvestmentStrategy]:
        """Strategy report, None on failure."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check LLM API connectivity."""
        pass
