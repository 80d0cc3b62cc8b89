"""
Research Service Implementation

Uses the LLM for symbol lookup, signal commentary, news, company profile
and strategy reports.

CRITICAL: LLM does NO math. RSI/MACD come from the Indicator Engine.
Every LLM failure degrades to an empty/neutral answer instead of an error.
"""

import logging
from typing import Optional

from pydantic import ValidationError as SchemaValidationError

from stockwatch.schemas.market import OHLCBar
from stockwatch.schemas.indicators import TechnicalIndicators
from stockwatch.schemas.research import (
    ResearchRequest,
    AnalysisResult,
    AnalysisSource,
    TradeSignal,
    StockSymbol,
    MarketContext,
    NewsItem,
    CompanyProfile,
    InvestmentStrategy,
)
from stockwatch.services.base import ExternalAPIError
from stockwatch.services.indicators.calculations import rsi_zone
from stockwatch.services.llm.interface import ResearchServiceInterface
from stockwatch.services.llm.client import LLMClient, ModelTier, get_llm_client
from stockwatch.services.llm.parsing import (
    parse_json,
    extract_json_array,
    extract_json_object,
    parse_context_text,
)
from stockwatch.services.llm.prompts import (
    LOOKUP_SYSTEM_PROMPT,
    ANALYSIS_SYSTEM_PROMPT,
    SEARCH_SYSTEM_PROMPT,
    STRATEGY_SYSTEM_PROMPT,
    format_lookup_prompt,
    format_analysis_prompt,
    format_context_prompt,
    format_news_prompt,
    format_profile_prompt,
    format_strategy_prompt,
)

logger = logging.getLogger(__name__)

CONTEXT_UNAVAILABLE = "Real-time information unavailable (check the LLM API key)"
MAX_CONTEXT_SOURCES = 3
NEWS_COUNT = 6


class ResearchService(ResearchServiceInterface):
    """
    Research Service using LLM for commentary.

    Falls back to deterministic rules for the trading signal.
    """

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @property
    def name(self) -> str:
        return "ResearchService"

    # -------------------------------------------------------------------------
    # Trading signal
    # -------------------------------------------------------------------------

    async def execute(self, input_data: ResearchRequest) -> AnalysisResult:
        """
        Generate trading signal using LLM reasoning.

        Falls back to rule-based analysis if LLM fails.
        """
        try:
            return await self._llm_analysis(input_data)
        except Exception as e:
            logger.warning(f"LLM analysis failed for {input_data.symbol}: {e}, falling back to rules")
            return self._rule_based_analysis(input_data.indicators)

    async def _llm_analysis(self, request: ResearchRequest) -> AnalysisResult:
        response = await self.llm_client.generate(
            system_prompt=ANALYSIS_SYSTEM_PROMPT,
            user_prompt=format_analysis_prompt(request.symbol, request.bars, request.indicators),
            model_tier=ModelTier.REASONING,
            response_format="json",
        )

        data = parse_json(response.content)
        if not isinstance(data, dict):
            raise ExternalAPIError(self.name, "Analysis response is not a JSON object")

        signal = str(data.get("signal", "HOLD")).upper()
        return AnalysisResult(
            signal=TradeSignal(signal),
            reasoning=data.get("reasoning", ""),
            confidence=data.get("confidence", 0),
            source=AnalysisSource.LLM,
        )

    def _rule_based_analysis(self, indicators: TechnicalIndicators) -> AnalysisResult:
        """
        Fallback signal when LLM is unavailable.

        Oversold RSI with a positive MACD is a BUY, overbought RSI with a
        negative MACD is a SELL; a lone RSI extreme gets lower confidence.
        """
        rsi = indicators.rsi
        macd_line = indicators.macd.macd_line
        zone = rsi_zone(rsi)

        if zone == "OVERSOLD" and macd_line > 0:
            signal, confidence = TradeSignal.BUY, 60.0
        elif zone == "OVERBOUGHT" and macd_line < 0:
            signal, confidence = TradeSignal.SELL, 60.0
        elif zone == "OVERSOLD":
            signal, confidence = TradeSignal.BUY, 40.0
        elif zone == "OVERBOUGHT":
            signal, confidence = TradeSignal.SELL, 40.0
        else:
            signal, confidence = TradeSignal.HOLD, 0.0

        reasoning = (
            f"AI analysis unavailable. Rule-based reading: RSI {rsi:.2f} ({zone}), "
            f"MACD {macd_line:+.4f}, histogram {indicators.macd.histogram:+.4f}."
        )
        return AnalysisResult(
            signal=signal,
            reasoning=reasoning,
            confidence=confidence,
            source=AnalysisSource.RULES,
        )

    # -------------------------------------------------------------------------
    # Symbol lookup
    # -------------------------------------------------------------------------

    async def lookup_symbol(self, query: str) -> Optional[StockSymbol]:
        try:
            response = await self.llm_client.generate(
                system_prompt=LOOKUP_SYSTEM_PROMPT,
                user_prompt=format_lookup_prompt(query),
                model_tier=ModelTier.EXPLANATION,
                response_format="json",
            )
            data = parse_json(response.content)
            if not isinstance(data, dict):
                return None
            return StockSymbol.model_validate(data)
        except (ValueError, SchemaValidationError) as e:
            logger.error(f"Symbol lookup returned unusable data for {query!r}: {e}")
            return None
        except Exception as e:
            logger.error(f"Symbol lookup error for {query!r}: {e}")
            return None

    # -------------------------------------------------------------------------
    # Web-search grounded research
    # -------------------------------------------------------------------------

    async def fetch_market_context(self, symbol: str) -> MarketContext:
        try:
            response = await self.llm_client.generate(
                system_prompt=SEARCH_SYSTEM_PROMPT,
                user_prompt=format_context_prompt(symbol),
                model_tier=ModelTier.EXPLANATION,
                use_search=True,
            )
        except Exception as e:
            logger.error(f"Market context search failed for {symbol}: {e}")
            return MarketContext(news_summary=CONTEXT_UNAVAILABLE, source_urls=[])

        price, news = parse_context_text(response.content)
        return MarketContext(
            real_time_price=price,
            news_summary=news,
            source_urls=response.source_urls[:MAX_CONTEXT_SOURCES],
        )

    async def fetch_news(self, symbol: str) -> list[NewsItem]:
        try:
            response = await self.llm_client.generate(
                system_prompt=SEARCH_SYSTEM_PROMPT,
                user_prompt=format_news_prompt(symbol, NEWS_COUNT),
                model_tier=ModelTier.EXPLANATION,
                use_search=True,
            )
            raw_items = extract_json_array(response.content)
        except Exception as e:
            logger.error(f"News fetch error for {symbol}: {e}")
            return []

        if raw_items is None:
            logger.warning(f"No JSON array found in news response for {symbol}")
            return []

        # Grounding URLs are not tied to articles, spread them round-robin
        urls = response.source_urls
        items = []
        for index, raw in enumerate(raw_items):
            if not isinstance(raw, dict):
                continue
            try:
                item = NewsItem.model_validate(raw)
            except SchemaValidationError as e:
                logger.debug(f"Skipping malformed news item for {symbol}: {e}")
                continue
            if item.url is None and urls:
                item.url = urls[index % len(urls)]
            items.append(item)

        return items

    async def fetch_company_profile(self, symbol: str) -> Optional[CompanyProfile]:
        try:
            response = await self.llm_client.generate(
                system_prompt=SEARCH_SYSTEM_PROMPT,
                user_prompt=format_profile_prompt(symbol),
                model_tier=ModelTier.EXPLANATION,
                use_search=True,
            )
            data = extract_json_object(response.content)
            return CompanyProfile.model_validate(data) if data is not None else None
        except Exception as e:
            logger.error(f"Profile fetch error for {symbol}: {e}")
            return None

    async def fetch_investment_strategy(
        self,
        symbol: str,
        current_price: float,
        bars: list[OHLCBar],
    ) -> Optional[InvestmentStrategy]:
        try:
            response = await self.llm_client.generate(
                system_prompt=STRATEGY_SYSTEM_PROMPT,
                user_prompt=format_strategy_prompt(symbol, current_price, bars),
                model_tier=ModelTier.REASONING,
                use_search=True,
            )
            data = extract_json_object(response.content)
            return InvestmentStrategy.model_validate(data) if data is not None else None
        except Exception as e:
            logger.error(f"Strategy fetch error for {symbol}: {e}")
            return None

    async def health_check(self) -> bool:
        """Check LLM API connectivity."""
        try:
            return await self.llm_client.health_check()
        except Exception:
            return False


# Singleton instance
_service_instance: Optional[ResearchService] = None


def get_research_service() -> ResearchService:
    """Get or create research service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = ResearchService()
    return _service_instance
