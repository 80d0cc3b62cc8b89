"""
Live Price Source

Best-effort real-time price lookup.
Primary: Yahoo Finance (free, no key)
Secondary: LLM with web search ("return ONLY the number")

Every failure is swallowed into None - callers fall back to the static
price table.
"""

import asyncio
import logging
from typing import Optional

from stockwatch.core.config import settings
from stockwatch.core.market_calendar import get_market_now
from stockwatch.schemas.market import LivePrice
from stockwatch.services.llm.client import LLMClient, ModelTier, get_llm_client
from stockwatch.services.llm.parsing import parse_price_text
from stockwatch.services.llm.prompts import PRICE_SYSTEM_PROMPT, format_price_prompt

logger = logging.getLogger(__name__)


def _yahoo_last_price(symbol: str) -> Optional[float]:
    """Blocking yfinance lookup."""
    import yfinance as yf

    ticker = yf.Ticker(symbol)

    try:
        price = ticker.fast_info["last_price"]
    except (KeyError, AttributeError, TypeError):
        price = None

    if not price:
        info = ticker.info or {}
        price = info.get("currentPrice") or info.get("regularMarketPrice")

    return float(price) if price else None


class LivePriceFetcher:
    """Resolves the current price of a symbol from the configured providers."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        use_yahoo: Optional[bool] = None,
    ):
        self._llm_client = llm_client
        self._use_yahoo = settings.enable_yahoo_prices if use_yahoo is None else use_yahoo

    @property
    def llm_client(self) -> LLMClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    async def fetch_quote(self, symbol: str) -> Optional[LivePrice]:
        """Get live price with the provider that answered."""
        symbol = symbol.upper().strip()

        if self._use_yahoo:
            try:
                price = await self._from_yahoo(symbol)
                if price and price > 0:
                    return LivePrice(
                        symbol=symbol,
                        price=price,
                        source="Yahoo Finance",
                        timestamp=get_market_now(),
                    )
            except Exception as e:
                logger.debug(f"Yahoo Finance price failed for {symbol}: {e}")

        try:
            price = await self._from_llm(symbol)
            if price and price > 0:
                return LivePrice(
                    symbol=symbol,
                    price=price,
                    source="LLM web search",
                    timestamp=get_market_now(),
                )
        except Exception as e:
            logger.warning(f"Failed to fetch numeric price for {symbol}: {e}")

        return None

    async def fetch_live_price(self, symbol: str) -> Optional[float]:
        """Get live price, None when unavailable."""
        quote = await self.fetch_quote(symbol)
        return quote.price if quote else None

    async def _from_yahoo(self, symbol: str) -> Optional[float]:
        logger.info(f"Fetching {symbol} price from Yahoo Finance...")
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, _yahoo_last_price, symbol)

    async def _from_llm(self, symbol: str) -> Optional[float]:
        response = await self.llm_client.generate(
            system_prompt=PRICE_SYSTEM_PROMPT,
            user_prompt=format_price_prompt(symbol),
            model_tier=ModelTier.EXPLANATION,
            temperature=0.0,
            use_search=True,
        )
        return parse_price_text(response.content)


# Singleton instance
_fetcher_instance: Optional[LivePriceFetcher] = None


def get_live_price_fetcher() -> LivePriceFetcher:
    """Get or create live price fetcher instance."""
    global _fetcher_instance
    if _fetcher_instance is None:
        _fetcher_instance = LivePriceFetcher()
    return _fetcher_instance
