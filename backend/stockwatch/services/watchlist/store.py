"""
Session Watchlist

In-memory watchlist with per-symbol alert prices and a selected symbol.
State lives for the life of the process only.
"""

import logging
from typing import Awaitable, Callable, Optional

from stockwatch.schemas.research import StockSymbol
from stockwatch.schemas.watchlist import WatchlistState

logger = logging.getLogger(__name__)

SymbolLookup = Callable[[str], Awaitable[Optional[StockSymbol]]]


class WatchlistStore:
    """Ordered watchlist, newest additions first."""

    def __init__(self, stocks: Optional[list[StockSymbol]] = None):
        self._stocks: list[StockSymbol] = list(stocks or [])
        self._selected: Optional[str] = self._stocks[0].symbol if self._stocks else None

    @property
    def selected_symbol(self) -> Optional[str]:
        return self._selected

    def state(self) -> WatchlistState:
        return WatchlistState(stocks=list(self._stocks), selected_symbol=self._selected)

    def get(self, symbol: str) -> Optional[StockSymbol]:
        symbol = symbol.upper().strip()
        for stock in self._stocks:
            if stock.symbol == symbol:
                return stock
        return None

    def find_existing(self, query: str) -> Optional[StockSymbol]:
        """Match by exact symbol or by name substring, case-insensitive."""
        needle = query.strip().lower()
        if not needle:
            return None

        for stock in self._stocks:
            if stock.symbol.lower() == needle or needle in stock.name.lower():
                return stock
        return None

    def add(self, stock: StockSymbol) -> bool:
        """Prepend and select. Returns False if the symbol was already listed."""
        if self.get(stock.symbol) is not None:
            self._selected = stock.symbol
            return False

        self._stocks.insert(0, stock)
        self._selected = stock.symbol
        logger.info(f"Added {stock.symbol} to watchlist")
        return True

    def remove(self, symbol: str) -> bool:
        """Remove a symbol. Selection moves to the first remaining entry."""
        symbol = symbol.upper().strip()
        remaining = [s for s in self._stocks if s.symbol != symbol]
        if len(remaining) == len(self._stocks):
            return False

        self._stocks = remaining
        if self._selected == symbol:
            self._selected = remaining[0].symbol if remaining else None
        return True

    def select(self, symbol: str) -> StockSymbol:
        stock = self.get(symbol)
        if stock is None:
            raise KeyError(symbol)
        self._selected = stock.symbol
        return stock

    def update_alert(self, symbol: str, alert_price: Optional[float]) -> StockSymbol:
        """Set or clear (None) the alert price."""
        stock = self.get(symbol)
        if stock is None:
            raise KeyError(symbol)

        updated = stock.model_copy(update={"alert_price": alert_price})
        self._stocks = [updated if s.symbol == stock.symbol else s for s in self._stocks]
        return updated

    async def search(self, query: str, lookup: SymbolLookup) -> Optional[StockSymbol]:
        """
        Resolve a query to a watchlist entry.

        Existing entries win; otherwise `lookup` resolves the query and the
        result is added. Returns None when nothing matched.
        """
        existing = self.find_existing(query)
        if existing is not None:
            self._selected = existing.symbol
            return existing

        result = await lookup(query)
        if result is None:
            logger.info(f"No symbol found for query {query!r}")
            return None

        self.add(result)
        return self.get(result.symbol)


# Singleton instance
_store_instance: Optional[WatchlistStore] = None


def get_watchlist_store() -> WatchlistStore:
    """Get or create the session watchlist."""
    global _store_instance
    if _store_instance is None:
        _store_instance = WatchlistStore()
    return _store_instance
