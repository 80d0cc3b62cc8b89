"""
Watchlist Service

Session-scoped list of tracked symbols with alert targets.
No persistence beyond the running process.
"""

from stockwatch.services.watchlist.store import WatchlistStore, get_watchlist_store

__all__ = ["WatchlistStore", "get_watchlist_store"]
