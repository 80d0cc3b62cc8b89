"""
Watchlist API Endpoints

Session watchlist: add / remove / select symbols, search by company name,
and per-symbol proximity alerts.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from stockwatch.schemas.research import StockSymbol
from stockwatch.schemas.watchlist import AlertCheck, UpdateAlertRequest, WatchlistState
from stockwatch.services.alerts import check_alert
from stockwatch.services.llm import get_research_service
from stockwatch.services.market_data import get_market_data_service
from stockwatch.services.watchlist import get_watchlist_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=WatchlistState)
async def get_watchlist():
    """Get the watchlist and the selected symbol."""
    return get_watchlist_store().state()


@router.post("/", response_model=WatchlistState)
async def add_stock(stock: StockSymbol):
    """
    Add a symbol (prepended and selected).

    Adding a symbol that is already listed only selects it.
    """
    get_watchlist_store().add(stock)
    return get_watchlist_store().state()


@router.post("/search", response_model=StockSymbol)
async def search_stock(
    q: str = Query(..., min_length=1, max_length=100, description="Company name or ticker"),
):
    """
    Find a stock by name or ticker.

    Existing entries match first; otherwise the LLM resolves the query
    and the result is added to the watchlist.
    """
    store = get_watchlist_store()
    result = await store.search(q, get_research_service().lookup_symbol)

    if result is None:
        raise HTTPException(status_code=404, detail=f"No stock symbol found for {q!r}")

    return result


@router.delete("/{symbol}", response_model=WatchlistState)
async def remove_stock(symbol: str):
    """Remove a symbol from the watchlist."""
    store = get_watchlist_store()
    if not store.remove(symbol):
        raise HTTPException(status_code=404, detail=f"{symbol.upper()} is not in the watchlist")
    return store.state()


@router.post("/{symbol}/select", response_model=StockSymbol)
async def select_stock(symbol: str):
    try:
        return get_watchlist_store().select(symbol)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"{symbol.upper()} is not in the watchlist")


@router.put("/{symbol}/alert", response_model=StockSymbol)
async def update_alert(symbol: str, request: UpdateAlertRequest):
    """Set the alert price, or clear it with `{"alertPrice": null}`."""
    try:
        return get_watchlist_store().update_alert(symbol, request.alert_price)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"{symbol.upper()} is not in the watchlist")


@router.get("/{symbol}/alert-check", response_model=AlertCheck)
async def alert_check(
    symbol: str,
    price: Optional[float] = Query(default=None, gt=0, description="Live price to test; fetched when omitted"),
):
    """
    Compare a live price with the symbol's alert target.

    Alerts are only evaluated against live quotes, never fallback prices.
    """
    stock = get_watchlist_store().get(symbol)
    if stock is None:
        raise HTTPException(status_code=404, detail=f"{symbol.upper()} is not in the watchlist")
    if stock.alert_price is None:
        raise HTTPException(status_code=404, detail=f"No alert price set for {stock.symbol}")

    if price is None:
        quote = await get_market_data_service().get_live_price(stock.symbol)
        if quote is None:
            raise HTTPException(status_code=503, detail=f"Live price unavailable for {stock.symbol}")
        price = quote.price

    result = check_alert(stock.symbol, price, stock.alert_price)
    if result.triggered:
        logger.info(f"Alert for {stock.symbol}: live {price} near target {stock.alert_price}")
    return result
