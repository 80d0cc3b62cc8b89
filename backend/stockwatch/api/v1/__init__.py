"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from stockwatch.api.v1.endpoints import market, indicators, research, watchlist

router = APIRouter()

# Include all endpoint routers
router.include_router(market.router, prefix="/market", tags=["Market Data"])
router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
router.include_router(research.router, prefix="/research", tags=["AI Research"])
router.include_router(watchlist.router, prefix="/watchlist", tags=["Watchlist & Alerts"])
