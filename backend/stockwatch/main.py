"""
StockWatch Backend - FastAPI Application

Main entry point for the backend API.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockwatch.core.config import settings
from stockwatch.api.v1 import router as api_v1_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    print(f"Starting {settings.app_name} v{settings.app_version}")
    print(f"Environment: {settings.environment}")
    print(f"Live prices: {settings.enable_live_prices}")

    from stockwatch.services.llm import get_llm_client
    llm_client = get_llm_client()
    if llm_client.is_configured:
        print(f"LLM provider: {llm_client.get_active_provider().value}")
    else:
        print("No LLM API key - AI research disabled, using fallback prices and rule-based signals")

    yield

    # Shutdown
    print("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    StockWatch Dashboard API

    ## Architecture
    - **Market Data**: Deterministic synthetic daily OHLC series anchored at a live price
    - **Indicator Engine**: RSI(14) and MACD(12, 26) (pure Python/NumPy)
    - **AI Research**: LLM-powered signal, news, company profile and strategy
    - **Watchlist**: Session watchlist with proximity price alerts

    ## Core Principles
    - Charts are illustrative; only the last close reflects a real quote
    - The LLM interprets numbers, never computes them
    - Every AI feature degrades gracefully without API keys
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow both frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
# Add any additional origins from settings
if settings.frontend_url and settings.frontend_url not in cors_origins:
    cors_origins.append(settings.frontend_url)
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "StockWatch Backend API",
        "docs": "/docs",
        "health": "/health",
    }
