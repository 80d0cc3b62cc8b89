"""
Pytest configuration for backend tests.

Shared fixtures: a fake LLM client, a fake live price fetcher and
resettable service singletons so no test touches the network.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from stockwatch.core.config import settings
from stockwatch.core.market_calendar import get_market_now
from stockwatch.schemas.market import LivePrice
from stockwatch.services.llm.client import LLMProvider, LLMResponse
from stockwatch.services.market_data import service as market_data_module
from stockwatch.services.market_data import live_price as live_price_module
from stockwatch.services.indicators import service as indicator_module
from stockwatch.services.llm import client as llm_client_module
from stockwatch.services.llm import research as research_module
from stockwatch.services.watchlist import store as watchlist_module

# Friday
FIXED_END_DATE = date(2024, 2, 9)


def llm_response(content: str, source_urls=None) -> LLMResponse:
    """Build an LLMResponse as a provider would return it."""
    return LLMResponse(
        content=content,
        model="gemini-2.5-flash",
        provider=LLMProvider.GEMINI,
        usage={},
        source_urls=source_urls or [],
    )


def live_quote(symbol: str, price: float) -> LivePrice:
    return LivePrice(
        symbol=symbol,
        price=price,
        source="Yahoo Finance",
        timestamp=get_market_now(),
    )


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Every test starts with fresh services and an empty watchlist."""
    monkeypatch.setattr(market_data_module, "_service_instance", None)
    monkeypatch.setattr(live_price_module, "_fetcher_instance", None)
    monkeypatch.setattr(indicator_module, "_service_instance", None)
    monkeypatch.setattr(llm_client_module, "_llm_client", None)
    monkeypatch.setattr(research_module, "_service_instance", None)
    monkeypatch.setattr(watchlist_module, "_store_instance", None)
    monkeypatch.setattr(settings, "enable_live_prices", True)


@pytest.fixture
def fake_llm():
    """LLM client whose generate() is an AsyncMock."""
    client = MagicMock()
    client.generate = AsyncMock()
    client.health_check = AsyncMock(return_value=True)
    return client


@pytest.fixture
def failing_llm():
    """LLM client that always raises, like a client with no API keys."""
    client = MagicMock()
    client.generate = AsyncMock(side_effect=RuntimeError("No LLM providers configured"))
    client.health_check = AsyncMock(return_value=False)
    return client


@pytest.fixture
def fake_fetcher():
    """Live price fetcher with no quote by default."""
    fetcher = MagicMock()
    fetcher.fetch_quote = AsyncMock(return_value=None)
    return fetcher
