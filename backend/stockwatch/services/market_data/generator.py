"""
Synthetic Series Generator

Generates a daily OHLCV series that ends exactly at an anchor price.

The walk runs backwards from the anchor (today) so the chart's last close is
always the current price, then the bars are reversed to oldest-first.
Randomness is seeded from the symbol, so the same symbol, window and anchor
always produce the same series.
"""

import math
from datetime import date, timedelta
from typing import Optional

from stockwatch.core.market_calendar import is_weekend, market_today
from stockwatch.schemas.market import OHLCBar


# Fallback prices when no live quote is available
SYMBOL_FALLBACK_PRICES = {
    "TSLA": 350.0,
    "NVDA": 135.0,
    "AAPL": 230.0,
    "GOOGL": 180.0,
    "MSFT": 420.0,
    "AMZN": 210.0,
    "AMD": 160.0,
    "NFLX": 850.0,
}
DEFAULT_FALLBACK_PRICE = 100.0

DAILY_CHANGE_RANGE = 0.03  # close-to-close move in [-1.5%, +1.5%)
VOLATILITY_RATIO = 0.02
OPEN_GAP_FACTOR = 0.2
WICK_FACTOR = 0.6
MIN_VOLUME = 500_000
VOLUME_RANGE = 1_000_000


def get_fallback_price(symbol: str) -> float:
    """Get fallback price for a symbol."""
    return SYMBOL_FALLBACK_PRICES.get(symbol.strip().upper(), DEFAULT_FALLBACK_PRICE)


def symbol_seed(symbol: str) -> int:
    """Sum of character codes."""
    return sum(ord(ch) for ch in symbol)


class SeededRandom:
    """
    Sine-based pseudo-random stream in [0, 1).

    Not statistically strong, only reproducible: each draw uses the counter
    and then increments it.
    """

    def __init__(self, seed: int):
        self._counter = seed

    def random(self) -> float:
        x = math.sin(self._counter) * 10000
        self._counter += 1
        return x - math.floor(x)


def generate_series(
    symbol: str,
    day_count: int = 100,
    anchor_price: Optional[float] = None,
    end_date: Optional[date] = None,
) -> list[OHLCBar]:
    """
    Generate a weekday-only daily series ending at anchor_price.

    Args:
        symbol: Ticker, also the seed source
        day_count: Calendar days to walk back; weekends use up a day but emit no bar
        anchor_price: Close of the newest bar (fallback table when None)
        end_date: Newest calendar day (today in the market timezone when None)

    Returns:
        Bars oldest first
    """
    if day_count <= 0:
        raise ValueError(f"day_count must be positive, got {day_count}")

    if anchor_price is None:
        anchor_price = get_fallback_price(symbol)
    if anchor_price <= 0:
        raise ValueError(f"anchor_price must be positive, got {anchor_price}")

    if end_date is None:
        end_date = market_today()

    rng = SeededRandom(symbol_seed(symbol))
    price = anchor_price
    newest_first = []

    for i in range(day_count):
        day = end_date - timedelta(days=i)
        if is_weekend(day):
            continue

        volatility = price * VOLATILITY_RATIO

        # Yesterday's close is whatever grows into today's close
        change = (rng.random() - 0.5) * DAILY_CHANGE_RANGE
        prev_close = price / (1 + change)

        open_price = prev_close + (rng.random() - 0.5) * volatility * OPEN_GAP_FACTOR
        close_price = price
        high_price = max(open_price, close_price) + rng.random() * volatility * WICK_FACTOR
        low_price = min(open_price, close_price) - rng.random() * volatility * WICK_FACTOR
        volume = math.floor(rng.random() * VOLUME_RANGE) + MIN_VOLUME

        newest_first.append((day, open_price, high_price, low_price, close_price, volume))

        price = prev_close

    newest_first.reverse()

    return [
        OHLCBar(
            date=day.isoformat(),
            open=round(open_price, 2),
            high=round(high_price, 2),
            low=round(low_price, 2),
            close=round(close_price, 2),
            volume=volume,
        )
        for day, open_price, high_price, low_price, close_price, volume in newest_first
    ]
