"""
Market Calendar Utility

Handles the market timezone, weekends and the regular trading session.
Exchange holidays are not tracked - synthetic series only skip weekends.
"""

from datetime import datetime, date, timedelta
from enum import Enum
from typing import Optional
import pytz

from stockwatch.core.config import settings

# Regular session (exchange local time)
MARKET_OPEN = "09:30"
MARKET_CLOSE = "16:00"
PRE_MARKET_START = "04:00"
AFTER_HOURS_END = "20:00"


class MarketSession(str, Enum):
    PRE_MARKET = "PRE_MARKET"
    REGULAR = "REGULAR"
    AFTER_HOURS = "AFTER_HOURS"
    CLOSED = "CLOSED"


def get_market_tz():
    """Configured market timezone."""
    return pytz.timezone(settings.market_timezone)


def get_market_now() -> datetime:
    """Get current time in the market timezone."""
    return datetime.now(get_market_tz())


def market_today() -> date:
    """Today's calendar date in the market timezone."""
    return get_market_now().date()


def is_weekend(dt: date) -> bool:
    """Check if date is a weekend."""
    return dt.weekday() >= 5  # Saturday = 5, Sunday = 6


def get_previous_weekday(dt: Optional[date] = None) -> date:
    """Get the previous weekday."""
    if dt is None:
        dt = market_today()

    prev_day = dt - timedelta(days=1)
    while is_weekend(prev_day):
        prev_day -= timedelta(days=1)

    return prev_day


def get_market_session(dt: Optional[datetime] = None) -> MarketSession:
    """Get current market session."""
    if dt is None:
        dt = get_market_now()

    if is_weekend(dt.date()):
        return MarketSession.CLOSED

    time_str = dt.strftime("%H:%M")

    if time_str < PRE_MARKET_START:
        return MarketSession.CLOSED
    elif time_str < MARKET_OPEN:
        return MarketSession.PRE_MARKET
    elif time_str < MARKET_CLOSE:
        return MarketSession.REGULAR
    elif time_str < AFTER_HOURS_END:
        return MarketSession.AFTER_HOURS
    else:
        return MarketSession.CLOSED


def get_market_status() -> dict:
    """Get market status summary."""
    now = get_market_now()
    session = get_market_session(now)

    status = {
        "is_open": session == MarketSession.REGULAR,
        "session": session.value,
        "is_weekend": is_weekend(now.date()),
        "timezone": settings.market_timezone,
        "current_time": now.strftime("%H:%M:%S"),
        "current_date": now.date().isoformat(),
    }

    if not status["is_open"]:
        status["last_trading_day"] = (
            now.date().isoformat()
            if not is_weekend(now.date()) and now.strftime("%H:%M") >= MARKET_CLOSE
            else get_previous_weekday(now.date()).isoformat()
        )

    return status
