"""
Price Alert Rules

An alert fires when a fresh live price is within a proximity band of the
user's target: |live - target| / live < threshold.
Direction is ignored - approaching from above or below both count.
"""

from typing import Optional

from stockwatch.core.config import settings
from stockwatch.schemas.watchlist import AlertCheck


def is_alert_triggered(
    live_price: float,
    target_price: float,
    threshold: Optional[float] = None,
) -> bool:
    """Check whether live_price is within threshold of target_price."""
    if threshold is None:
        threshold = settings.alert_proximity_threshold
    if live_price <= 0:
        return False
    return abs(live_price - target_price) / live_price < threshold


def check_alert(
    symbol: str,
    live_price: float,
    target_price: float,
    threshold: Optional[float] = None,
) -> AlertCheck:
    """Evaluate the rule and report the distance."""
    if live_price <= 0:
        raise ValueError(f"live_price must be positive, got {live_price}")

    return AlertCheck(
        symbol=symbol,
        target_price=target_price,
        live_price=live_price,
        triggered=is_alert_triggered(live_price, target_price, threshold),
        distance_percent=round(abs(live_price - target_price) / live_price * 100, 2),
    )
