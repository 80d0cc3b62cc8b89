"""
Alert Rules

Pure comparison of a live price against a watchlist alert target.
"""

from stockwatch.services.alerts.rules import is_alert_triggered, check_alert

__all__ = ["is_alert_triggered", "check_alert"]
