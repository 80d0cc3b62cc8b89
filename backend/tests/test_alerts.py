"""
Tests for the proximity alert rule.
"""

import pytest

from stockwatch.services.alerts import check_alert, is_alert_triggered


class TestIsAlertTriggered:
    """Tests for is_alert_triggered."""

    def test_within_five_percent_fires(self):
        assert is_alert_triggered(103.0, 100.0) is True

    def test_ten_percent_away_does_not_fire(self):
        assert is_alert_triggered(90.0, 100.0) is False

    def test_direction_ignored(self):
        assert is_alert_triggered(97.0, 100.0) is True
        assert is_alert_triggered(100.0, 97.0) is True

    def test_boundary_is_exclusive(self):
        # |100 - 95| / 100 == 0.05
        assert is_alert_triggered(100.0, 95.0) is False

    def test_custom_threshold(self):
        assert is_alert_triggered(103.0, 100.0, threshold=0.01) is False
        assert is_alert_triggered(90.0, 100.0, threshold=0.2) is True

    @pytest.mark.parametrize("live", [0.0, -5.0])
    def test_non_positive_live_price_never_fires(self, live):
        assert is_alert_triggered(live, 100.0) is False


class TestCheckAlert:
    """Tests for check_alert."""

    def test_reports_distance(self):
        result = check_alert("AAPL", 103.0, 100.0)

        assert result.symbol == "AAPL"
        assert result.triggered is True
        assert result.distance_percent == pytest.approx(2.91)

    def test_not_triggered(self):
        result = check_alert("AAPL", 90.0, 100.0)

        assert result.triggered is False
        assert result.distance_percent == pytest.approx(11.11)

    def test_rejects_non_positive_live_price(self):
        with pytest.raises(ValueError):
            check_alert("AAPL", 0.0, 100.0)
