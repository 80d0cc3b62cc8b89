"""
Tests for the synthetic series generator.

Tests cover:
- Anchoring of the last close
- Determinism per symbol
- Weekday-only, strictly increasing dates
- Fallback price table
- Invalid arguments
"""

from datetime import date, timedelta

import pytest

from stockwatch.services.market_data.generator import (
    DEFAULT_FALLBACK_PRICE,
    SeededRandom,
    generate_series,
    get_fallback_price,
    symbol_seed,
)
from conftest import FIXED_END_DATE


# =============================================================================
# Seeded randomness
# =============================================================================

class TestSeededRandom:
    """Tests for the sine-based random stream."""

    def test_seed_is_sum_of_char_codes(self):
        assert symbol_seed("AAPL") == 65 + 65 + 80 + 76
        assert symbol_seed("TEST") == 84 + 69 + 83 + 84

    def test_same_seed_same_stream(self):
        a = SeededRandom(300)
        b = SeededRandom(300)
        assert [a.random() for _ in range(10)] == [b.random() for _ in range(10)]

    def test_values_in_unit_interval(self):
        rng = SeededRandom(symbol_seed("NVDA"))
        for _ in range(500):
            value = rng.random()
            assert 0 <= value < 1


# =============================================================================
# Series generation
# =============================================================================

class TestGenerateSeries:
    """Tests for generate_series."""

    def test_last_close_equals_anchor(self):
        bars = generate_series("AAPL", 100, 187.456, end_date=FIXED_END_DATE)
        assert bars[-1].close == round(187.456, 2)

    def test_deterministic_for_same_inputs(self):
        first = generate_series("MSFT", 60, 420.0, end_date=FIXED_END_DATE)
        second = generate_series("MSFT", 60, 420.0, end_date=FIXED_END_DATE)
        assert [b.model_dump() for b in first] == [b.model_dump() for b in second]

    def test_different_symbols_differ(self):
        a = generate_series("AAPL", 30, 100.0, end_date=FIXED_END_DATE)
        b = generate_series("MSFT", 30, 100.0, end_date=FIXED_END_DATE)
        assert [bar.open for bar in a] != [bar.open for bar in b]

    def test_dates_increasing_weekdays_only(self):
        bars = generate_series("TSLA", 100, 350.0, end_date=FIXED_END_DATE)
        days = [date.fromisoformat(b.date) for b in bars]

        assert days == sorted(days)
        assert len(set(days)) == len(days)
        assert all(d.weekday() < 5 for d in days)

    def test_weekends_consume_window(self):
        bars = generate_series("TSLA", 100, 350.0, end_date=FIXED_END_DATE)
        expected = sum(
            1 for i in range(100) if (FIXED_END_DATE - timedelta(days=i)).weekday() < 5
        )
        assert len(bars) == expected == 72

    def test_sunday_end_date_ends_on_friday(self):
        sunday = date(2024, 2, 11)
        bars = generate_series("AMD", 5, 160.0, end_date=sunday)
        assert bars[-1].date == "2024-02-09"
        assert bars[-1].close == 160.0

    def test_weekend_only_window_is_empty(self):
        saturday = date(2024, 2, 10)
        assert generate_series("AMD", 1, 160.0, end_date=saturday) == []

    def test_small_window_scenario(self):
        """TEST / 10 days / anchor 100."""
        bars = generate_series("TEST", 10, 100.00, end_date=FIXED_END_DATE)

        assert len(bars) > 0
        assert bars[-1].close == 100.00
        assert all(date.fromisoformat(b.date).weekday() < 5 for b in bars)

    def test_volume_range_and_rounding(self):
        bars = generate_series("NFLX", 200, 850.0, end_date=FIXED_END_DATE)
        for bar in bars:
            assert 500_000 <= bar.volume < 1_500_000
            for value in (bar.open, bar.high, bar.low, bar.close):
                assert value == round(value, 2)
                assert value > 0

    def test_daily_moves_are_bounded(self):
        bars = generate_series("GOOGL", 100, 180.0, end_date=FIXED_END_DATE)
        for prev, cur in zip(bars, bars[1:]):
            # |change| <= 1.5% plus rounding
            assert abs(cur.close / prev.close - 1) < 0.0155

    def test_anchor_defaults_to_fallback_price(self):
        bars = generate_series("NVDA", 10, end_date=FIXED_END_DATE)
        assert bars[-1].close == 135.0

    def test_sub_cent_anchor_does_not_fail(self):
        bars = generate_series("PENNY", 5, 0.004, end_date=FIXED_END_DATE)
        assert bars[-1].close == 0.0

    @pytest.mark.parametrize("day_count", [0, -5])
    def test_rejects_non_positive_day_count(self, day_count):
        with pytest.raises(ValueError):
            generate_series("AAPL", day_count, 100.0)

    @pytest.mark.parametrize("anchor", [0, -1.5])
    def test_rejects_non_positive_anchor(self, anchor):
        with pytest.raises(ValueError):
            generate_series("AAPL", 10, anchor)


# =============================================================================
# Fallback price table
# =============================================================================

class TestFallbackPrice:
    """Tests for the static fallback table."""

    @pytest.mark.parametrize("symbol,price", [
        ("TSLA", 350.0),
        ("NVDA", 135.0),
        ("AAPL", 230.0),
        ("GOOGL", 180.0),
        ("MSFT", 420.0),
        ("AMZN", 210.0),
        ("AMD", 160.0),
        ("NFLX", 850.0),
    ])
    def test_known_symbols(self, symbol, price):
        assert get_fallback_price(symbol) == price

    def test_unknown_symbol_defaults(self):
        assert get_fallback_price("ZZZZ") == DEFAULT_FALLBACK_PRICE == 100.0

    def test_case_insensitive(self):
        assert get_fallback_price(" tsla ") == 350.0
