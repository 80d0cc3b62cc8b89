"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
NO LLM INVOLVEMENT - All math is deterministic.

These are the dashboard's simplified variants:
- RSI uses plain averages over the last window (no Wilder smoothing)
- EMA is seeded with the first value, not an SMA
- MACD signal line is a fixed 0.9 fraction of the MACD line
"""

from collections.abc import Mapping
from typing import Sequence, Union

import numpy as np

from stockwatch.schemas.market import OHLCBar
from stockwatch.schemas.indicators import MACDData, TechnicalIndicators

Bar = Union[OHLCBar, Mapping]

RSI_PERIOD = 14
RSI_DEFAULT = 50.0  # Not enough bars
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL_RATIO = 0.9


def closes_from(series: Sequence[Bar]) -> np.ndarray:
    """Closing prices as a float array. Accepts models or dicts."""
    return np.array(
        [bar["close"] if isinstance(bar, Mapping) else bar.close for bar in series],
        dtype=float,
    )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the first value."""
    result = np.empty(len(data), dtype=float)
    if len(data) == 0:
        return result

    k = 2 / (period + 1)
    result[0] = data[0]
    for i in range(1, len(data)):
        result[i] = data[i] * k + result[i - 1] * (1 - k)

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def compute_rsi(series: Sequence[Bar], period: int = RSI_PERIOD) -> float:
    """Relative Strength Index over the last `period` changes."""
    if len(series) < period + 1:
        return RSI_DEFAULT

    closes = closes_from(series)
    deltas = np.diff(closes[-(period + 1):])

    gains = float(np.sum(deltas[deltas > 0]))
    losses = float(-np.sum(deltas[deltas < 0]))

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def compute_macd(series: Sequence[Bar]) -> MACDData:
    """
    MACD (12, 26) with a proportional signal line.

    Returns: MACDData(macd_line, signal_line, histogram)
    """
    closes = closes_from(series)
    if len(closes) == 0:
        return MACDData(macd_line=0.0, signal_line=0.0, histogram=0.0)

    fast_ema = ema(closes, MACD_FAST)
    slow_ema = ema(closes, MACD_SLOW)

    macd_line = float(fast_ema[-1] - slow_ema[-1])
    signal_line = macd_line * MACD_SIGNAL_RATIO

    return MACDData(
        macd_line=macd_line,
        signal_line=signal_line,
        histogram=macd_line - signal_line,
    )


def latest_indicators(series: Sequence[Bar]) -> TechnicalIndicators:
    """RSI and MACD for the newest bar."""
    return TechnicalIndicators(
        rsi=compute_rsi(series),
        macd=compute_macd(series),
    )


def rsi_zone(rsi_value: float) -> str:
    """Classify RSI into OVERBOUGHT / OVERSOLD / NEUTRAL."""
    if rsi_value >= 70:
        return "OVERBOUGHT"
    if rsi_value <= 30:
        return "OVERSOLD"
    return "NEUTRAL"
