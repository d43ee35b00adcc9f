"""Pure technical indicators: RSI (Wilder) and Bollinger Bands.

Inputs are price sequences ordered oldest to newest. Every function here is
deterministic and free of I/O, so it is safe to call from any task.

Usage::

    from elfa_mcp.ta.indicators import bollinger, rsi

    rsi([44.0, 44.25, 44.5, ...], period=14)        # float in [0, 100] or None
    bollinger(closes, period=20, mult=2.0)          # BollingerBands or None
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

import numpy as np

from elfa_mcp.ta.models import BollingerBands


def normalize(values: Iterable[Any]) -> list[float]:
    """Coerce *values* to floats and drop entries that are not finite numbers.

    This is intentional data cleaning: ``None``, booleans, non-numeric strings,
    NaN and infinities are removed, numeric strings such as ``"44.5"`` are
    converted. No gap-filling takes place; the order of the remaining values is
    preserved.
    """
    cleaned: list[float] = []
    for value in values:
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, (int, float, str)):
            try:
                number = float(value)
            except (ValueError, OverflowError):
                continue
            if math.isfinite(number):
                cleaned.append(number)
    return cleaned


def rsi(values: Iterable[Any], period: int = 14) -> float | None:
    """Return the latest Relative Strength Index using Wilder's smoothing.

    Needs at least ``period + 1`` usable samples, otherwise returns ``None``.
    A perfectly flat series yields ``50``; a series without any loss yields
    ``100``. The result is clamped to ``[0, 100]``.
    """
    if period < 1:
        msg = f"period must be >= 1, got {period}"
        raise ValueError(msg)

    prices = normalize(values)
    if len(prices) < period + 1:
        return None

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        delta = prices[i] - prices[i - 1]
        if delta >= 0:
            gains += delta
        else:
            losses -= delta
    avg_gain = gains / period
    avg_loss = losses / period

    for i in range(period + 1, len(prices)):
        delta = prices[i] - prices[i - 1]
        gain = delta if delta > 0 else 0.0
        loss = -delta if delta < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if not (math.isfinite(avg_gain) and math.isfinite(avg_loss)):
        return None

    if avg_loss == 0:
        return 50.0 if avg_gain == 0 else 100.0

    rs = avg_gain / avg_loss
    if not math.isfinite(rs):
        return None

    value = 100 - (100 / (1 + rs))
    if not math.isfinite(value):
        return None
    return _clamp(value, 0.0, 100.0)


def bollinger(values: Iterable[Any], period: int = 20, mult: float = 2.0) -> BollingerBands | None:
    """Return Bollinger Bands for the trailing ``period`` samples.

    The middle band is the simple mean of the window and the width uses the
    population standard deviation. Returns ``None`` with fewer than ``period``
    usable samples or when the window statistics or the bands overflow.
    """
    if period < 1:
        msg = f"period must be >= 1, got {period}"
        raise ValueError(msg)

    prices = normalize(values)
    if len(prices) < period:
        return None

    window = np.asarray(prices[-period:], dtype=float)
    with np.errstate(over="ignore", invalid="ignore"):
        mean = float(np.mean(window))
        stdev = float(np.std(window))
    if not (math.isfinite(mean) and math.isfinite(stdev)):
        return None

    upper = mean + mult * stdev
    lower = mean - mult * stdev
    if not (math.isfinite(upper) and math.isfinite(lower)):
        return None
    last = prices[-1]

    # Bands are finite but upper - lower may still overflow; halves never do.
    half_width = upper / 2 - lower / 2
    percent_b = (last / 2 - lower / 2) / half_width if half_width != 0 else None
    bandwidth = 2 * (half_width / mean) if mean != 0 else None

    return BollingerBands(
        mean=mean,
        upper=upper,
        lower=lower,
        last=last,
        percent_b=_finite_or_none(percent_b),
        bandwidth=_finite_or_none(bandwidth),
    )


def _finite_or_none(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
