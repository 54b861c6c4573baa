"""Technical indicator series primitives.

Every function returns a list the same length as its input. Positions
without enough history hold ``None``; no numeric placeholder (zero, NaN)
ever stands in for a missing value, so downstream math either skips an
undefined entry explicitly or propagates it as undefined.

Inputs may themselves be partially defined series (the output of another
primitive). Windowed statistics treat a window containing ``None`` as
undefined; EMA treats leading ``None`` entries as warm-up, which is what
makes EMA-of-EMA chains line up.
"""

from typing import Sequence

import numpy as np

Series = list[float | None]


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")


def _undefined(n: int) -> Series:
    return [None] * n


def _mean(window: Sequence[float]) -> float:
    return float(np.mean(np.asarray(window, dtype=np.float64)))


def _window(values: Sequence[float | None], end: int, period: int) -> list[float] | None:
    """Trailing window ending at ``end`` (inclusive), or None if any entry is undefined."""
    window = values[end - period + 1 : end + 1]
    if any(v is None for v in window):
        return None
    return list(window)


# =============================================================================
# Price transforms
# =============================================================================

def ohlc4(
    opens: Sequence[float],
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> list[float]:
    """Average of open, high, low and close per bar."""
    return [(o + h + l + c) / 4 for o, h, l, c in zip(opens, highs, lows, closes)]


def hlc3(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> list[float]:
    """Average of high, low and close per bar (typical price)."""
    return [(h + l + c) / 3 for h, l, c in zip(highs, lows, closes)]


typical_price = hlc3


def hl2(highs: Sequence[float], lows: Sequence[float]) -> list[float]:
    """Average of high and low per bar."""
    return [(h + l) / 2 for h, l in zip(highs, lows)]


# =============================================================================
# Moving averages
# =============================================================================

def sma(values: Sequence[float | None], period: int) -> Series:
    """
    Calculate Simple Moving Average.

    Args:
        values: Sequence of values (may contain None)
        period: SMA period

    Returns:
        List of SMA values (None until a fully defined window exists)
    """
    _check_period(period)
    n = len(values)
    result = _undefined(n)

    for i in range(period - 1, n):
        window = _window(values, i, period)
        if window is not None:
            result[i] = _mean(window)

    return result


def ema(values: Sequence[float | None], period: int) -> Series:
    """
    Calculate Exponential Moving Average.

    Seeded with the SMA of the first ``period`` defined values, placed at
    the index of the last of them; afterwards
    ``ema[i] = (x[i] - ema[i-1]) * k + ema[i-1]`` with ``k = 2 / (period + 1)``.
    An undefined input after seeding yields None at that index and the
    recurrence continues from the last defined EMA value.

    Args:
        values: Sequence of values (leading None entries are warm-up)
        period: EMA period

    Returns:
        List of EMA values (same length as input)
    """
    _check_period(period)
    result = _undefined(len(values))
    multiplier = 2.0 / (period + 1)

    seed: list[float] = []
    prev: float | None = None

    for i, value in enumerate(values):
        if value is None:
            continue
        if prev is None:
            seed.append(value)
            if len(seed) == period:
                prev = _mean(seed)
                result[i] = prev
            continue
        prev = (value - prev) * multiplier + prev
        result[i] = prev

    return result


def wma(values: Sequence[float | None], period: int) -> Series:
    """
    Calculate Weighted Moving Average.

    Linear weights 1..period, the most recent value weighted heaviest,
    normalised by ``period * (period + 1) / 2``.
    """
    _check_period(period)
    n = len(values)
    result = _undefined(n)
    weights = np.arange(1, period + 1, dtype=np.float64)
    weight_sum = period * (period + 1) / 2

    for i in range(period - 1, n):
        window = _window(values, i, period)
        if window is not None:
            result[i] = float(np.dot(np.asarray(window, dtype=np.float64), weights)) / weight_sum

    return result


def triple_ema(values: Sequence[float | None], period: int) -> Series:
    """
    Triple-smoothed moving average: ``3*EMA1 - 3*EMA2 + EMA3``.

    EMA2 is the EMA of EMA1 and EMA3 the EMA of EMA2, so the first defined
    value sits ``3 * (period - 1)`` bars after the first defined input.
    """
    ema1 = ema(values, period)
    ema2 = ema(ema1, period)
    ema3 = ema(ema2, period)

    return [
        3 * e1 - 3 * e2 + e3 if e1 is not None and e2 is not None and e3 is not None else None
        for e1, e2, e3 in zip(ema1, ema2, ema3)
    ]


def wilder_sum(values: Sequence[float], period: int) -> Series:
    """
    Wilder's running-sum smoothing used for TR and directional movement.

    The first value (at ``period - 1``) is the plain sum of the first
    ``period`` inputs; afterwards ``s[i] = s[i-1] - s[i-1] / period + x[i]``.
    """
    _check_period(period)
    n = len(values)
    result = _undefined(n)
    if n < period:
        return result

    prev = float(sum(values[:period]))
    result[period - 1] = prev
    for i in range(period, n):
        prev = prev - prev / period + values[i]
        result[i] = prev

    return result


# =============================================================================
# Oscillators
# =============================================================================

def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def rsi(values: Sequence[float], period: int = 14) -> Series:
    """
    Calculate Relative Strength Index with Wilder's smoothing.

    The first value sits at index ``period`` (it needs ``period`` price
    changes). RSI saturates at 100 when the average loss is zero.

    Args:
        values: Sequence of prices (fully defined)
        period: RSI period

    Returns:
        List of RSI values in [0, 100]
    """
    _check_period(period)
    n = len(values)
    result = _undefined(n)
    if n < period + 1:
        return result

    gains = [0.0] * n
    losses = [0.0] * n
    for i in range(1, n):
        change = values[i] - values[i - 1]
        if change > 0:
            gains[i] = change
        elif change < 0:
            losses[i] = -change

    avg_gain = sum(gains[1 : period + 1]) / period
    avg_loss = sum(losses[1 : period + 1]) / period
    result[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period + 1, n):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i] = _rsi_value(avg_gain, avg_loss)

    return result


def mfi(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
    period: int = 14,
) -> Series:
    """
    Calculate Money Flow Index with Wilder's smoothing.

    Raw money flow is ``typical_price * volume``. A bar's flow is positive
    when its typical price rose versus the prior bar and negative
    otherwise (an unchanged typical price counts as negative flow).
    MFI is 100 when the smoothed negative flow is zero.

    Returns:
        List of MFI values in [0, 100], first value at index ``period``
    """
    _check_period(period)
    n = len(closes)
    result = _undefined(n)
    if n < period + 1:
        return result

    tp = hlc3(highs, lows, closes)
    positive = [0.0] * n
    negative = [0.0] * n
    for i in range(1, n):
        flow = tp[i] * volumes[i]
        if tp[i] > tp[i - 1]:
            positive[i] = flow
        else:
            negative[i] = flow

    avg_pos = sum(positive[1 : period + 1]) / period
    avg_neg = sum(negative[1 : period + 1]) / period
    result[period] = _rsi_value(avg_pos, avg_neg)

    for i in range(period + 1, n):
        avg_pos = (avg_pos * (period - 1) + positive[i]) / period
        avg_neg = (avg_neg * (period - 1) + negative[i]) / period
        result[i] = _rsi_value(avg_pos, avg_neg)

    return result


def momentum(values: Sequence[float], period: int = 10) -> Series:
    """
    Rate-of-change momentum in percent.

    ``100 * (x[i] - x[i-period]) / x[i-period]``, undefined when the base
    value is zero.
    """
    _check_period(period)
    n = len(values)
    result = _undefined(n)

    for i in range(period, n):
        base = values[i - period]
        if base != 0:
            result[i] = (values[i] - base) / base * 100

    return result


# =============================================================================
# Volatility
# =============================================================================

def true_range(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
) -> list[float]:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))
    The first bar has no previous close and uses high - low.
    """
    n = len(highs)
    if n == 0:
        return []

    result = [highs[0] - lows[0]]

    for i in range(1, n):
        hl = highs[i] - lows[i]
        hc = abs(highs[i] - closes[i - 1])
        lc = abs(lows[i] - closes[i - 1])
        result.append(max(hl, hc, lc))

    return result


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> Series:
    """
    Calculate Average True Range (ATR).

    Uses Wilder's smoothing: seeded with the mean of the first ``period``
    true ranges at index ``period - 1``, then
    ``atr[i] = (atr[i-1] * (period - 1) + tr[i]) / period``.
    """
    _check_period(period)
    tr = true_range(highs, lows, closes)
    n = len(tr)
    result = _undefined(n)
    if n < period:
        return result

    prev = _mean(tr[:period])
    result[period - 1] = prev
    for i in range(period, n):
        prev = (prev * (period - 1) + tr[i]) / period
        result[i] = prev

    return result


def stddev(values: Sequence[float | None], period: int) -> Series:
    """Population standard deviation of the trailing window around its SMA."""
    _check_period(period)
    n = len(values)
    result = _undefined(n)

    for i in range(period - 1, n):
        window = _window(values, i, period)
        if window is None:
            continue
        arr = np.asarray(window, dtype=np.float64)
        mean = _mean(window)
        result[i] = float(np.sqrt(np.mean((arr - mean) ** 2)))

    return result


def bollinger_bands(
    values: Sequence[float | None],
    period: int = 20,
    multiplier: float = 2.0,
) -> tuple[Series, Series, Series]:
    """
    Calculate Bollinger Bands.

    upper = SMA + multiplier * stddev
    lower = SMA - multiplier * stddev

    Returns:
        Tuple of (upper, middle, lower) lists
    """
    middle = sma(values, period)
    deviation = stddev(values, period)

    upper: Series = []
    lower: Series = []
    for m, d in zip(middle, deviation):
        if m is None or d is None:
            upper.append(None)
            lower.append(None)
        else:
            upper.append(m + multiplier * d)
            lower.append(m - multiplier * d)

    return upper, middle, lower


# =============================================================================
# Range and volume
# =============================================================================

def highest(values: Sequence[float | None], period: int) -> Series:
    """Highest value over the trailing ``period`` bars."""
    _check_period(period)
    result = _undefined(len(values))

    for i in range(period - 1, len(values)):
        window = _window(values, i, period)
        if window is not None:
            result[i] = max(window)

    return result


def lowest(values: Sequence[float | None], period: int) -> Series:
    """Lowest value over the trailing ``period`` bars."""
    _check_period(period)
    result = _undefined(len(values))

    for i in range(period - 1, len(values)):
        window = _window(values, i, period)
        if window is not None:
            result[i] = min(window)

    return result


def vwap(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    volumes: Sequence[float],
    period: int = 14,
) -> Series:
    """
    Calculate rolling Volume Weighted Average Price over ``period`` bars.

    VWAP = sum(typical_price * volume) / sum(volume), None when the
    window volume is zero.
    """
    _check_period(period)
    n = len(closes)
    result = _undefined(n)
    tp = np.asarray(hlc3(highs, lows, closes), dtype=np.float64)
    vol = np.asarray(volumes, dtype=np.float64)

    for i in range(period - 1, n):
        window_vol = vol[i - period + 1 : i + 1]
        total_volume = float(window_vol.sum())
        if total_volume > 0:
            result[i] = float(np.dot(tp[i - period + 1 : i + 1], window_vol)) / total_volume

    return result
