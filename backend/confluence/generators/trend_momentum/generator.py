"""Trend/momentum generator built on the Average Directional Index.

Signal Logic:
- BUY: ADX above threshold AND +DI > -DI AND momentum > 0 AND a pivot low
- SELL: ADX above threshold AND -DI > +DI AND momentum < 0 AND a pivot high

A pivot needs ``pivot_right_bars`` bars after it, so the bar checked is
the newest one that can already be confirmed: ``last - pivot_right_bars``.
ADX, DI and momentum are all read at that same bar.
"""

import logging
from typing import Sequence

from confluence.generators.registry import register_generator
from confluence.generators.trend_momentum.models import (
    TREND_MOMENTUM_GENERATOR_NAME,
    TrendMomentumConfig,
    TrendMomentumSignal,
)
from confluence.indicators import Series, momentum, pivot_highs, pivot_lows, true_range, wilder_sum
from confluence.models import Candle, Signal

logger = logging.getLogger(__name__)


def directional_movement(
    highs: Sequence[float],
    lows: Sequence[float],
) -> tuple[list[float], list[float]]:
    """Wilder's +DM / -DM per bar (zero on the first bar)."""
    plus_dm = [0.0] * len(highs)
    minus_dm = [0.0] * len(highs)

    for i in range(1, len(highs)):
        up_move = highs[i] - highs[i - 1]
        down_move = lows[i - 1] - lows[i]
        if up_move > down_move and up_move > 0:
            plus_dm[i] = up_move
        if down_move > up_move and down_move > 0:
            minus_dm[i] = down_move

    return plus_dm, minus_dm


def adx(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> tuple[Series, Series, Series]:
    """
    Calculate ADX with the +DI / -DI lines.

    DI is undefined where the smoothed true range is zero; DX is zero
    when both DI are zero. ADX is seeded with the mean of the first
    ``period`` DX values, then follows Wilder's recurrence.

    Returns:
        Tuple of (adx, plus_di, minus_di) lists
    """
    n = len(closes)
    plus_dm, minus_dm = directional_movement(highs, lows)
    smoothed_tr = wilder_sum(true_range(highs, lows, closes), period)
    smoothed_plus = wilder_sum(plus_dm, period)
    smoothed_minus = wilder_sum(minus_dm, period)

    plus_di: Series = [None] * n
    minus_di: Series = [None] * n
    dx: Series = [None] * n

    for i in range(n):
        tr = smoothed_tr[i]
        if tr is None or tr == 0:
            continue
        plus_di[i] = 100 * smoothed_plus[i] / tr
        minus_di[i] = 100 * smoothed_minus[i] / tr
        di_sum = plus_di[i] + minus_di[i]
        dx[i] = 100 * abs(plus_di[i] - minus_di[i]) / di_sum if di_sum > 0 else 0.0

    result: Series = [None] * n
    seed: list[float] = []
    prev: float | None = None
    for i, value in enumerate(dx):
        if value is None:
            continue
        if prev is None:
            seed.append(value)
            if len(seed) == period:
                prev = sum(seed) / period
                result[i] = prev
        else:
            prev = (prev * (period - 1) + value) / period
            result[i] = prev

    return result, plus_di, minus_di


@register_generator(TREND_MOMENTUM_GENERATOR_NAME)
class TrendMomentumGenerator:
    """ADX trend strength + momentum + pivot confirmation."""

    def __init__(self, config: TrendMomentumConfig | None = None):
        self.config = config or TrendMomentumConfig()

    @property
    def name(self) -> str:
        return TREND_MOMENTUM_GENERATOR_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def min_candles(self) -> int:
        cfg = self.config
        return cfg.adx_length + cfg.momentum_period + cfg.pivot_left_bars + cfg.pivot_right_bars

    def evaluate(self, candles: Sequence[Candle]) -> TrendMomentumSignal | None:
        if len(candles) < self.min_candles:
            return None

        cfg = self.config
        highs = [c.high for c in candles]
        lows = [c.low for c in candles]
        closes = [c.close for c in candles]

        adx_line, plus_di, minus_di = adx(highs, lows, closes, cfg.adx_length)
        mom = momentum(closes, cfg.momentum_period)

        pivot_index = len(candles) - 1 - cfg.pivot_right_bars
        current_adx = adx_line[pivot_index]
        current_mom = mom[pivot_index]
        if current_adx is None or current_mom is None:
            return None

        is_pivot_high = any(
            p.index == pivot_index
            for p in pivot_highs(highs, cfg.pivot_left_bars, cfg.pivot_right_bars)
        )
        is_pivot_low = any(
            p.index == pivot_index
            for p in pivot_lows(lows, cfg.pivot_left_bars, cfg.pivot_right_bars)
        )

        current_plus, current_minus = plus_di[pivot_index], minus_di[pivot_index]
        strong_trend = current_adx > cfg.adx_threshold
        bullish_di = current_plus is not None and current_plus > current_minus
        bearish_di = current_plus is not None and current_minus > current_plus

        signal = Signal.NONE
        if strong_trend and bullish_di and current_mom > 0 and is_pivot_low:
            signal = Signal.BUY
        elif strong_trend and bearish_di and current_mom < 0 and is_pivot_high:
            signal = Signal.SELL

        if signal is not Signal.NONE:
            logger.debug(
                f"Trend/momentum {signal.value}: adx={current_adx:.2f} "
                f"momentum={current_mom:.2f}% pivot@{pivot_index}"
            )

        return TrendMomentumSignal(
            signal=signal,
            timestamp=candles[-1].timestamp,
            adx=current_adx,
            plus_di=current_plus,
            minus_di=current_minus,
            momentum=current_mom,
            is_pivot_high=is_pivot_high,
            is_pivot_low=is_pivot_low,
            pivot_index=pivot_index,
        )
