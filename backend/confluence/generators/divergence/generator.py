"""Divergence detector between price pivots and RSI pivots.

Consecutive same-type price pivots (lows on the low series, highs on the
high series) are paired with the nearest RSI pivot of the same type
within ``pivot_tolerance`` bars. A divergence is active while its later
price pivot lies within ``lookback_period`` bars of the latest bar.

Signal Logic:
- BUY: an active regular bullish divergence
- SELL: otherwise, an active regular bearish divergence
Hidden divergences are reported only.
"""

import logging
from typing import Sequence

from confluence.generators.divergence.models import (
    DIVERGENCE_GENERATOR_NAME,
    Divergence,
    DivergenceConfig,
    DivergenceKind,
    DivergenceSignal,
)
from confluence.generators.registry import register_generator
from confluence.indicators import Series, pivot_highs, pivot_lows, rsi
from confluence.models import Candle, Pivot, Signal

logger = logging.getLogger(__name__)


def nearest_pivot(pivots: Sequence[Pivot], index: int, tolerance: int) -> Pivot | None:
    """Closest pivot to ``index`` within ``tolerance`` bars (earlier wins a tie)."""
    best: Pivot | None = None
    for pivot in pivots:
        distance = abs(pivot.index - index)
        if distance > tolerance:
            continue
        if best is None or distance < abs(best.index - index):
            best = pivot
    return best


def find_divergences(
    price_pivots: Sequence[Pivot],
    rsi_pivots: Sequence[Pivot],
    regular: DivergenceKind,
    hidden: DivergenceKind,
    min_distance: int = 5,
    tolerance: int = 2,
) -> list[Divergence]:
    """
    Compare each pair of consecutive price pivots with their RSI pivots.

    ``regular`` and ``hidden`` must both be bullish (pivot lows) or both
    bearish (pivot highs); the comparison direction follows from that.
    """
    bullish = regular is DivergenceKind.REGULAR_BULLISH
    found: list[Divergence] = []

    for prev_price, price in zip(price_pivots, price_pivots[1:]):
        if price.index - prev_price.index < min_distance:
            continue

        current_rsi = nearest_pivot(rsi_pivots, price.index, tolerance)
        prev_rsi = nearest_pivot(rsi_pivots, prev_price.index, tolerance)
        if current_rsi is None or prev_rsi is None:
            continue

        price_lower = price.value < prev_price.value
        price_higher = price.value > prev_price.value
        rsi_lower = current_rsi.value < prev_rsi.value
        rsi_higher = current_rsi.value > prev_rsi.value

        if bullish:
            is_regular = price_lower and rsi_higher
            is_hidden = price_higher and rsi_lower
        else:
            is_regular = price_higher and rsi_lower
            is_hidden = price_lower and rsi_higher

        kind = regular if is_regular else hidden if is_hidden else None
        if kind is None:
            continue

        found.append(
            Divergence(
                kind=kind,
                price_index=price.index,
                price_value=price.value,
                previous_price_index=prev_price.index,
                rsi_value=current_rsi.value,
                previous_rsi_value=prev_rsi.value,
            )
        )

    return found


@register_generator(DIVERGENCE_GENERATOR_NAME)
class DivergenceGenerator:
    """Regular/hidden RSI divergence generator."""

    def __init__(self, config: DivergenceConfig | None = None):
        self.config = config or DivergenceConfig()

    @property
    def name(self) -> str:
        return DIVERGENCE_GENERATOR_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def min_candles(self) -> int:
        cfg = self.config
        return cfg.rsi_period + cfg.pivot_left_bars + cfg.pivot_right_bars + 10

    def detect(
        self, candles: Sequence[Candle], rsi_line: Series | None = None
    ) -> list[Divergence]:
        """All divergences over the window, oldest first per side.

        ``rsi_line`` is the RSI of the closes when the caller already has it.
        """
        cfg = self.config
        left, right = cfg.pivot_left_bars, cfg.pivot_right_bars
        if rsi_line is None:
            rsi_line = rsi([c.close for c in candles], cfg.rsi_period)

        bullish = find_divergences(
            pivot_lows([c.low for c in candles], left, right),
            pivot_lows(rsi_line, left, right),
            DivergenceKind.REGULAR_BULLISH,
            DivergenceKind.HIDDEN_BULLISH,
            cfg.min_pivot_distance,
            cfg.pivot_tolerance,
        )
        bearish = find_divergences(
            pivot_highs([c.high for c in candles], left, right),
            pivot_highs(rsi_line, left, right),
            DivergenceKind.REGULAR_BEARISH,
            DivergenceKind.HIDDEN_BEARISH,
            cfg.min_pivot_distance,
            cfg.pivot_tolerance,
        )
        return bullish + bearish

    def evaluate(self, candles: Sequence[Candle]) -> DivergenceSignal | None:
        if len(candles) < self.min_candles:
            return None

        cfg = self.config
        lookback_start = max(0, len(candles) - 1 - cfg.lookback_period)
        rsi_line = rsi([c.close for c in candles], cfg.rsi_period)

        active: dict[DivergenceKind, list[Divergence]] = {kind: [] for kind in DivergenceKind}
        for divergence in self.detect(candles, rsi_line):
            if divergence.price_index >= lookback_start:
                active[divergence.kind].append(divergence)

        regular_bullish = active[DivergenceKind.REGULAR_BULLISH]
        regular_bearish = active[DivergenceKind.REGULAR_BEARISH]

        signal = Signal.NONE
        if regular_bullish:
            signal = Signal.BUY
        elif regular_bearish:
            signal = Signal.SELL

        if signal is not Signal.NONE:
            logger.debug(
                f"Divergence {signal.value}: {len(regular_bullish)} bullish, "
                f"{len(regular_bearish)} bearish regular divergences active"
            )

        return DivergenceSignal(
            signal=signal,
            timestamp=candles[-1].timestamp,
            regular_bullish=bool(regular_bullish),
            regular_bearish=bool(regular_bearish),
            hidden_bullish=bool(active[DivergenceKind.HIDDEN_BULLISH]),
            hidden_bearish=bool(active[DivergenceKind.HIDDEN_BEARISH]),
            active_regular_bullish=regular_bullish,
            active_regular_bearish=regular_bearish,
            active_hidden_bullish=active[DivergenceKind.HIDDEN_BULLISH],
            active_hidden_bearish=active[DivergenceKind.HIDDEN_BEARISH],
            current_rsi=rsi_line[-1],
        )
