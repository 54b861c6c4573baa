"""Heikin-Ashi crossover generator.

Two oscillator lines, each a doubly triple-smoothed moving average:
- kirmizi (red): built from the synthetic Heikin-Ashi close
- mavi (blue): built from HLC3 of the raw candles

line = TMA1 + (TMA1 - TMA2), where TMA1 = TMA(src), TMA2 = TMA(TMA1)
and TMA = 3*EMA1 - 3*EMA2 + EMA3.

Signal Logic:
- BUY: mavi crosses above kirmizi on the latest bar
- SELL: mavi crosses below kirmizi on the latest bar

Six chained EMA stages need at least 6 * ema_length candles.
"""

import logging
from typing import Sequence

from confluence.generators.heikin_ashi.models import (
    HEIKIN_ASHI_GENERATOR_NAME,
    HeikinAshiConfig,
    HeikinAshiSignal,
)
from confluence.generators.registry import register_generator
from confluence.indicators import Series, hlc3, triple_ema
from confluence.models import Candle, Signal

logger = logging.getLogger(__name__)


def heikin_ashi_closes(candles: Sequence[Candle]) -> list[float]:
    """Synthetic Heikin-Ashi close per candle.

    ha_open[0] = ohlc4[0]
    ha_open[i] = (ohlc4[i-1] + ha_open[i-1]) / 2
    ha_close[i] = (ohlc4[i] + ha_open[i] + max(high, ha_open) + min(low, ha_open)) / 4
    """
    closes = []
    prev_src: float | None = None
    prev_open: float | None = None

    for candle in candles:
        src = candle.ohlc4
        if prev_open is None:
            ha_open = src
        else:
            ha_open = (prev_src + prev_open) / 2

        closes.append(
            (src + ha_open + max(candle.high, ha_open) + min(candle.low, ha_open)) / 4
        )
        prev_src = src
        prev_open = ha_open

    return closes


def double_tma_line(values: Sequence[float | None], period: int) -> Series:
    """TMA1 + (TMA1 - TMA2) where TMA2 is the TMA of TMA1."""
    tma1 = triple_ema(values, period)
    tma2 = triple_ema(tma1, period)

    return [
        t1 + (t1 - t2) if t1 is not None and t2 is not None else None
        for t1, t2 in zip(tma1, tma2)
    ]


@register_generator(HEIKIN_ASHI_GENERATOR_NAME)
class HeikinAshiGenerator:
    """Heikin-Ashi double-TMA crossover generator."""

    def __init__(self, config: HeikinAshiConfig | None = None):
        self.config = config or HeikinAshiConfig()

    @property
    def name(self) -> str:
        return HEIKIN_ASHI_GENERATOR_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def min_candles(self) -> int:
        return self.config.ema_length * 6

    def calculate_lines(self, candles: Sequence[Candle]) -> tuple[Series, Series]:
        """Return (mavi, kirmizi) series for the whole window."""
        period = self.config.ema_length
        kirmizi = double_tma_line(heikin_ashi_closes(candles), period)
        mavi = double_tma_line(
            hlc3(
                [c.high for c in candles],
                [c.low for c in candles],
                [c.close for c in candles],
            ),
            period,
        )
        return mavi, kirmizi

    def evaluate(self, candles: Sequence[Candle]) -> HeikinAshiSignal | None:
        if len(candles) < self.min_candles:
            return None

        mavi, kirmizi = self.calculate_lines(candles)

        current_mavi, prev_mavi = mavi[-1], mavi[-2]
        current_kirmizi, prev_kirmizi = kirmizi[-1], kirmizi[-2]
        if None in (current_mavi, prev_mavi, current_kirmizi, prev_kirmizi):
            return None

        long_cond = current_mavi > current_kirmizi and prev_mavi <= prev_kirmizi
        short_cond = current_mavi < current_kirmizi and prev_mavi >= prev_kirmizi

        signal = Signal.NONE
        if long_cond:
            signal = Signal.BUY
        elif short_cond:
            signal = Signal.SELL

        if signal is not Signal.NONE:
            logger.debug(
                f"Heikin-Ashi {signal.value}: mavi={current_mavi:.4f} "
                f"kirmizi={current_kirmizi:.4f}"
            )

        return HeikinAshiSignal(
            signal=signal,
            timestamp=candles[-1].timestamp,
            mavi=current_mavi,
            kirmizi=current_kirmizi,
            long_condition=long_cond,
            short_condition=short_cond,
        )
