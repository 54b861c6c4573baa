"""Koncorde generator: volume indices + MFI + Bollinger position.

Signal Logic:
- BUY: (PVI crosses above NVI OR strength > 0) AND MFI oversold
       AND Bollinger oscillator < -50
- SELL: (NVI crosses above PVI OR strength < 0) AND MFI overbought
        AND Bollinger oscillator > +50
"""

import logging
from typing import Sequence

from confluence.generators.koncorde.models import (
    KONCORDE_GENERATOR_NAME,
    KoncordeConfig,
    KoncordeSignal,
    MfiCondition,
)
from confluence.generators.registry import register_generator
from confluence.indicators import Series, bollinger_bands, ema, mfi
from confluence.models import Candle, Signal

logger = logging.getLogger(__name__)

VOLUME_INDEX_BASE = 1000.0
BB_OSCILLATOR_THRESHOLD = 50.0


def _volume_index(candles: Sequence[Candle], on_rising_volume: bool) -> list[float]:
    index = [VOLUME_INDEX_BASE] if candles else []

    for i in range(1, len(candles)):
        prev, current = candles[i - 1], candles[i]
        if on_rising_volume:
            update = current.volume > prev.volume
        else:
            update = current.volume < prev.volume

        if update and prev.close != 0:
            change = (current.close - prev.close) / prev.close
            index.append(index[-1] * (1 + change))
        else:
            index.append(index[-1])

    return index


def positive_volume_index(candles: Sequence[Candle]) -> list[float]:
    """PVI: moves with price only on bars where volume rose."""
    return _volume_index(candles, on_rising_volume=True)


def negative_volume_index(candles: Sequence[Candle]) -> list[float]:
    """NVI: moves with price only on bars where volume fell."""
    return _volume_index(candles, on_rising_volume=False)


def bollinger_oscillator(
    closes: Sequence[float],
    period: int = 20,
    multiplier: float = 2.0,
) -> Series:
    """Close position inside the bands, scaled and clamped to [-100, 100]."""
    upper, middle, lower = bollinger_bands(closes, period, multiplier)
    result: Series = []

    for close, up, mid, low in zip(closes, upper, middle, lower):
        if up is None:
            result.append(None)
            continue
        bandwidth = up - low
        if bandwidth == 0:
            result.append(0.0)
            continue
        position = (close - mid) / (bandwidth / 2) * 100
        result.append(max(-100.0, min(100.0, position)))

    return result


def market_strength(
    pvi: Sequence[float],
    nvi: Sequence[float],
    pvi_ema: Series,
    nvi_ema: Series,
) -> Series:
    """(PVI - EMA(PVI)) - (NVI - EMA(NVI))."""
    return [
        (p - pe) - (n - ne) if pe is not None and ne is not None else None
        for p, n, pe, ne in zip(pvi, nvi, pvi_ema, nvi_ema)
    ]


@register_generator(KONCORDE_GENERATOR_NAME)
class KoncordeGenerator:
    """Koncorde volume-index oscillator generator."""

    def __init__(self, config: KoncordeConfig | None = None):
        self.config = config or KoncordeConfig()

    @property
    def name(self) -> str:
        return KONCORDE_GENERATOR_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def min_candles(self) -> int:
        cfg = self.config
        return max(cfg.pvi_period, cfg.nvi_period, cfg.mfi_period, cfg.bb_period) + 10

    def _mfi_condition(self, value: float) -> MfiCondition:
        if value < self.config.mfi_oversold:
            return MfiCondition.OVERSOLD
        if value > self.config.mfi_overbought:
            return MfiCondition.OVERBOUGHT
        return MfiCondition.NEUTRAL

    def evaluate(self, candles: Sequence[Candle]) -> KoncordeSignal | None:
        if len(candles) < self.min_candles:
            return None

        cfg = self.config
        closes = [c.close for c in candles]

        pvi = positive_volume_index(candles)
        nvi = negative_volume_index(candles)
        strength = market_strength(
            pvi, nvi, ema(pvi, cfg.pvi_period), ema(nvi, cfg.nvi_period)
        )
        mfi_line = mfi(
            [c.high for c in candles],
            [c.low for c in candles],
            closes,
            [c.volume for c in candles],
            cfg.mfi_period,
        )
        oscillator = bollinger_oscillator(closes, cfg.bb_period, cfg.bb_std_dev)

        current_mfi = mfi_line[-1]
        current_osc = oscillator[-1]
        current_strength = strength[-1]
        if current_mfi is None or current_osc is None or current_strength is None:
            return None

        pvi_cross_up = pvi[-1] > nvi[-1] and pvi[-2] <= nvi[-2]
        nvi_cross_up = nvi[-1] > pvi[-1] and nvi[-2] <= pvi[-2]
        condition = self._mfi_condition(current_mfi)

        signal = Signal.NONE
        if (
            (pvi_cross_up or current_strength > 0)
            and condition is MfiCondition.OVERSOLD
            and current_osc < -BB_OSCILLATOR_THRESHOLD
        ):
            signal = Signal.BUY
        elif (
            (nvi_cross_up or current_strength < 0)
            and condition is MfiCondition.OVERBOUGHT
            and current_osc > BB_OSCILLATOR_THRESHOLD
        ):
            signal = Signal.SELL

        if signal is not Signal.NONE:
            logger.debug(
                f"Koncorde {signal.value}: mfi={current_mfi:.1f} "
                f"bb_osc={current_osc:.1f} strength={current_strength:.2f}"
            )

        return KoncordeSignal(
            signal=signal,
            timestamp=candles[-1].timestamp,
            pvi=pvi[-1],
            nvi=nvi[-1],
            mfi=current_mfi,
            bb_oscillator=current_osc,
            strength=current_strength,
            pvi_above_nvi=pvi[-1] > nvi[-1],
            mfi_condition=condition,
        )
