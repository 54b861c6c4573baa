"""WaveTrend oscillator generator with RSI/MFI confirmation.

Marks at the latest bar:
- Flag: WT1 and WT2 both past +/-53 with RSI and MFI at the same extreme
- Diamond: WT1 strictly crossing WT2 beyond +/-40 with RSI below 40
  (bullish) or above 60 (bearish)

A diamond decides the signal when present; otherwise the flag does.
"""

import logging
from typing import Sequence

from confluence.generators.registry import register_generator
from confluence.generators.wavetrend.models import (
    WAVETREND_GENERATOR_NAME,
    WaveTrendCondition,
    WaveTrendConfig,
    WaveTrendSignal,
)
from confluence.indicators import Series, ema, hlc3, mfi, rsi
from confluence.models import Bias, Candle, Signal

logger = logging.getLogger(__name__)

CI_SCALE = 0.015


def wavetrend(
    src: Sequence[float],
    channel_len: int = 10,
    average_len: int = 21,
    signal_len: int = 4,
) -> tuple[Series, Series]:
    """
    Calculate the WaveTrend lines.

    ESA = EMA(src, n1), D = EMA(|src - ESA|, n1)
    CI = (src - ESA) / (0.015 * D), undefined where D is zero
    WT1 = EMA(CI, n2), WT2 = EMA(WT1, signal_len)

    Returns:
        Tuple of (wt1, wt2) lists
    """
    esa = ema(src, channel_len)
    deviation = ema(
        [abs(v - e) if e is not None else None for v, e in zip(src, esa)],
        channel_len,
    )

    ci: Series = []
    for v, e, d in zip(src, esa, deviation):
        if e is None or d is None or d == 0:
            ci.append(None)
        else:
            ci.append((v - e) / (CI_SCALE * d))

    wt1 = ema(ci, average_len)
    wt2 = ema(wt1, signal_len)
    return wt1, wt2


@register_generator(WAVETREND_GENERATOR_NAME)
class WaveTrendGenerator:
    """WaveTrend flag/diamond generator."""

    def __init__(self, config: WaveTrendConfig | None = None):
        self.config = config or WaveTrendConfig()

    @property
    def name(self) -> str:
        return WAVETREND_GENERATOR_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def min_candles(self) -> int:
        cfg = self.config
        return max(cfg.wt_channel_len, cfg.wt_average_len, cfg.rsi_period, cfg.mfi_period) + 30

    def detect_flag(self, wt1: float, wt2: float, rsi_value: float, mfi_value: float) -> Bias | None:
        cfg = self.config
        if (
            wt1 < cfg.wt_oversold
            and wt2 < cfg.wt_oversold
            and rsi_value < cfg.rsi_oversold
            and mfi_value < cfg.mfi_oversold
        ):
            return Bias.BULLISH
        if (
            wt1 > cfg.wt_overbought
            and wt2 > cfg.wt_overbought
            and rsi_value > cfg.rsi_overbought
            and mfi_value > cfg.mfi_overbought
        ):
            return Bias.BEARISH
        return None

    def detect_diamond(
        self,
        wt1: float,
        wt2: float,
        prev_wt1: float | None,
        prev_wt2: float | None,
        rsi_value: float,
    ) -> Bias | None:
        if prev_wt1 is None or prev_wt2 is None:
            return None

        cfg = self.config
        crossed_up = wt1 > wt2 and prev_wt1 <= prev_wt2
        crossed_down = wt1 < wt2 and prev_wt1 >= prev_wt2

        if crossed_up and wt1 < -cfg.diamond_wt_level and rsi_value < cfg.diamond_rsi_bullish:
            return Bias.BULLISH
        if crossed_down and wt1 > cfg.diamond_wt_level and rsi_value > cfg.diamond_rsi_bearish:
            return Bias.BEARISH
        return None

    def _condition(self, wt1: float) -> WaveTrendCondition:
        if wt1 > self.config.wt_overbought:
            return WaveTrendCondition.OVERBOUGHT
        if wt1 < self.config.wt_oversold:
            return WaveTrendCondition.OVERSOLD
        return WaveTrendCondition.NEUTRAL

    def evaluate(self, candles: Sequence[Candle]) -> WaveTrendSignal | None:
        if len(candles) < self.min_candles:
            return None

        cfg = self.config
        highs = [c.high for c in candles]
        lows = [c.low for c in candles]
        closes = [c.close for c in candles]

        wt1, wt2 = wavetrend(
            hlc3(highs, lows, closes),
            cfg.wt_channel_len,
            cfg.wt_average_len,
            cfg.wt_signal_len,
        )
        rsi_line = rsi(closes, cfg.rsi_period)
        mfi_line = mfi(highs, lows, closes, [c.volume for c in candles], cfg.mfi_period)

        current = (wt1[-1], wt2[-1], rsi_line[-1], mfi_line[-1])
        if None in current:
            return None
        current_wt1, current_wt2, current_rsi, current_mfi = current

        flag = self.detect_flag(current_wt1, current_wt2, current_rsi, current_mfi)
        diamond = self.detect_diamond(current_wt1, current_wt2, wt1[-2], wt2[-2], current_rsi)

        mark = diamond or flag
        signal = Signal.NONE
        if mark is Bias.BULLISH:
            signal = Signal.BUY
        elif mark is Bias.BEARISH:
            signal = Signal.SELL

        if signal is not Signal.NONE:
            logger.debug(
                f"WaveTrend {signal.value}: wt1={current_wt1:.2f} wt2={current_wt2:.2f} "
                f"diamond={diamond} flag={flag}"
            )

        return WaveTrendSignal(
            signal=signal,
            timestamp=candles[-1].timestamp,
            wt1=current_wt1,
            wt2=current_wt2,
            rsi=current_rsi,
            mfi=current_mfi,
            flag=flag,
            diamond=diamond,
            wt_condition=self._condition(current_wt1),
        )
