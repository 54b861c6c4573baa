"""Tests for the WaveTrend generator."""

import math

import pytest

from confluence.generators.wavetrend import (
    WaveTrendCondition,
    WaveTrendConfig,
    WaveTrendGenerator,
    WaveTrendSignal,
    wavetrend,
)
from confluence.models import Bias, Candle, Signal


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _wave_candles(n: int = 200) -> list[Candle]:
    candles = []
    prev = 100.0
    for i in range(n):
        close = 100 + 8 * math.sin(i / 6) + 0.01 * i
        candles.append(
            Candle(
                timestamp=i * 60_000,
                open=prev,
                high=max(prev, close) + 0.3,
                low=min(prev, close) - 0.3,
                close=close,
                volume=1000 + 200 * math.cos(i / 4),
            )
        )
        prev = close
    return candles


# ---------------------------------------------------------------------------
# Calculation tests
# ---------------------------------------------------------------------------

class TestWaveTrendLines:
    def test_flat_input_is_undefined(self):
        wt1, wt2 = wavetrend([100.0] * 80)
        assert all(v is None for v in wt1)
        assert all(v is None for v in wt2)

    def test_same_length_and_warmup(self):
        src = [c.hlc3 for c in _wave_candles(100)]
        wt1, wt2 = wavetrend(src, 10, 21, 4)

        assert len(wt1) == len(wt2) == 100
        # ESA at 9, D at 18, WT1 at 38, WT2 at 41
        assert wt1[37] is None
        assert wt1[38] is not None
        assert wt2[40] is None
        assert wt2[41] is not None


class TestFlag:
    def test_bullish_flag(self):
        generator = WaveTrendGenerator()
        assert generator.detect_flag(-60, -58, 25, 15) is Bias.BULLISH

    def test_bearish_flag(self):
        generator = WaveTrendGenerator()
        assert generator.detect_flag(60, 58, 75, 85) is Bias.BEARISH

    def test_needs_every_confirmation(self):
        generator = WaveTrendGenerator()
        assert generator.detect_flag(-60, -58, 25, 35) is None
        assert generator.detect_flag(-60, -50, 25, 15) is None


class TestDiamond:
    def test_bullish_diamond(self):
        generator = WaveTrendGenerator()
        assert generator.detect_diamond(-45, -50, -52, -50, 35) is Bias.BULLISH

    def test_bearish_diamond(self):
        generator = WaveTrendGenerator()
        assert generator.detect_diamond(45, 50, 52, 50, 65) is Bias.BEARISH

    def test_cross_outside_zone(self):
        generator = WaveTrendGenerator()
        assert generator.detect_diamond(-35, -40, -42, -40, 35) is None

    def test_rsi_not_confirming(self):
        generator = WaveTrendGenerator()
        assert generator.detect_diamond(-45, -50, -52, -50, 45) is None

    def test_no_previous_value(self):
        generator = WaveTrendGenerator()
        assert generator.detect_diamond(-45, -50, None, -50, 35) is None


# ---------------------------------------------------------------------------
# Evaluation tests
# ---------------------------------------------------------------------------

class TestEvaluate:
    def test_min_candles(self):
        assert WaveTrendGenerator().min_candles == 51

    def test_insufficient_history(self):
        assert WaveTrendGenerator().evaluate(_wave_candles(50)) is None

    def test_record_fields(self):
        result = WaveTrendGenerator().evaluate(_wave_candles(120))

        assert isinstance(result, WaveTrendSignal)
        assert result.indicator == "wavetrend"
        assert 0 <= result.rsi <= 100
        assert 0 <= result.mfi <= 100
        assert isinstance(result.wt_condition, WaveTrendCondition)

    def test_signal_follows_marks(self):
        generator = WaveTrendGenerator()
        candles = _wave_candles(200)

        for i in range(generator.min_candles, len(candles) + 1):
            result = generator.evaluate(candles[:i])
            if result is None:
                continue
            mark = result.diamond or result.flag
            expected = {Bias.BULLISH: Signal.BUY, Bias.BEARISH: Signal.SELL, None: Signal.NONE}[mark]
            assert result.signal is expected

    def test_diamond_beats_flag(self, monkeypatch):
        generator = WaveTrendGenerator()
        monkeypatch.setattr(generator, "detect_flag", lambda *args: Bias.BEARISH)
        monkeypatch.setattr(generator, "detect_diamond", lambda *args: Bias.BULLISH)

        result = generator.evaluate(_wave_candles(120))
        assert result.signal is Signal.BUY

    def test_flag_without_diamond(self, monkeypatch):
        generator = WaveTrendGenerator()
        monkeypatch.setattr(generator, "detect_flag", lambda *args: Bias.BEARISH)
        monkeypatch.setattr(generator, "detect_diamond", lambda *args: None)

        result = generator.evaluate(_wave_candles(120))
        assert result.signal is Signal.SELL
        assert result.flag is Bias.BEARISH

    def test_condition_thresholds(self):
        generator = WaveTrendGenerator(WaveTrendConfig(wt_overbought=10, wt_oversold=-10))
        assert generator._condition(20) is WaveTrendCondition.OVERBOUGHT
        assert generator._condition(-20) is WaveTrendCondition.OVERSOLD
        assert generator._condition(0) is WaveTrendCondition.NEUTRAL
