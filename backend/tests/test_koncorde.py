"""Tests for the Koncorde volume-index generator."""

import pytest

from confluence.generators.koncorde import (
    KoncordeConfig,
    KoncordeGenerator,
    KoncordeSignal,
    MfiCondition,
    bollinger_oscillator,
    market_strength,
    negative_volume_index,
    positive_volume_index,
)
from confluence.models import Candle, Signal


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SMALL_CONFIG = KoncordeConfig(pvi_period=20, nvi_period=20, mfi_period=14, bb_period=20)


def _make_candle(i: int, close: float, volume: float, prev_close: float | None = None) -> Candle:
    open_ = prev_close if prev_close is not None else close
    return Candle(
        timestamp=i * 60_000,
        open=open_,
        high=max(open_, close) + 0.2,
        low=min(open_, close) - 0.2,
        close=close,
        volume=volume,
    )


def _trend(n: int, step: float, volume_step: float) -> list[Candle]:
    """Linear close trend with a linear volume trend."""
    candles = []
    prev = None
    for i in range(n):
        close = 100.0 + step * i
        candles.append(_make_candle(i, close, 1000.0 + volume_step * i, prev))
        prev = close
    return candles


# ---------------------------------------------------------------------------
# Calculation tests
# ---------------------------------------------------------------------------

class TestVolumeIndices:
    def test_pvi_moves_on_rising_volume(self):
        candles = [
            _make_candle(0, 100.0, 10.0),
            _make_candle(1, 110.0, 20.0),
            _make_candle(2, 99.0, 5.0),
        ]
        assert positive_volume_index(candles) == [1000.0, pytest.approx(1100.0), pytest.approx(1100.0)]

    def test_nvi_moves_on_falling_volume(self):
        candles = [
            _make_candle(0, 100.0, 10.0),
            _make_candle(1, 110.0, 20.0),
            _make_candle(2, 99.0, 5.0),
        ]
        assert negative_volume_index(candles) == [1000.0, 1000.0, pytest.approx(900.0)]

    def test_zero_previous_close_holds(self):
        candles = [_make_candle(0, 0.0, 10.0), _make_candle(1, 5.0, 20.0)]
        assert positive_volume_index(candles) == [1000.0, 1000.0]

    def test_empty(self):
        assert positive_volume_index([]) == []


class TestBollingerOscillator:
    def test_zero_bandwidth(self):
        result = bollinger_oscillator([100.0] * 25, 20)
        assert result[18] is None
        assert result[19] == 0.0
        assert result[-1] == 0.0

    def test_clamped(self):
        result = bollinger_oscillator([100.0] * 19 + [200.0], 20)
        assert result[-1] == 100.0

        result = bollinger_oscillator([100.0] * 19 + [0.0], 20)
        assert result[-1] == -100.0


class TestMarketStrength:
    def test_strength(self):
        result = market_strength([10.0, 12.0], [5.0, 4.0], [None, 11.0], [None, 5.0])
        assert result == [None, pytest.approx((12 - 11) - (4 - 5))]


# ---------------------------------------------------------------------------
# Evaluation tests
# ---------------------------------------------------------------------------

class TestEvaluate:
    def test_min_candles_default(self):
        assert KoncordeGenerator().min_candles == 265

    def test_insufficient_history(self):
        generator = KoncordeGenerator(SMALL_CONFIG)
        assert generator.evaluate(_trend(29, -1.0, -10.0)) is None

    def test_buy_on_oversold_decline(self):
        generator = KoncordeGenerator(SMALL_CONFIG)
        result = generator.evaluate(_trend(40, -1.0, -10.0))

        assert isinstance(result, KoncordeSignal)
        assert result.mfi < 20
        assert result.mfi_condition is MfiCondition.OVERSOLD
        assert result.bb_oscillator < -50
        assert result.strength > 0
        assert result.signal is Signal.BUY

    def test_sell_on_overbought_rally(self):
        generator = KoncordeGenerator(SMALL_CONFIG)
        result = generator.evaluate(_trend(40, 1.0, -10.0))

        assert result.mfi > 80
        assert result.mfi_condition is MfiCondition.OVERBOUGHT
        assert result.bb_oscillator > 50
        assert result.strength < 0
        assert result.signal is Signal.SELL

    def test_no_signal_when_strength_disagrees(self):
        # Rising volume on a decline drags PVI below its average
        generator = KoncordeGenerator(SMALL_CONFIG)
        result = generator.evaluate(_trend(40, -1.0, 10.0))

        assert result.strength < 0
        assert result.signal is Signal.NONE
