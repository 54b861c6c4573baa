"""Tests for the price/RSI divergence detector."""

import math

import pytest

from confluence.generators.divergence import (
    Divergence,
    DivergenceConfig,
    DivergenceGenerator,
    DivergenceKind,
    DivergenceSignal,
    find_divergences,
    nearest_pivot,
)
from confluence.indicators import rsi
from confluence.models import Candle, Pivot, PivotKind, Signal


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _low(index: int, value: float) -> Pivot:
    return Pivot(index=index, value=value, kind=PivotKind.LOW)


def _high(index: int, value: float) -> Pivot:
    return Pivot(index=index, value=value, kind=PivotKind.HIGH)


def _bullish(price_lows, rsi_lows, **kwargs):
    return find_divergences(
        price_lows, rsi_lows,
        DivergenceKind.REGULAR_BULLISH, DivergenceKind.HIDDEN_BULLISH, **kwargs,
    )


def _bearish(price_highs, rsi_highs, **kwargs):
    return find_divergences(
        price_highs, rsi_highs,
        DivergenceKind.REGULAR_BEARISH, DivergenceKind.HIDDEN_BEARISH, **kwargs,
    )


def _divergence(kind: DivergenceKind, price_index: int) -> Divergence:
    return Divergence(
        kind=kind,
        price_index=price_index,
        price_value=100.0,
        previous_price_index=price_index - 10,
        rsi_value=40.0,
        previous_rsi_value=35.0,
    )


def _wave_candles(n: int = 100) -> list[Candle]:
    candles = []
    for i in range(n):
        close = 100 + 5 * math.sin(i / 5)
        candles.append(
            Candle(timestamp=i * 60_000, open=close, high=close + 0.5, low=close - 0.5,
                   close=close, volume=100.0)
        )
    return candles


def _candles_from_closes(closes: list[float]) -> list[Candle]:
    return [
        Candle(timestamp=i * 60_000, open=close, high=close + 0.5, low=close - 0.5,
               close=close, volume=100.0)
        for i, close in enumerate(closes)
    ]


def _double_bottom_closes() -> list[float]:
    """Steep drop to 69 at bar 29, bounce, slower drop to 66 at bar 46, recovery.

    The second low is lower in price but the slower selling leaves RSI(5)
    near 11 against roughly 2 at the first low.
    """
    closes = [100.0 + i for i in range(20)]  # 100 .. 119
    closes += [119.0 - 5 * i for i in range(1, 11)]  # 114 .. 69, bar 29
    closes += [69.0 + 3 * i for i in range(1, 9)]  # 72 .. 93, bar 37
    closes += [93.0 - 3 * i for i in range(1, 10)]  # 90 .. 66, bar 46
    closes += [66.0 + 3 * i for i in range(1, 7)]  # 69 .. 84
    return closes


def _small_config() -> DivergenceConfig:
    return DivergenceConfig(rsi_period=5, pivot_left_bars=3, pivot_right_bars=3)


# ---------------------------------------------------------------------------
# Pivot matching
# ---------------------------------------------------------------------------

class TestNearestPivot:
    def test_closest_wins(self):
        pivots = [_low(8, 1.0), _low(11, 2.0), _low(14, 3.0)]
        assert nearest_pivot(pivots, 10, 2).index == 11

    def test_outside_tolerance(self):
        assert nearest_pivot([_low(13, 1.0)], 10, 2) is None

    def test_tie_prefers_earlier(self):
        pivots = [_low(9, 1.0), _low(11, 2.0)]
        assert nearest_pivot(pivots, 10, 2).index == 9


# ---------------------------------------------------------------------------
# Divergence classification
# ---------------------------------------------------------------------------

class TestFindDivergences:
    def test_regular_bullish(self):
        found = _bullish([_low(10, 100.0), _low(20, 95.0)], [_low(11, 30.0), _low(21, 35.0)])

        assert len(found) == 1
        assert found[0].kind is DivergenceKind.REGULAR_BULLISH
        assert found[0].price_index == 20
        assert found[0].previous_price_index == 10
        assert found[0].rsi_value == 35.0
        assert found[0].previous_rsi_value == 30.0

    def test_lock_step_lows_are_not_divergent(self):
        found = _bullish([_low(10, 100.0), _low(20, 95.0)], [_low(11, 30.0), _low(21, 25.0)])
        assert found == []

    def test_hidden_bullish(self):
        found = _bullish([_low(10, 100.0), _low(20, 105.0)], [_low(10, 30.0), _low(20, 25.0)])
        assert [d.kind for d in found] == [DivergenceKind.HIDDEN_BULLISH]

    def test_regular_bearish(self):
        found = _bearish([_high(10, 100.0), _high(20, 105.0)], [_high(10, 70.0), _high(20, 65.0)])
        assert [d.kind for d in found] == [DivergenceKind.REGULAR_BEARISH]

    def test_hidden_bearish(self):
        found = _bearish([_high(10, 100.0), _high(20, 95.0)], [_high(10, 65.0), _high(20, 70.0)])
        assert [d.kind for d in found] == [DivergenceKind.HIDDEN_BEARISH]

    def test_min_distance(self):
        found = _bullish(
            [_low(10, 100.0), _low(13, 95.0)], [_low(10, 30.0), _low(13, 35.0)], min_distance=5
        )
        assert found == []

    def test_rsi_pivot_out_of_tolerance(self):
        found = _bullish([_low(10, 100.0), _low(20, 95.0)], [_low(10, 30.0), _low(24, 35.0)])
        assert found == []

    def test_consecutive_pairs_only(self):
        price = [_low(10, 100.0), _low(20, 95.0), _low(30, 90.0)]
        rsi = [_low(10, 30.0), _low(20, 35.0), _low(30, 40.0)]
        found = _bullish(price, rsi)
        assert [(d.previous_price_index, d.price_index) for d in found] == [(10, 20), (20, 30)]


# ---------------------------------------------------------------------------
# Evaluation tests
# ---------------------------------------------------------------------------

class TestEvaluate:
    def test_min_candles(self):
        assert DivergenceGenerator().min_candles == 14 + 5 + 5 + 10

    def test_insufficient_history(self):
        assert DivergenceGenerator().evaluate(_wave_candles(33)) is None

    def test_record_on_real_series(self):
        result = DivergenceGenerator().evaluate(_wave_candles(120))

        assert isinstance(result, DivergenceSignal)
        assert result.current_rsi is not None
        assert result.regular_bullish == bool(result.active_regular_bullish)
        if result.regular_bullish:
            assert result.signal is Signal.BUY

    def test_active_regular_bullish_buys(self, monkeypatch):
        generator = DivergenceGenerator()
        monkeypatch.setattr(
            generator,
            "detect",
            lambda candles, rsi_line=None: [_divergence(DivergenceKind.REGULAR_BULLISH, 50)],
        )
        result = generator.evaluate(_wave_candles(100))

        assert result.signal is Signal.BUY
        assert result.regular_bullish
        assert len(result.active_regular_bullish) == 1

    def test_old_divergence_is_inactive(self, monkeypatch):
        generator = DivergenceGenerator()
        # lookback 60 on 100 candles: active from index 39
        monkeypatch.setattr(
            generator,
            "detect",
            lambda candles, rsi_line=None: [_divergence(DivergenceKind.REGULAR_BULLISH, 38)],
        )
        result = generator.evaluate(_wave_candles(100))

        assert result.signal is Signal.NONE
        assert not result.regular_bullish

    def test_bullish_takes_precedence(self, monkeypatch):
        generator = DivergenceGenerator()
        monkeypatch.setattr(
            generator,
            "detect",
            lambda candles, rsi_line=None: [
                _divergence(DivergenceKind.REGULAR_BEARISH, 80),
                _divergence(DivergenceKind.REGULAR_BULLISH, 60),
            ],
        )
        result = generator.evaluate(_wave_candles(100))

        assert result.regular_bearish
        assert result.signal is Signal.BUY

    def test_regular_bearish_sells(self, monkeypatch):
        generator = DivergenceGenerator()
        monkeypatch.setattr(
            generator,
            "detect",
            lambda candles, rsi_line=None: [_divergence(DivergenceKind.REGULAR_BEARISH, 80)],
        )
        assert generator.evaluate(_wave_candles(100)).signal is Signal.SELL

    def test_hidden_is_reported_only(self, monkeypatch):
        generator = DivergenceGenerator(DivergenceConfig(lookback_period=30))
        monkeypatch.setattr(
            generator,
            "detect",
            lambda candles, rsi_line=None: [
                _divergence(DivergenceKind.HIDDEN_BULLISH, 90),
                _divergence(DivergenceKind.HIDDEN_BEARISH, 95),
            ],
        )
        result = generator.evaluate(_wave_candles(100))

        assert result.hidden_bullish
        assert result.hidden_bearish
        assert result.signal is Signal.NONE


class TestEvaluateOnPrices:
    """Full pipeline from candles through RSI and pivots, nothing patched."""

    def test_lower_low_with_higher_rsi_buys(self):
        result = DivergenceGenerator(_small_config()).evaluate(
            _candles_from_closes(_double_bottom_closes())
        )

        assert result.signal is Signal.BUY
        assert result.regular_bullish
        assert not result.regular_bearish
        (divergence,) = result.active_regular_bullish
        assert divergence.previous_price_index == 29
        assert divergence.price_index == 46
        assert divergence.price_value == pytest.approx(65.5)
        assert divergence.rsi_value > divergence.previous_rsi_value

    def test_higher_high_with_lower_rsi_sells(self):
        closes = [200.0 - close for close in _double_bottom_closes()]
        result = DivergenceGenerator(_small_config()).evaluate(_candles_from_closes(closes))

        assert result.signal is Signal.SELL
        assert result.regular_bearish
        assert not result.regular_bullish
        (divergence,) = result.active_regular_bearish
        assert divergence.previous_price_index == 29
        assert divergence.price_index == 46
        assert divergence.price_value == pytest.approx(134.5)
        assert divergence.rsi_value < divergence.previous_rsi_value

    def test_current_rsi_is_last_rsi_value(self):
        closes = _double_bottom_closes()
        result = DivergenceGenerator(_small_config()).evaluate(_candles_from_closes(closes))

        assert result.current_rsi == pytest.approx(rsi(closes, 5)[-1])
