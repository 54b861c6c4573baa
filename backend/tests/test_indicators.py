"""Tests for technical indicator series primitives."""

import math

import pytest

from confluence.indicators import (
    atr,
    bollinger_bands,
    ema,
    highest,
    hl2,
    hlc3,
    lowest,
    mfi,
    momentum,
    ohlc4,
    pivot_highs,
    pivot_lows,
    rsi,
    sma,
    stddev,
    triple_ema,
    true_range,
    vwap,
    wilder_sum,
    wma,
)
from confluence.models import PivotKind


class TestInsufficientHistory:
    """Every primitive returns an all-undefined series of the same length."""

    @pytest.mark.parametrize("period", [3, 5, 14])
    def test_single_input_primitives(self, period):
        values = [float(i) for i in range(1, period)]  # period - 1 values

        for fn in (sma, ema, wma, stddev, highest, lowest, triple_ema, wilder_sum, rsi, momentum):
            result = fn(values, period)
            assert len(result) == len(values), fn.__name__
            assert all(v is None for v in result), fn.__name__

    @pytest.mark.parametrize("period", [3, 5, 14])
    def test_ohlcv_primitives(self, period):
        n = period - 1
        highs = [102.0] * n
        lows = [100.0] * n
        closes = [101.0] * n
        volumes = [1000.0] * n

        for result in (
            atr(highs, lows, closes, period),
            mfi(highs, lows, closes, volumes, period),
            vwap(highs, lows, closes, volumes, period),
            *bollinger_bands(closes, period),
        ):
            assert len(result) == n
            assert all(v is None for v in result)

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            sma([1.0, 2.0], 0)
        with pytest.raises(ValueError):
            ema([1.0, 2.0], -1)


class TestPriceTransforms:
    def test_transforms(self):
        assert ohlc4([10.0], [12.0], [8.0], [11.0]) == [10.25]
        assert hlc3([12.0], [9.0], [12.0]) == [11.0]
        assert hl2([12.0], [8.0]) == [10.0]


class TestSMA:
    def test_sma_basic(self):
        values = [float(i) for i in range(1, 11)]  # 1-10
        result = sma(values, 3)

        assert result[0] is None
        assert result[1] is None
        assert result[2] == pytest.approx(2.0)
        assert result[3] == pytest.approx(3.0)

    def test_sma_window_with_undefined(self):
        result = sma([None, 1.0, 2.0, 3.0], 2)
        assert result == [None, None, pytest.approx(1.5), pytest.approx(2.5)]


class TestEMA:
    def test_ema_seed_equals_sma(self):
        values = [float(i) for i in range(1, 11)]
        result = ema(values, 5)

        assert result[3] is None
        assert result[4] == pytest.approx(3.0)
        assert result[4] == pytest.approx(sma(values, 5)[4])
        assert result[5] > result[4]

    def test_ema_recurrence(self):
        result = ema([1.0, 2.0, 3.0, 4.0], 3)
        # k = 0.5, seed 2.0 at index 2
        assert result[3] == pytest.approx((4.0 - 2.0) * 0.5 + 2.0)

    def test_chained_ema_warmup(self):
        values = [float(i) for i in range(1, 11)]
        inner = ema(values, 3)
        outer = ema(inner, 3)

        # Inner first defined at 2, outer needs 3 defined inner values
        assert outer[3] is None
        assert outer[4] == pytest.approx((inner[2] + inner[3] + inner[4]) / 3)

    def test_gap_after_seed(self):
        result = ema([1.0, 2.0, 3.0, None, 5.0], 3)
        assert result[3] is None
        assert result[4] == pytest.approx((5.0 - 2.0) * 0.5 + 2.0)

    def test_triple_ema_of_constant(self):
        result = triple_ema([7.0] * 20, 3)
        assert result[5] is None
        assert result[6] == pytest.approx(7.0)
        assert result[-1] == pytest.approx(7.0)


class TestWMA:
    def test_wma_weights_recent_heaviest(self):
        result = wma([1.0, 2.0, 3.0], 3)
        assert result[2] == pytest.approx((1 * 1 + 2 * 2 + 3 * 3) / 6)


class TestRSI:
    def test_strictly_increasing_is_100(self):
        values = [float(i) for i in range(1, 31)]
        result = rsi(values, 14)

        assert all(v is None for v in result[:14])
        assert all(v == 100.0 for v in result[14:])

    def test_strictly_decreasing_is_0(self):
        values = [float(100 - i) for i in range(30)]
        result = rsi(values, 14)
        assert result[-1] == pytest.approx(0.0)

    def test_bounded(self):
        values = [100 + 5 * math.sin(i / 3) for i in range(100)]
        result = rsi(values, 14)
        assert all(0 <= v <= 100 for v in result[14:])


class TestMFI:
    def test_rising_typical_price_is_100(self):
        n = 30
        closes = [100.0 + i for i in range(n)]
        highs = [c + 1 for c in closes]
        lows = [c - 1 for c in closes]
        result = mfi(highs, lows, closes, [500.0] * n, 14)

        assert result[13] is None
        assert result[14] == 100.0
        assert result[-1] == 100.0

    def test_unchanged_typical_price_is_negative_flow(self):
        n = 20
        result = mfi([101.0] * n, [99.0] * n, [100.0] * n, [500.0] * n, 14)
        assert result[-1] == pytest.approx(0.0)


class TestMomentum:
    def test_rate_of_change(self):
        values = [100.0] * 10 + [110.0]
        result = momentum(values, 10)
        assert result[9] is None
        assert result[10] == pytest.approx(10.0)

    def test_zero_base_is_undefined(self):
        assert momentum([0.0, 5.0], 1) == [None, None]


class TestVolatility:
    def test_true_range_uses_previous_close(self):
        tr = true_range([10.0, 15.0], [8.0, 12.0], [9.0, 14.0])
        assert tr == [2.0, 6.0]

    def test_atr_constant_range(self):
        result = atr([102.0] * 20, [100.0] * 20, [101.0] * 20, 9)
        assert result[7] is None
        assert result[8] == pytest.approx(2.0)
        assert result[-1] == pytest.approx(2.0)

    def test_stddev_population(self):
        result = stddev([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0], 8)
        assert result[-1] == pytest.approx(2.0)

    def test_bollinger_bands(self):
        values = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]
        upper, middle, lower = bollinger_bands(values, 8, 2.0)
        assert middle[-1] == pytest.approx(5.0)
        assert upper[-1] == pytest.approx(9.0)
        assert lower[-1] == pytest.approx(1.0)

    def test_wilder_sum(self):
        result = wilder_sum([1.0] * 5, 3)
        assert result[:2] == [None, None]
        assert result[2] == pytest.approx(3.0)
        assert result[4] == pytest.approx(3.0)


class TestHighestLowest:
    def test_highest_basic(self):
        result = highest([1.0, 3.0, 2.0, 5.0, 4.0, 6.0], 3)
        assert result[:2] == [None, None]
        assert result[2:] == [3.0, 5.0, 5.0, 6.0]

    def test_lowest_basic(self):
        result = lowest([5.0, 3.0, 4.0, 1.0, 6.0, 2.0], 3)
        assert result[2:] == [3.0, 1.0, 1.0, 1.0]


class TestVWAP:
    def test_weighted_by_volume(self):
        result = vwap([10.0, 20.0], [10.0, 20.0], [10.0, 20.0], [1.0, 3.0], 2)
        assert result[0] is None
        assert result[1] == pytest.approx((10 * 1 + 20 * 3) / 4)

    def test_zero_volume_is_undefined(self):
        result = vwap([10.0] * 3, [9.0] * 3, [9.5] * 3, [0.0] * 3, 2)
        assert result == [None, None, None]


class TestPivots:
    def test_pivot_high(self):
        pivots = pivot_highs([1.0, 2.0, 5.0, 2.0, 1.0], 2, 2)
        assert len(pivots) == 1
        assert pivots[0].index == 2
        assert pivots[0].value == 5.0
        assert pivots[0].kind is PivotKind.HIGH

    def test_pivot_low(self):
        pivots = pivot_lows([5.0, 4.0, 1.0, 4.0, 5.0, 3.0, 6.0], 2, 2)
        assert [p.index for p in pivots] == [2]

    def test_ties_disqualify(self):
        assert pivot_highs([1.0, 5.0, 5.0, 1.0], 1, 1) == []

    def test_recent_bars_never_pivots(self):
        # The maximum sits inside the last right_bars bars
        assert pivot_highs([1.0, 2.0, 3.0, 4.0, 9.0, 1.0], 2, 2) == []

    def test_undefined_neighbours_skip(self):
        assert pivot_lows([None, 5.0, 1.0, 5.0, 6.0], 2, 2) == []

    def test_negative_window_raises(self):
        with pytest.raises(ValueError):
            pivot_highs([1.0, 2.0], -1, 1)
