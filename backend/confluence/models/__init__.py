"""Data models for candles, signals and market structures."""

from confluence.models.candle import Candle
from confluence.models.converters import (
    candle_from_kline_row,
    candle_from_mapping,
    candles_from_records,
    datetime_to_millis,
)
from confluence.models.signal import (
    Bias,
    IndicatorSignal,
    OrderBlock,
    Pivot,
    PivotKind,
    Signal,
)

__all__ = [
    "Bias",
    "Candle",
    "IndicatorSignal",
    "OrderBlock",
    "Pivot",
    "PivotKind",
    "Signal",
    "candle_from_kline_row",
    "candle_from_mapping",
    "candles_from_records",
    "datetime_to_millis",
]
