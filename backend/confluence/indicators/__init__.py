"""Technical indicator series primitives (pure math, no I/O)."""

from confluence.indicators.indicators import (
    Series,
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
    rsi,
    sma,
    stddev,
    triple_ema,
    true_range,
    typical_price,
    vwap,
    wilder_sum,
    wma,
)
from confluence.indicators.pivots import pivot_highs, pivot_lows

__all__ = [
    "Series",
    "atr",
    "bollinger_bands",
    "ema",
    "highest",
    "hl2",
    "hlc3",
    "lowest",
    "mfi",
    "momentum",
    "ohlc4",
    "pivot_highs",
    "pivot_lows",
    "rsi",
    "sma",
    "stddev",
    "triple_ema",
    "true_range",
    "typical_price",
    "vwap",
    "wilder_sum",
    "wma",
]
