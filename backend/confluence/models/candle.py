"""Candle (OHLCV) data model.

Candles use float for all numeric values and an epoch-millisecond
timestamp. The core never validates OHLC relationships; callers must
supply an oldest-first sequence.
"""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Candle:
    """One OHLCV observation for a fixed time interval."""

    timestamp: int  # Open time, epoch milliseconds
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def is_bullish(self) -> bool:
        """Check if this is a bullish (green) candle."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if this is a bearish (red) candle."""
        return self.close < self.open

    @property
    def body_size(self) -> float:
        """Get the absolute size of the candle body."""
        return abs(self.close - self.open)

    @property
    def range_size(self) -> float:
        """Get the full range (high - low) of the candle."""
        return self.high - self.low

    @property
    def ohlc4(self) -> float:
        return (self.open + self.high + self.low + self.close) / 4

    @property
    def hlc3(self) -> float:
        return (self.high + self.low + self.close) / 3

    @property
    def hl2(self) -> float:
        return (self.high + self.low) / 2
