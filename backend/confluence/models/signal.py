"""Signal and market-structure data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Signal(str, Enum):
    """Directional decision emitted by a generator or the aggregator."""

    BUY = "BUY"
    SELL = "SELL"
    NONE = "NONE"  # Evaluated, no condition met

    @property
    def opposite(self) -> "Signal":
        if self is Signal.BUY:
            return Signal.SELL
        if self is Signal.SELL:
            return Signal.BUY
        return Signal.NONE


class PivotKind(str, Enum):
    HIGH = "HIGH"
    LOW = "LOW"


class Pivot(BaseModel):
    """Local extremum over a symmetric window of neighbours."""

    model_config = ConfigDict(frozen=True)

    index: int
    value: float
    kind: PivotKind


class Bias(str, Enum):
    """Directional bias of a market structure or oscillator mark."""

    BULLISH = "BULLISH"
    BEARISH = "BEARISH"


class OrderBlock(BaseModel):
    """Last opposite-coloured candle before a strong directional move."""

    model_config = ConfigDict(frozen=True)

    kind: Bias
    index: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    strength_ratio: float  # Move size in ATR multiples


class IndicatorSignal(BaseModel):
    """Output record shared by ALL generators.

    Generator-specific models subclass this and add their own metadata
    fields (e.g. HeikinAshiSignal adds the two crossover lines).
    """

    indicator: str
    signal: Signal = Signal.NONE
    timestamp: int

    @property
    def is_buy(self) -> bool:
        return self.signal is Signal.BUY

    @property
    def is_sell(self) -> bool:
        return self.signal is Signal.SELL
