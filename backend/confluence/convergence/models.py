"""Convergence configuration, intermediate records and result models."""

from typing import Iterator

from pydantic import BaseModel, Field

from confluence.generators.divergence import DivergenceConfig, DivergenceSignal
from confluence.generators.heikin_ashi import HeikinAshiConfig, HeikinAshiSignal
from confluence.generators.koncorde import KoncordeConfig, KoncordeSignal
from confluence.generators.order_blocks import OrderBlockConfig, OrderBlockSignal
from confluence.generators.trend_momentum import TrendMomentumConfig, TrendMomentumSignal
from confluence.generators.wavetrend import WaveTrendConfig, WaveTrendSignal
from confluence.generators.whale import WhaleConfig, WhaleSignal
from confluence.models.signal import IndicatorSignal, Signal

# Fixed evaluation and reporting order
GENERATOR_NAMES: tuple[str, ...] = (
    "heikin_ashi",
    "trend_momentum",
    "koncorde",
    "wavetrend",
    "whale",
    "divergence",
    "order_blocks",
)

# Record type each slot of IndicatorSignals accepts
SIGNAL_TYPES: dict[str, type[IndicatorSignal]] = {
    "heikin_ashi": HeikinAshiSignal,
    "trend_momentum": TrendMomentumSignal,
    "koncorde": KoncordeSignal,
    "wavetrend": WaveTrendSignal,
    "whale": WhaleSignal,
    "divergence": DivergenceSignal,
    "order_blocks": OrderBlockSignal,
}


class IndicatorWeights(BaseModel):
    """Score contributed by each generator's directional signal."""

    heikin_ashi: float = 1.0
    trend_momentum: float = 1.0
    koncorde: float = 1.0
    wavetrend: float = 1.2  # Diamonds are strong
    whale: float = 0.8  # Confirmation more than standalone
    divergence: float = 1.0
    order_blocks: float = 1.1  # Institutional activity

    # Bonuses on top of the generator weight
    diamond_bonus: float = 0.5
    regular_divergence_bonus: float = 0.3

    def weight_for(self, name: str) -> float:
        return getattr(self, name)


class ConvergenceConfig(BaseModel):
    """Aggregator configuration with per-generator settings."""

    required_convergence: float = 2.0
    use_weights: bool = True
    check_conflicts: bool = True
    conflict_penalty: float = 0.8
    max_workers: int = 1  # > 1 fans generators out on a thread pool

    weights: IndicatorWeights = Field(default_factory=IndicatorWeights)

    use_heikin_ashi: bool = True
    use_trend_momentum: bool = True
    use_koncorde: bool = True
    use_wavetrend: bool = True
    use_whale: bool = True
    use_divergence: bool = True
    use_order_blocks: bool = True

    heikin_ashi: HeikinAshiConfig = Field(default_factory=HeikinAshiConfig)
    trend_momentum: TrendMomentumConfig = Field(default_factory=TrendMomentumConfig)
    koncorde: KoncordeConfig = Field(default_factory=KoncordeConfig)
    wavetrend: WaveTrendConfig = Field(default_factory=WaveTrendConfig)
    whale: WhaleConfig = Field(default_factory=WhaleConfig)
    divergence: DivergenceConfig = Field(default_factory=DivergenceConfig)
    order_blocks: OrderBlockConfig = Field(default_factory=OrderBlockConfig)

    def is_enabled(self, name: str) -> bool:
        return getattr(self, f"use_{name}")

    @property
    def enabled_generators(self) -> list[str]:
        return [name for name in GENERATOR_NAMES if self.is_enabled(name)]

    def generator_config(self, name: str) -> BaseModel:
        return getattr(self, name)


class IndicatorSignals(BaseModel):
    """One optional slot per generator, filled before scoring."""

    heikin_ashi: HeikinAshiSignal | None = None
    trend_momentum: TrendMomentumSignal | None = None
    koncorde: KoncordeSignal | None = None
    wavetrend: WaveTrendSignal | None = None
    whale: WhaleSignal | None = None
    divergence: DivergenceSignal | None = None
    order_blocks: OrderBlockSignal | None = None

    def get(self, name: str) -> IndicatorSignal | None:
        return getattr(self, name)

    def items(self) -> Iterator[tuple[str, IndicatorSignal | None]]:
        for name in GENERATOR_NAMES:
            yield name, getattr(self, name)

    def signal_of(self, name: str) -> Signal:
        """Directional value of a slot, NONE when the slot is empty."""
        record = self.get(name)
        return record.signal if record is not None else Signal.NONE


class ConvergenceScore(BaseModel):
    """Per-side score breakdown."""

    buy_score: float = 0.0
    sell_score: float = 0.0
    buy_indicators: list[str] = Field(default_factory=list)
    sell_indicators: list[str] = Field(default_factory=list)
    bonuses: list[str] = Field(default_factory=list)
    threshold: float = 2.0

    @property
    def buy_count(self) -> int:
        return len(self.buy_indicators)

    @property
    def sell_count(self) -> int:
        return len(self.sell_indicators)


class Conflict(BaseModel):
    """A signal that contradicts one side of the decision."""

    opposes: Signal
    source: str
    message: str


class SignalsSummary(BaseModel):
    """Buy/sell/neutral tallies across the generators that produced a record."""

    buy_signals: list[str] = Field(default_factory=list)
    sell_signals: list[str] = Field(default_factory=list)
    neutral_signals: list[str] = Field(default_factory=list)

    @property
    def buy_count(self) -> int:
        return len(self.buy_signals)

    @property
    def sell_count(self) -> int:
        return len(self.sell_signals)

    @property
    def neutral_count(self) -> int:
        return len(self.neutral_signals)


class ConvergenceResult(BaseModel):
    """Combined decision for the latest bar of a candle window."""

    signal: Signal = Signal.NONE
    confidence: float = 0.0  # Percent, 0-100
    reason: str = ""
    buy_score: float = 0.0
    sell_score: float = 0.0
    contributing_indicators: list[str] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    score: ConvergenceScore = Field(default_factory=ConvergenceScore)
    summary: SignalsSummary = Field(default_factory=SignalsSummary)
    signals: IndicatorSignals = Field(default_factory=IndicatorSignals)
    timestamp: int | None = None

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def warnings(self) -> list[str]:
        return [c.message for c in self.conflicts]
