"""Price/RSI divergence configuration and signal models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from confluence.models.signal import IndicatorSignal

DIVERGENCE_GENERATOR_NAME = "divergence"


class DivergenceKind(str, Enum):
    REGULAR_BULLISH = "REGULAR_BULLISH"  # Lower price low, higher RSI low
    REGULAR_BEARISH = "REGULAR_BEARISH"  # Higher price high, lower RSI high
    HIDDEN_BULLISH = "HIDDEN_BULLISH"  # Higher price low, lower RSI low
    HIDDEN_BEARISH = "HIDDEN_BEARISH"  # Lower price high, higher RSI high


class Divergence(BaseModel):
    """Disagreement between two consecutive price pivots and their RSI pivots."""

    model_config = ConfigDict(frozen=True)

    kind: DivergenceKind
    price_index: int
    price_value: float
    previous_price_index: int
    rsi_value: float
    previous_rsi_value: float


class DivergenceConfig(BaseModel):
    """Configuration for the divergence detector."""

    rsi_period: int = 14
    pivot_left_bars: int = 5
    pivot_right_bars: int = 5
    min_pivot_distance: int = 5
    lookback_period: int = 60
    pivot_tolerance: int = 2  # Max bars between a price pivot and its RSI pivot


class DivergenceSignal(IndicatorSignal):
    """Divergence signal with every active divergence by kind."""

    indicator: str = DIVERGENCE_GENERATOR_NAME

    regular_bullish: bool = False
    regular_bearish: bool = False
    hidden_bullish: bool = False
    hidden_bearish: bool = False

    active_regular_bullish: list[Divergence] = Field(default_factory=list)
    active_regular_bearish: list[Divergence] = Field(default_factory=list)
    active_hidden_bullish: list[Divergence] = Field(default_factory=list)
    active_hidden_bearish: list[Divergence] = Field(default_factory=list)

    current_rsi: float | None = None
