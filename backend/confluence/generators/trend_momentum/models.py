"""Trend/momentum (ADX) configuration and signal models."""

from pydantic import BaseModel

from confluence.models.signal import IndicatorSignal

TREND_MOMENTUM_GENERATOR_NAME = "trend_momentum"


class TrendMomentumConfig(BaseModel):
    """Configuration for the ADX trend/momentum generator."""

    adx_length: int = 14
    adx_threshold: float = 25.0
    momentum_period: int = 10
    pivot_left_bars: int = 5
    pivot_right_bars: int = 5


class TrendMomentumSignal(IndicatorSignal):
    """Trend/momentum signal with the directional readings at the pivot bar."""

    indicator: str = TREND_MOMENTUM_GENERATOR_NAME

    adx: float
    plus_di: float | None = None
    minus_di: float | None = None
    momentum: float
    is_pivot_high: bool = False
    is_pivot_low: bool = False
    pivot_index: int  # Bar checked for a confirmed pivot; readings are taken here
