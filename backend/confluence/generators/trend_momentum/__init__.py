"""Trend/momentum (ADX) generator package."""

from confluence.generators.trend_momentum.generator import (
    TrendMomentumGenerator,
    adx,
    directional_movement,
)
from confluence.generators.trend_momentum.models import (
    TREND_MOMENTUM_GENERATOR_NAME,
    TrendMomentumConfig,
    TrendMomentumSignal,
)

__all__ = [
    "TrendMomentumGenerator",
    "TrendMomentumConfig",
    "TrendMomentumSignal",
    "TREND_MOMENTUM_GENERATOR_NAME",
    "adx",
    "directional_movement",
]
