"""Koncorde volume-index oscillator generator package."""

from confluence.generators.koncorde.generator import (
    KoncordeGenerator,
    bollinger_oscillator,
    market_strength,
    negative_volume_index,
    positive_volume_index,
)
from confluence.generators.koncorde.models import (
    KONCORDE_GENERATOR_NAME,
    KoncordeConfig,
    KoncordeSignal,
    MfiCondition,
)

__all__ = [
    "KoncordeGenerator",
    "KoncordeConfig",
    "KoncordeSignal",
    "MfiCondition",
    "KONCORDE_GENERATOR_NAME",
    "bollinger_oscillator",
    "market_strength",
    "negative_volume_index",
    "positive_volume_index",
]
