"""Whale (volume anomaly) detector package."""

from confluence.generators.whale.generator import WhaleGenerator, body_strength
from confluence.generators.whale.models import (
    WHALE_GENERATOR_NAME,
    WhaleConfig,
    WhaleSignal,
    WhaleType,
)

__all__ = [
    "WhaleGenerator",
    "WhaleConfig",
    "WhaleSignal",
    "WhaleType",
    "WHALE_GENERATOR_NAME",
    "body_strength",
]
