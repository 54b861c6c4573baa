"""WaveTrend oscillator generator package."""

from confluence.generators.wavetrend.generator import WaveTrendGenerator, wavetrend
from confluence.generators.wavetrend.models import (
    WAVETREND_GENERATOR_NAME,
    WaveTrendCondition,
    WaveTrendConfig,
    WaveTrendSignal,
)

__all__ = [
    "WaveTrendGenerator",
    "WaveTrendConfig",
    "WaveTrendSignal",
    "WaveTrendCondition",
    "WAVETREND_GENERATOR_NAME",
    "wavetrend",
]
