"""Heikin-Ashi crossover generator package.

Importing this package triggers generator registration via the
@register_generator decorator on HeikinAshiGenerator.
"""

from confluence.generators.heikin_ashi.generator import (
    HeikinAshiGenerator,
    double_tma_line,
    heikin_ashi_closes,
)
from confluence.generators.heikin_ashi.models import (
    HEIKIN_ASHI_GENERATOR_NAME,
    HeikinAshiConfig,
    HeikinAshiSignal,
)

__all__ = [
    "HeikinAshiGenerator",
    "HeikinAshiConfig",
    "HeikinAshiSignal",
    "HEIKIN_ASHI_GENERATOR_NAME",
    "double_tma_line",
    "heikin_ashi_closes",
]
