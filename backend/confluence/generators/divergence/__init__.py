"""Price/RSI divergence detector package."""

from confluence.generators.divergence.generator import (
    DivergenceGenerator,
    find_divergences,
    nearest_pivot,
)
from confluence.generators.divergence.models import (
    DIVERGENCE_GENERATOR_NAME,
    Divergence,
    DivergenceConfig,
    DivergenceKind,
    DivergenceSignal,
)

__all__ = [
    "DivergenceGenerator",
    "DivergenceConfig",
    "DivergenceSignal",
    "Divergence",
    "DivergenceKind",
    "DIVERGENCE_GENERATOR_NAME",
    "find_divergences",
    "nearest_pivot",
]
