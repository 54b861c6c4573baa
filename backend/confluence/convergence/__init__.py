"""Convergence layer: weighted aggregation of the indicator generators."""

from confluence.convergence.aggregator import ConvergenceAggregator
from confluence.convergence.models import (
    GENERATOR_NAMES,
    SIGNAL_TYPES,
    Conflict,
    ConvergenceConfig,
    ConvergenceResult,
    ConvergenceScore,
    IndicatorSignals,
    IndicatorWeights,
    SignalsSummary,
)
from confluence.convergence.report import format_convergence_report, summarize_signals
from confluence.convergence.scoring import compute_score, decide, detect_conflicts

__all__ = [
    "ConvergenceAggregator",
    "ConvergenceConfig",
    "ConvergenceResult",
    "ConvergenceScore",
    "Conflict",
    "IndicatorSignals",
    "IndicatorWeights",
    "SignalsSummary",
    "GENERATOR_NAMES",
    "SIGNAL_TYPES",
    "compute_score",
    "decide",
    "detect_conflicts",
    "format_convergence_report",
    "summarize_signals",
]
