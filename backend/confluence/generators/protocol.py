"""Generator protocol defining the interface all signal generators implement.

This module provides:
- SignalGenerator: Runtime-checkable Protocol that generators must satisfy
- safe_evaluate: Evaluation wrapper that isolates a failing generator
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence, runtime_checkable

from confluence.models.candle import Candle
from confluence.models.signal import IndicatorSignal

logger = logging.getLogger(__name__)


@runtime_checkable
class SignalGenerator(Protocol):
    """Protocol that all indicator signal generators must implement.

    Generators are pure: every call recomputes from the candle window it
    is given and keeps no state between calls, so one instance can be
    shared across threads.
    """

    @property
    def name(self) -> str:
        """Unique generator identifier (e.g., 'heikin_ashi')."""
        ...

    @property
    def version(self) -> str:
        """Generator version string (e.g., '1.0.0')."""
        ...

    @property
    def min_candles(self) -> int:
        """Minimum window length below which evaluate() returns None."""
        ...

    def evaluate(self, candles: Sequence[Candle]) -> IndicatorSignal | None:
        """Evaluate the latest bar of an oldest-first candle window.

        Args:
            candles: Full candle history available at evaluation time.

        Returns:
            The generator's signal record, or None when the window is too
            short for its lookback.
        """
        ...


def safe_evaluate(
    generator: SignalGenerator,
    candles: Sequence[Candle],
) -> IndicatorSignal | None:
    """Evaluate a generator, turning any internal failure into absence.

    One failing indicator must never abort the evaluation of the others,
    so exceptions are logged here and reported as a missing signal.
    """
    try:
        return generator.evaluate(candles)
    except Exception:
        logger.error(
            f"Generator {generator.name} failed on {len(candles)} candles",
            exc_info=True,
        )
        return None
