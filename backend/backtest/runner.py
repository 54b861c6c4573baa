"""SignalScanner: replays a candle history through the aggregator.

Every evaluation recomputes all generators over the window
``candles[: i + 1]``, so a full scan costs O(n) per step and O(n^2)
overall. ``start`` skips the warm-up region and ``step`` evaluates
every N-th bar to bound the cost on long histories.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from confluence.convergence import ConvergenceAggregator, ConvergenceResult
from confluence.models import Candle, Signal

logger = logging.getLogger(__name__)


@dataclass
class ScanEvent:
    """A convergent decision at one bar of the history."""

    index: int
    timestamp: int
    signal: Signal
    confidence: float
    indicators: list[str]
    warnings: list[str]


@dataclass
class ScanResult:
    """Outcome of scanning a candle history."""

    total_candles: int
    evaluated_bars: int
    start: int
    step: int
    elapsed_seconds: float = 0.0
    generator_counts: dict[str, Counter] = field(default_factory=dict)
    events: list[ScanEvent] = field(default_factory=list)

    @property
    def buy_events(self) -> list[ScanEvent]:
        return [e for e in self.events if e.signal is Signal.BUY]

    @property
    def sell_events(self) -> list[ScanEvent]:
        return [e for e in self.events if e.signal is Signal.SELL]


class SignalScanner:
    """Evaluate the aggregator over an expanding candle window."""

    def __init__(
        self,
        aggregator: ConvergenceAggregator,
        start: int | None = None,
        step: int = 1,
    ):
        if step < 1:
            raise ValueError(f"step must be >= 1, got {step}")
        self.aggregator = aggregator
        self.start = start
        self.step = step

    def _first_index(self) -> int:
        if self.start is not None:
            return max(self.start, 0)
        # Earliest bar at which any generator can produce a record
        shortest = min((g.min_candles for g in self.aggregator.generators), default=1)
        return max(shortest - 1, 0)

    def _record(self, result: ScanResult, index: int, outcome: ConvergenceResult) -> None:
        for name, record in outcome.signals.items():
            if record is not None:
                result.generator_counts.setdefault(name, Counter())[record.signal.value] += 1

        if outcome.signal is not Signal.NONE:
            result.events.append(
                ScanEvent(
                    index=index,
                    timestamp=outcome.timestamp,
                    signal=outcome.signal,
                    confidence=outcome.confidence,
                    indicators=outcome.contributing_indicators,
                    warnings=outcome.warnings,
                )
            )

    def scan(self, candles: Sequence[Candle]) -> ScanResult:
        """Evaluate every ``step``-th bar from ``start`` to the end."""
        started = time.time()
        first = self._first_index()
        result = ScanResult(
            total_candles=len(candles),
            evaluated_bars=0,
            start=first,
            step=self.step,
        )

        logger.info(
            f"Scanning {len(candles)} candles from bar {first} every {self.step} bar(s)"
        )

        for i in range(first, len(candles), self.step):
            outcome = self.aggregator.evaluate(candles[: i + 1])
            self._record(result, i, outcome)
            result.evaluated_bars += 1

        result.elapsed_seconds = time.time() - started
        logger.info(
            f"Scan complete: {result.evaluated_bars} bars, {len(result.events)} convergent "
            f"signals in {result.elapsed_seconds:.1f}s"
        )
        return result
