"""Convergence aggregator.

Runs every enabled generator over the same candle window, scores the
directional signals, checks for conflicts and emits one decision.

Generators are independent given the window, so they can be evaluated
sequentially, on a thread pool (``max_workers > 1``) or from asyncio
(``evaluate_async``); all three paths produce the same result.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from confluence.convergence.models import (
    SIGNAL_TYPES,
    ConvergenceConfig,
    ConvergenceResult,
    IndicatorSignals,
)
from confluence.convergence.report import summarize_signals
from confluence.convergence.scoring import compute_score, decide, detect_conflicts
from confluence.generators import SignalGenerator, create_generator, safe_evaluate
from confluence.models import Candle, IndicatorSignal, Signal

logger = logging.getLogger(__name__)


class ConvergenceAggregator:
    """Combine the enabled generators into a single weighted decision."""

    def __init__(
        self,
        config: ConvergenceConfig | None = None,
        generators: Sequence[SignalGenerator] | None = None,
    ):
        self.config = config or ConvergenceConfig()
        if generators is None:
            generators = [
                create_generator(name, config=self.config.generator_config(name))
                for name in self.config.enabled_generators
            ]
        self.generators = list(generators)

        names = [g.name for g in self.generators]
        unknown = [name for name in names if name not in SIGNAL_TYPES]
        if unknown:
            raise ValueError(
                f"No signal slot for generator(s) {', '.join(unknown)}; "
                f"expected names from {', '.join(SIGNAL_TYPES)}"
            )
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate generator name(s): {', '.join(duplicates)}")

    @property
    def enabled(self) -> list[str]:
        return [g.name for g in self.generators]

    @property
    def max_score(self) -> float:
        """Best attainable total before bonuses."""
        if not self.config.use_weights:
            return float(len(self.generators))
        return sum(self.config.weights.weight_for(name) for name in self.enabled)

    # =========================================================================
    # Signal collection
    # =========================================================================

    def collect_signals(self, candles: Sequence[Candle]) -> IndicatorSignals:
        """Evaluate every generator over the window."""
        if self.config.max_workers > 1 and len(self.generators) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                records = list(
                    pool.map(lambda g: safe_evaluate(g, candles), self.generators)
                )
        else:
            records = [safe_evaluate(g, candles) for g in self.generators]

        return self._fill(records)

    async def collect_signals_async(self, candles: Sequence[Candle]) -> IndicatorSignals:
        """Evaluate every generator in worker threads and gather the results."""
        records = await asyncio.gather(
            *[asyncio.to_thread(safe_evaluate, g, candles) for g in self.generators]
        )
        return self._fill(records)

    def _fill(self, records: Sequence[IndicatorSignal | None]) -> IndicatorSignals:
        """Place each record in its slot; a record of the wrong type is dropped."""
        slots = {}
        for generator, record in zip(self.generators, records):
            if record is None:
                continue
            expected = SIGNAL_TYPES[generator.name]
            if not isinstance(record, expected):
                logger.error(
                    f"Generator {generator.name} returned {type(record).__name__}, "
                    f"expected {expected.__name__}; treating as absent"
                )
                continue
            slots[generator.name] = record
        return IndicatorSignals(**slots)

    # =========================================================================
    # Aggregation
    # =========================================================================

    def aggregate(
        self,
        signals: IndicatorSignals,
        timestamp: int | None = None,
    ) -> ConvergenceResult:
        """Score a filled signals record and decide."""
        cfg = self.config
        enabled = self.enabled

        score = compute_score(signals, cfg.weights, enabled, cfg.required_convergence)
        conflicts = detect_conflicts(signals, enabled) if cfg.check_conflicts else []
        signal, confidence, reason = decide(score, cfg.use_weights, self.max_score)

        # One penalty, however many conflicts oppose the winner
        if signal is not Signal.NONE and any(c.opposes is signal for c in conflicts):
            confidence *= cfg.conflict_penalty

        if signal is Signal.BUY:
            contributing = list(score.buy_indicators)
        elif signal is Signal.SELL:
            contributing = list(score.sell_indicators)
        else:
            contributing = []

        return ConvergenceResult(
            signal=signal,
            confidence=confidence,
            reason=reason,
            buy_score=score.buy_score,
            sell_score=score.sell_score,
            contributing_indicators=contributing,
            conflicts=conflicts,
            score=score,
            summary=summarize_signals(signals),
            signals=signals,
            timestamp=timestamp,
        )

    def evaluate(self, candles: Sequence[Candle]) -> ConvergenceResult:
        """Evaluate the latest bar of an oldest-first candle window."""
        result = self.aggregate(
            self.collect_signals(candles),
            timestamp=candles[-1].timestamp if candles else None,
        )
        self._log_result(result)
        return result

    async def evaluate_async(self, candles: Sequence[Candle]) -> ConvergenceResult:
        """Async variant of evaluate(); generators run in worker threads."""
        result = self.aggregate(
            await self.collect_signals_async(candles),
            timestamp=candles[-1].timestamp if candles else None,
        )
        self._log_result(result)
        return result

    def _log_result(self, result: ConvergenceResult) -> None:
        if result.signal is Signal.NONE:
            logger.debug(
                f"No convergence: buy={result.buy_score:.2f} sell={result.sell_score:.2f}"
            )
            return
        logger.info(
            f"Convergent {result.signal.value} at {result.timestamp}: "
            f"confidence={result.confidence:.1f}% "
            f"indicators={','.join(result.contributing_indicators)}"
        )
        for conflict in result.conflicts:
            logger.warning(f"Conflict ({conflict.source}): {conflict.message}")
