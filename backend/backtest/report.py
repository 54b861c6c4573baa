"""Report formatting for scan results.

Outputs results to console (formatted tables) and JSON files.
"""

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime, timezone
from enum import Enum

from confluence.convergence import ConvergenceResult, format_convergence_report
from confluence.models import Signal

from backtest.runner import ScanResult


class ReportEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Counter):
            return dict(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def _fmt_time(timestamp_ms: int | None) -> str:
    if timestamp_ms is None:
        return "-"
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime(
        "%Y-%m-%d %H:%M"
    )


class ReportFormatter:
    """Format scan and convergence results for display and export."""

    @staticmethod
    def print_latest(result: ConvergenceResult) -> None:
        """Print the convergence report for a single evaluation."""
        print()
        print(f"  Bar: {_fmt_time(result.timestamp)} UTC")
        print(format_convergence_report(result))
        print()

    @staticmethod
    def print_console(result: ScanResult) -> None:
        """Print formatted scan report to console."""
        print("\n" + "=" * 70)
        print("  SIGNAL SCAN RESULTS")
        print("=" * 70)
        print(f"  Candles:        {result.total_candles}")
        print(f"  Evaluated bars: {result.evaluated_bars} (from {result.start}, step {result.step})")
        print(f"  Elapsed:        {result.elapsed_seconds:.1f}s")

        # By generator
        print("\n" + "-" * 70)
        print("  BY GENERATOR")
        print("-" * 70)
        print(f"  {'Generator':<16} {'Buy':>6} {'Sell':>6} {'None':>6}")
        for name, counts in result.generator_counts.items():
            print(
                f"  {name:<16} {counts[Signal.BUY.value]:>6} "
                f"{counts[Signal.SELL.value]:>6} {counts[Signal.NONE.value]:>6}"
            )

        # Convergent signals
        print("\n" + "-" * 70)
        print("  CONVERGENT SIGNALS")
        print("-" * 70)
        print(f"  Buy:  {len(result.buy_events)}")
        print(f"  Sell: {len(result.sell_events)}")
        if result.events:
            print(f"\n  {'Time (UTC)':<17} {'Bar':>6} {'Signal':<6} {'Conf%':>6}  Indicators")
            for e in result.events:
                flag = " !" if e.warnings else ""
                print(
                    f"  {_fmt_time(e.timestamp):<17} {e.index:>6} {e.signal.value:<6} "
                    f"{e.confidence:>6.1f}  {', '.join(e.indicators)}{flag}"
                )

        print("=" * 70 + "\n")

    @staticmethod
    def to_dict(result: ScanResult) -> dict:
        return {
            "total_candles": result.total_candles,
            "evaluated_bars": result.evaluated_bars,
            "start": result.start,
            "step": result.step,
            "elapsed_seconds": round(result.elapsed_seconds, 3),
            "generator_counts": result.generator_counts,
            "events": [
                {
                    "index": e.index,
                    "timestamp": e.timestamp,
                    "signal": e.signal,
                    "confidence": round(e.confidence, 2),
                    "indicators": e.indicators,
                    "warnings": e.warnings,
                }
                for e in result.events
            ],
        }

    @staticmethod
    def save_json(result: ScanResult | ConvergenceResult, path: str) -> None:
        """Save results to JSON file."""
        if isinstance(result, ConvergenceResult):
            data = result.model_dump(mode="json")
        else:
            data = ReportFormatter.to_dict(result)

        with open(path, "w") as f:
            json.dump(data, f, indent=2, cls=ReportEncoder)
        print(f"Results saved to {path}")
