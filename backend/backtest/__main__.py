"""CLI entry point for offline signal analysis.

Reads a candle CSV and either reports the convergent signal for the
latest bar or scans the whole history.

Usage:
    python -m backtest candles.csv
    python -m backtest candles.csv --scan --start 500 --step 4
    python -m backtest candles.csv --scan --count-mode --required-convergence 3
    python -m backtest candles.csv --scan --workers 4 --output scan.json
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Add backend to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from confluence.config import get_settings
from confluence.convergence import ConvergenceAggregator

from backtest.candle_source import load_candles_csv
from backtest.report import ReportFormatter
from backtest.runner import SignalScanner


def existing_file(path_str: str) -> Path:
    """Validate that a CSV path exists."""
    path = Path(path_str)
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"File not found: {path_str}")
    return path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convergent indicator signals over a candle history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m backtest candles.csv
  python -m backtest candles.csv --scan --start 500 --step 4
  python -m backtest candles.csv --scan --count-mode --required-convergence 3
        """,
    )

    parser.add_argument(
        "candles",
        type=existing_file,
        help="CSV file with timestamp,open,high,low,close,volume columns",
    )
    parser.add_argument(
        "--scan",
        action="store_true",
        help="Scan the whole history instead of only the latest bar",
    )
    parser.add_argument(
        "--start",
        type=int,
        default=None,
        help="First bar index to evaluate when scanning (default: warm-up end)",
    )
    parser.add_argument(
        "--step",
        type=int,
        default=1,
        help="Evaluate every N-th bar when scanning (default: 1)",
    )

    # Aggregator overrides (defaults come from CONFLUENCE_* settings)
    parser.add_argument(
        "--required-convergence",
        type=float,
        default=None,
        help="Minimum score (or count) for a convergent signal",
    )
    parser.add_argument(
        "--count-mode",
        action="store_true",
        help="Compare sides by number of agreeing generators instead of weights",
    )
    parser.add_argument(
        "--no-conflicts",
        action="store_true",
        help="Disable conflict detection",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Thread pool size for generator fan-out",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for JSON results",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )

    args = parser.parse_args(argv)
    if args.step < 1:
        parser.error("--step must be >= 1")
    return args


def build_aggregator(args: argparse.Namespace) -> ConvergenceAggregator:
    """Aggregator from settings with CLI overrides applied."""
    overrides = {}
    if args.required_convergence is not None:
        overrides["required_convergence"] = args.required_convergence
    if args.count_mode:
        overrides["use_weights"] = False
    if args.no_conflicts:
        overrides["check_conflicts"] = False
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    return ConvergenceAggregator(get_settings().convergence_config(**overrides))


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()

    # Configure logging
    level = logging.DEBUG if args.verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    try:
        candles = load_candles_csv(args.candles)
    except (ValueError, OSError) as e:
        print(f"Error: cannot read {args.candles}: {e}")
        sys.exit(2)

    if not candles:
        print(f"Error: {args.candles} contains no candles")
        sys.exit(2)

    aggregator = build_aggregator(args)

    if args.scan:
        scanner = SignalScanner(aggregator, start=args.start, step=args.step)
        result = scanner.scan(candles)
        ReportFormatter.print_console(result)
    else:
        result = await aggregator.evaluate_async(candles)
        ReportFormatter.print_latest(result)

    # Optional: save JSON
    if args.output:
        ReportFormatter.save_json(result, args.output)


if __name__ == "__main__":
    asyncio.run(main())
