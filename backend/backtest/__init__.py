"""Offline signal analysis over stored candle histories.

Depends only on confluence/ for the signal logic.

- candle_source: CSV -> Candle list (pandas)
- runner: expanding-window scan through the convergence aggregator
- report: console tables and JSON export

Usage:
    python -m backtest candles.csv
    python -m backtest candles.csv --scan --step 4
"""

from backtest.candle_source import candles_from_frame, load_candles_csv
from backtest.runner import ScanEvent, ScanResult, SignalScanner

__all__ = [
    "ScanEvent",
    "ScanResult",
    "SignalScanner",
    "candles_from_frame",
    "load_candles_csv",
]
