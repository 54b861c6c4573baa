"""Candle loading from CSV files.

Accepted columns (case-insensitive): a time column named ``timestamp``,
``open_time`` or ``openTime`` (epoch milliseconds or any date string
pandas can parse), plus ``open``, ``high``, ``low``, ``close``, ``volume``.
Rows are returned oldest first.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from confluence.models import Candle

logger = logging.getLogger(__name__)

TIME_COLUMNS = ("timestamp", "open_time", "opentime", "time", "date")
PRICE_COLUMNS = ("open", "high", "low", "close", "volume")


def _timestamps_ms(column: pd.Series) -> pd.Series:
    """Epoch milliseconds from a numeric or date-like column."""
    if pd.api.types.is_numeric_dtype(column):
        return column.astype("int64")
    parsed = pd.to_datetime(column, utc=True)
    return (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(milliseconds=1)


def candles_from_frame(df: pd.DataFrame) -> list[Candle]:
    """Convert a candle DataFrame into Candle objects, sorted by time."""
    df = df.rename(columns={c: c.strip().lower() for c in df.columns})

    time_column = next((c for c in TIME_COLUMNS if c in df.columns), None)
    if time_column is None:
        raise ValueError(f"No time column found; expected one of {TIME_COLUMNS}")
    missing = [c for c in PRICE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing candle columns: {', '.join(missing)}")

    df = df.assign(timestamp=_timestamps_ms(df[time_column]))
    df = df.sort_values("timestamp").reset_index(drop=True)
    prices = df[list(PRICE_COLUMNS)].astype("float64")

    return [
        Candle(
            timestamp=int(ts),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for ts, row in zip(df["timestamp"], prices.itertuples(index=False))
    ]


def load_candles_csv(path: str | Path) -> list[Candle]:
    """Read a candle CSV file."""
    df = pd.read_csv(path)
    candles = candles_from_frame(df)
    logger.info(f"Loaded {len(candles)} candles from {path}")
    return candles
