"""Converters from collaborator payloads to Candle sequences.

Accepted shapes:
- mappings with timestamp/open/high/low/close/volume keys
  (``openTime`` is accepted in place of ``timestamp``)
- exchange kline rows: [open_time, open, high, low, close, volume, ...]
  with prices possibly encoded as strings

Conversion is the only place where input types are coerced; the core
itself works on floats throughout.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

from confluence.models.candle import Candle


def datetime_to_millis(dt: datetime) -> int:
    """Convert datetime to epoch milliseconds."""
    return int(dt.timestamp() * 1000)


def _timestamp_value(raw: Any) -> int:
    if isinstance(raw, datetime):
        return datetime_to_millis(raw)
    return int(raw)


def candle_from_mapping(row: Mapping[str, Any]) -> Candle:
    """Build a Candle from a dict-like record.

    Raises:
        KeyError: If a required field is missing.
    """
    if "timestamp" in row:
        ts = row["timestamp"]
    elif "openTime" in row:
        ts = row["openTime"]
    else:
        raise KeyError("timestamp")

    return Candle(
        timestamp=_timestamp_value(ts),
        open=float(row["open"]),
        high=float(row["high"]),
        low=float(row["low"]),
        close=float(row["close"]),
        volume=float(row["volume"]),
    )


def candle_from_kline_row(row: Sequence[Any]) -> Candle:
    """Build a Candle from an exchange kline array.

    Raises:
        ValueError: If the row has fewer than six fields.
    """
    if len(row) < 6:
        raise ValueError(f"Kline row needs at least 6 fields, got {len(row)}")

    return Candle(
        timestamp=_timestamp_value(row[0]),
        open=float(row[1]),
        high=float(row[2]),
        low=float(row[3]),
        close=float(row[4]),
        volume=float(row[5]),
    )


def candles_from_records(records: Iterable[Mapping[str, Any] | Sequence[Any]]) -> list[Candle]:
    """Convert a batch of records (dicts or kline rows) to candles.

    Order is preserved; callers are responsible for oldest-first input.
    """
    candles = []
    for record in records:
        if isinstance(record, Candle):
            candles.append(record)
        elif isinstance(record, Mapping):
            candles.append(candle_from_mapping(record))
        else:
            candles.append(candle_from_kline_row(record))
    return candles
