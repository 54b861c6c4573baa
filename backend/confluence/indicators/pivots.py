"""Pivot high/low detection.

A pivot is a value strictly greater (high) or strictly smaller (low) than
every neighbour in a window of ``left_bars`` before and ``right_bars``
after it. Ties disqualify. Only interior positions with a full window
on both sides are eligible, so the most recent ``right_bars`` bars can
never be pivots yet.
"""

from typing import Sequence

from confluence.models.signal import Pivot, PivotKind


def _find_pivots(
    values: Sequence[float | None],
    left_bars: int,
    right_bars: int,
    kind: PivotKind,
) -> list[Pivot]:
    if left_bars < 0 or right_bars < 0:
        raise ValueError(
            f"Pivot windows must be >= 0, got left={left_bars} right={right_bars}"
        )

    values = list(values)
    pivots: list[Pivot] = []

    for i in range(left_bars, len(values) - right_bars):
        current = values[i]
        if current is None:
            continue

        neighbours = values[i - left_bars : i] + values[i + 1 : i + right_bars + 1]
        if any(v is None for v in neighbours):
            continue

        if kind is PivotKind.HIGH:
            is_pivot = all(v < current for v in neighbours)
        else:
            is_pivot = all(v > current for v in neighbours)

        if is_pivot:
            pivots.append(Pivot(index=i, value=current, kind=kind))

    return pivots


def pivot_highs(
    values: Sequence[float | None],
    left_bars: int = 5,
    right_bars: int = 5,
) -> list[Pivot]:
    """Find pivot highs, oldest first."""
    return _find_pivots(values, left_bars, right_bars, PivotKind.HIGH)


def pivot_lows(
    values: Sequence[float | None],
    left_bars: int = 5,
    right_bars: int = 5,
) -> list[Pivot]:
    """Find pivot lows, oldest first."""
    return _find_pivots(values, left_bars, right_bars, PivotKind.LOW)
