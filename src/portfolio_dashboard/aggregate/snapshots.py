"""Derived views over persisted allocation snapshots.

A snapshot set is a group of per-sector `Snapshot` rows sharing a `date`;
every row of a set repeats the portfolio's total value at that date.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class SnapshotDay:
    """All sector rows recorded on one snapshot date."""
    date: str
    total_value: float
    rows: tuple[Any, ...]
    average_abs_variance: float


def group_snapshots_by_date(snapshots: Sequence[Any]) -> list[SnapshotDay]:
    """Group snapshot rows by date, oldest first.

    Rows keep their input order within a day. The day's total value is taken
    from its first row.
    """
    grouped: dict[str, list[Any]] = {}
    for s in snapshots:
        grouped.setdefault(s.date, []).append(s)

    days: list[SnapshotDay] = []
    for date in sorted(grouped):
        rows = grouped[date]
        days.append(
            SnapshotDay(
                date=date,
                total_value=rows[0].total_value,
                rows=tuple(rows),
                average_abs_variance=sum(abs(r.variance) for r in rows) / len(rows),
            )
        )
    return days


def snapshot_value_history(days: Sequence[SnapshotDay]) -> list[tuple[str, float]]:
    """Return ``(date, total_value)`` pairs in day order."""
    return [(d.date, d.total_value) for d in days]


def compute_snapshot_growth(days: Sequence[SnapshotDay]) -> tuple[float, float]:
    """Return absolute and percentage growth from the first to the last day.

    Returns ``(0.0, 0.0)`` when there are no days; the percentage is 0 when
    the first day's value is 0.
    """
    if not days:
        return 0.0, 0.0
    first = days[0].total_value
    growth = days[-1].total_value - first
    growth_pct = (growth / first) * 100 if first > 0 else 0.0
    return growth, growth_pct


def sector_trend(days: Sequence[SnapshotDay], last_n: int = 6) -> list[dict[str, Any]]:
    """Return the actual allocation per sector for the most recent days.

    Each element maps ``"date"`` to the snapshot date and every sector label
    recorded that day to its `actual_pct`.
    """
    recent = list(days[-last_n:]) if last_n > 0 else []
    trend: list[dict[str, Any]] = []
    for d in recent:
        point: dict[str, Any] = {"date": d.date}
        for r in d.rows:
            point[r.sector] = r.actual_pct
        trend.append(point)
    return trend
