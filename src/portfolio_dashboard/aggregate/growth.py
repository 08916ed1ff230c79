"""Monthly profit/loss series and summary statistics.

Month keys use the fixed-width ``YYYY-MM`` form, so lexicographic ordering is
chronological. Keys are validated before sorting; a malformed key raises
`InvalidPeriodKey` instead of silently landing in the wrong position.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from itertools import accumulate
from typing import Any, Sequence

from portfolio_dashboard.errors import InvalidPeriodKey

# ASCII digits only; used with fullmatch so a trailing newline is rejected.
MONTH_KEY_RE = re.compile(r"[0-9]{4}-(0[1-9]|1[0-2])", re.ASCII)


@dataclass(frozen=True)
class GrowthPoint:
    """One month of the cumulative P&L series."""
    month: str
    pnl: float
    cumulative: float
    account: str


@dataclass(frozen=True)
class SummaryStatistics:
    """Headline figures for a set of monthly growth entries."""
    total_pnl: float
    average_monthly_pnl: float
    positive_month_count: int
    ytd_pnl: float
    entry_count: int = 0

    @property
    def success_rate_pct(self) -> float:
        """Share of entries with a positive P&L, as a percentage."""
        if self.entry_count == 0:
            return 0.0
        return self.positive_month_count / self.entry_count * 100


def validate_month_key(key: Any) -> str:
    """Return `key` if it is a valid ``YYYY-MM`` month key.

    Raises:
        InvalidPeriodKey: when the key is not a string of that exact shape or
            the month is outside 01-12.
    """
    if not isinstance(key, str) or not MONTH_KEY_RE.fullmatch(key):
        raise InvalidPeriodKey(key)
    return key


def compute_time_series(entries: Sequence[Any]) -> list[GrowthPoint]:
    """Sort entries by month and attach a running cumulative total.

    Sorting is stable, so entries sharing a month (e.g. different accounts)
    keep their input order. Accounts are not segmented; filter with
    `filter_by_account` first for a per-account series.

    Args:
        entries: Monthly growth entries with `month`, `pnl` and `account`.

    Returns:
        List of `GrowthPoint` in ascending month order.

    Raises:
        InvalidPeriodKey: if any entry carries a malformed month key.
    """
    for e in entries:
        validate_month_key(e.month)

    ordered = sorted(entries, key=lambda e: e.month)
    running = accumulate(e.pnl for e in ordered)
    return [
        GrowthPoint(
            month=e.month,
            pnl=e.pnl,
            cumulative=cumulative,
            account=getattr(e, "account", ""),
        )
        for e, cumulative in zip(ordered, running)
    ]


def compute_summary_statistics(
    entries: Sequence[Any],
    *,
    current_year: int | str,
) -> SummaryStatistics:
    """Return total, average, positive-month count and YTD P&L.

    Args:
        entries: Monthly growth entries, optionally pre-filtered by account.
        current_year: Four-digit year used for the YTD figure. Callers pass
            the wall-clock year; the function never reads the clock itself.

    Returns:
        `SummaryStatistics`; all zeros for an empty sequence.
    """
    year_prefix = str(current_year)
    total_pnl = sum((e.pnl for e in entries), 0.0)
    count = len(entries)
    return SummaryStatistics(
        total_pnl=total_pnl,
        average_monthly_pnl=total_pnl / count if count > 0 else 0.0,
        positive_month_count=sum(1 for e in entries if e.pnl > 0),
        ytd_pnl=sum((e.pnl for e in entries if e.month.startswith(year_prefix)), 0.0),
        entry_count=count,
    )


def filter_by_account(entries: Sequence[Any], account: str) -> list[Any]:
    """Return the entries recorded against `account`, preserving order."""
    return [e for e in entries if e.account == account]


def last_n_points(points: Sequence[GrowthPoint], n: int) -> list[GrowthPoint]:
    """Return the trailing `n` points of a series (all of them if shorter)."""
    if n <= 0:
        return []
    return list(points[-n:])
