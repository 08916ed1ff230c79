"""pandas views of engine output for tabular display.

The engine returns plain dataclasses; these helpers lay them out as
DataFrames with display-friendly column names and status/label columns so the
CLI (or a notebook) can print them directly. Values stay numeric here;
`portfolio_dashboard.formatting` turns them into strings.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Sequence

import pandas as pd

from portfolio_dashboard.aggregate.classify import TWO_TIER, ThresholdPolicy, pnl_label
from portfolio_dashboard.aggregate.growth import GrowthPoint
from portfolio_dashboard.aggregate.portfolio import SectorVarianceRow, compute_holding_gain_loss
from portfolio_dashboard.aggregate.snapshots import SnapshotDay

HOLDING_COLUMNS = [
    "symbol", "name", "sector", "qty", "avg_price", "current_price",
    "value", "gain_loss", "gain_loss_pct", "allocation_pct",
]


def holdings_frame(holdings: Sequence[Any]) -> pd.DataFrame:
    """Return one row per holding with recomputed value and gain/loss.

    Returns:
        DataFrame with columns `HOLDING_COLUMNS`; empty (with those columns)
        when there are no holdings.
    """
    records: list[dict[str, Any]] = []
    for h in holdings:
        gl = compute_holding_gain_loss(h)
        records.append(
            {
                "symbol": h.symbol,
                "name": h.name,
                "sector": h.sector,
                "qty": h.qty,
                "avg_price": h.avg_price,
                "current_price": h.current_price,
                "value": gl.value,
                "gain_loss": gl.gain_loss,
                "gain_loss_pct": gl.gain_loss_pct,
                "allocation_pct": h.allocation_pct,
            }
        )
    return pd.DataFrame(records, columns=HOLDING_COLUMNS)


def breakdown_frame(
    rows: Sequence[SectorVarianceRow],
    policy: ThresholdPolicy = TWO_TIER,
) -> pd.DataFrame:
    """Return the sector breakdown with a `status` column under `policy`."""
    pdf = pd.DataFrame([asdict(r) for r in rows], columns=list(SectorVarianceRow.__dataclass_fields__))
    pdf["status"] = [policy.classify(r.variance).value for r in rows]
    return pdf


def growth_frame(points: Sequence[GrowthPoint]) -> pd.DataFrame:
    """Return the P&L series with a Profit/Loss `result` column."""
    pdf = pd.DataFrame([asdict(p) for p in points], columns=["month", "account", "pnl", "cumulative"])
    pdf["result"] = [pnl_label(p.pnl) for p in points]
    return pdf


def snapshot_days_frame(days: Sequence[SnapshotDay]) -> pd.DataFrame:
    """Return one row per snapshot date: value, sector count, mean |variance|."""
    return pd.DataFrame(
        [
            {
                "date": d.date,
                "total_value": d.total_value,
                "sectors": len(d.rows),
                "avg_abs_variance": d.average_abs_variance,
            }
            for d in days
        ],
        columns=["date", "total_value", "sectors", "avg_abs_variance"],
    )
