"""Portfolio aggregation engine.

This package contains the pure routines that turn raw holdings, allocation
targets, monthly growth entries and snapshots into the derived metrics the
dashboard displays (totals, per-sector actual % and variance, rebalance
amounts, cumulative P&L series, classification bands). Nothing here performs
I/O or caches results: every call recomputes from its arguments.
"""

from portfolio_dashboard.aggregate.classify import (
    TRI_STATE,
    TWO_TIER,
    AllocationStatus,
    ThresholdPolicy,
    classify_variance,
    count_within,
)
from portfolio_dashboard.aggregate.growth import (
    GrowthPoint,
    SummaryStatistics,
    compute_summary_statistics,
    compute_time_series,
    filter_by_account,
    last_n_points,
    validate_month_key,
)
from portfolio_dashboard.aggregate.portfolio import (
    HoldingGainLoss,
    PortfolioTotals,
    SectorVarianceRow,
    compute_holding_gain_loss,
    compute_max_variance,
    compute_portfolio_totals,
    compute_sector_breakdown,
    filter_holdings,
)
from portfolio_dashboard.aggregate.snapshots import (
    SnapshotDay,
    compute_snapshot_growth,
    group_snapshots_by_date,
    sector_trend,
    snapshot_value_history,
)

__all__ = [
    "AllocationStatus",
    "GrowthPoint",
    "HoldingGainLoss",
    "PortfolioTotals",
    "SectorVarianceRow",
    "SnapshotDay",
    "SummaryStatistics",
    "TRI_STATE",
    "TWO_TIER",
    "ThresholdPolicy",
    "classify_variance",
    "compute_holding_gain_loss",
    "compute_max_variance",
    "compute_portfolio_totals",
    "compute_sector_breakdown",
    "compute_snapshot_growth",
    "compute_summary_statistics",
    "compute_time_series",
    "count_within",
    "filter_by_account",
    "filter_holdings",
    "group_snapshots_by_date",
    "last_n_points",
    "sector_trend",
    "snapshot_value_history",
    "validate_month_key",
]
