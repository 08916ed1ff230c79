"""Holding-level and sector-level aggregation functions.

Expectations:
- Input: sequences of `Holding` (or objects exposing `qty`, `avg_price`,
  `current_price`, `sector`) and `IdealAllocation` targets.
- Market value is always recomputed as ``qty * current_price``; the stored
  `value` field is not read.
- No rounding is applied. Display-layer formatting owns that.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class PortfolioTotals:
    """Invested amount, market value and unrealized gain/loss of a portfolio."""
    total_invested: float
    total_value: float
    total_gain_loss: float


@dataclass(frozen=True)
class HoldingGainLoss:
    """Per-holding cost basis, market value and gain/loss."""
    invested: float
    value: float
    gain_loss: float
    gain_loss_pct: float


@dataclass(frozen=True)
class SectorVarianceRow:
    """Actual vs target allocation for one tracked sector.

    Attributes:
        sector: Sector label, or ``None`` for the empty-input sentinel.
        target_pct: Target allocation percentage.
        actual_pct: Share of total market value held in the sector (0-100).
        variance: ``actual_pct - target_pct``.
        current_value: Market value held in the sector.
        target_value: Market value the sector would hold at its target.
        rebalance_amount: ``target_value - current_value``; positive means buy.
        holding_count: Number of holdings tagged with the sector.
    """
    sector: str | None
    target_pct: float
    actual_pct: float
    variance: float
    current_value: float
    target_value: float
    rebalance_amount: float
    holding_count: int = 0


NO_VARIANCE = SectorVarianceRow(
    sector=None,
    target_pct=0.0,
    actual_pct=0.0,
    variance=0.0,
    current_value=0.0,
    target_value=0.0,
    rebalance_amount=0.0,
)


def _market_value(holding: Any) -> float:
    return holding.qty * holding.current_price


def compute_portfolio_totals(holdings: Sequence[Any]) -> PortfolioTotals:
    """Return total invested, total market value and their difference.

    Args:
        holdings: Holdings to aggregate; may be empty.

    Returns:
        `PortfolioTotals`; all zeros for an empty sequence.
    """
    total_invested = sum((h.qty * h.avg_price for h in holdings), 0.0)
    total_value = sum((_market_value(h) for h in holdings), 0.0)
    return PortfolioTotals(
        total_invested=total_invested,
        total_value=total_value,
        total_gain_loss=total_value - total_invested,
    )


def compute_holding_gain_loss(holding: Any) -> HoldingGainLoss:
    """Return cost basis, market value and gain/loss for a single holding.

    `gain_loss_pct` is 0 when the holding has no cost basis (zero quantity
    or a zero-cost position) rather than dividing by zero.
    """
    invested = holding.qty * holding.avg_price
    value = _market_value(holding)
    gain_loss = value - invested
    gain_loss_pct = (gain_loss / invested) * 100 if invested > 0 else 0.0
    return HoldingGainLoss(
        invested=invested,
        value=value,
        gain_loss=gain_loss,
        gain_loss_pct=gain_loss_pct,
    )


def compute_sector_breakdown(
    holdings: Sequence[Any],
    targets: Sequence[Any],
) -> list[SectorVarianceRow]:
    """Compare actual sector allocation against targets.

    One row is produced per target, in target order. Sectors held but not
    listed in `targets` are left out of the breakdown; targeted sectors with
    no holdings report zero value.

    Args:
        holdings: Holdings to group by `sector`.
        targets: Allocation targets with `sector` and `target_pct`.

    Returns:
        List of `SectorVarianceRow`, one per target.
    """
    total_value = sum((_market_value(h) for h in holdings), 0.0)

    sector_values: dict[str, float] = {}
    sector_counts: dict[str, int] = {}
    for h in holdings:
        sector_values[h.sector] = sector_values.get(h.sector, 0.0) + _market_value(h)
        sector_counts[h.sector] = sector_counts.get(h.sector, 0) + 1

    rows: list[SectorVarianceRow] = []
    for t in targets:
        current_value = sector_values.get(t.sector, 0.0)
        actual_pct = (current_value / total_value) * 100 if total_value > 0 else 0.0
        target_value = (t.target_pct / 100) * total_value
        rows.append(
            SectorVarianceRow(
                sector=t.sector,
                target_pct=t.target_pct,
                actual_pct=actual_pct,
                variance=actual_pct - t.target_pct,
                current_value=current_value,
                target_value=target_value,
                rebalance_amount=target_value - current_value,
                holding_count=sector_counts.get(t.sector, 0),
            )
        )
    return rows


def compute_max_variance(rows: Sequence[SectorVarianceRow]) -> SectorVarianceRow:
    """Return the row with the largest absolute variance.

    Ties resolve to the earliest row. An empty sequence yields `NO_VARIANCE`,
    a zero-variance row without a sector (shown as "N/A").
    """
    best = NO_VARIANCE
    for row in rows:
        if best is NO_VARIANCE or abs(row.variance) > abs(best.variance):
            best = row
    return best


def filter_holdings(holdings: Sequence[Any], term: str) -> list[Any]:
    """Case-insensitive search over symbol, name and sector.

    An empty or blank `term` returns every holding, in input order.
    """
    needle = term.strip().lower()
    if not needle:
        return list(holdings)
    return [
        h for h in holdings
        if needle in h.symbol.lower()
        or needle in h.name.lower()
        or needle in h.sector.lower()
    ]
