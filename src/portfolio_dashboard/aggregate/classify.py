"""Presentation policies applied on top of engine output.

The engine exposes raw variance; how a variance maps to a status label is a
per-view decision. Two policies are in use: the allocation page's two-tier
"On Target / Rebalance" split and the snapshot page's three-band scale.
Callers pick one (or build their own `ThresholdPolicy`).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from portfolio_dashboard.aggregate.portfolio import SectorVarianceRow


class AllocationStatus(str, Enum):
    """Status label for a sector's distance from its target."""
    ON_TARGET = "On Target"
    CLOSE = "Close"
    OFF_TARGET = "Off Target"
    REBALANCE = "Rebalance"


class Color(str, Enum):
    """Hex colors used for signed amounts."""
    POSITIVE = "#10B981"
    NEGATIVE = "#EF4444"
    NEUTRAL = "#64748B"


@dataclass(frozen=True)
class ThresholdPolicy:
    """Ordered variance bands.

    Attributes:
        bands: ``(upper_bound, status)`` pairs in ascending bound order;
            a magnitude maps to the first band with ``|v| <= upper_bound``.
        fallback: Status for magnitudes above every band.
    """
    bands: tuple[tuple[float, AllocationStatus], ...]
    fallback: AllocationStatus

    def classify(self, variance: float) -> AllocationStatus:
        magnitude = abs(variance)
        for upper_bound, status in self.bands:
            if magnitude <= upper_bound:
                return status
        return self.fallback


TRI_STATE = ThresholdPolicy(
    bands=((2.0, AllocationStatus.ON_TARGET), (5.0, AllocationStatus.CLOSE)),
    fallback=AllocationStatus.OFF_TARGET,
)

TWO_TIER = ThresholdPolicy(
    bands=((2.0, AllocationStatus.ON_TARGET),),
    fallback=AllocationStatus.REBALANCE,
)

POLICIES: dict[str, ThresholdPolicy] = {
    "tri-state": TRI_STATE,
    "two-tier": TWO_TIER,
}

SECTOR_COLORS: dict[str, str] = {
    "Technology": "#3B82F6",
    "Healthcare": "#10B981",
    "Finance": "#F59E0B",
    "Consumer": "#EF4444",
    "Energy": "#8B5CF6",
    "Materials": "#06B6D4",
    "Utilities": "#84CC16",
    "Real Estate": "#F97316",
    "Industrials": "#6366F1",
    "Communications": "#EC4899",
}


def classify_variance(variance: float, policy: ThresholdPolicy = TRI_STATE) -> AllocationStatus:
    """Map a variance (percentage points) to a status under `policy`."""
    return policy.classify(variance)


def count_within(rows: Sequence[SectorVarianceRow], policy: ThresholdPolicy = TWO_TIER) -> int:
    """Count rows that `policy` classifies as on target."""
    return sum(1 for r in rows if policy.classify(r.variance) is AllocationStatus.ON_TARGET)


def gain_loss_color(value: float) -> Color:
    """Green for gains, red for losses, gray for exactly zero."""
    if value > 0:
        return Color.POSITIVE
    if value < 0:
        return Color.NEGATIVE
    return Color.NEUTRAL


def pnl_label(pnl: float) -> str:
    """Badge text for a monthly entry; break-even months count as profit."""
    return "Profit" if pnl >= 0 else "Loss"


def sector_color(sector: str) -> str:
    """Return the display color for a sector, gray when unknown."""
    return SECTOR_COLORS.get(sector, Color.NEUTRAL.value)
