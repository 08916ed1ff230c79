from __future__ import annotations

import pytest

from portfolio_dashboard.aggregate.classify import (
    TRI_STATE,
    TWO_TIER,
    AllocationStatus,
    Color,
    ThresholdPolicy,
    classify_variance,
    count_within,
    gain_loss_color,
    pnl_label,
    sector_color,
)
from portfolio_dashboard.aggregate.portfolio import SectorVarianceRow


@pytest.mark.parametrize(
    ("variance", "expected"),
    [
        (0.0, AllocationStatus.ON_TARGET),
        (2.0, AllocationStatus.ON_TARGET),
        (-2.0, AllocationStatus.ON_TARGET),
        (2.01, AllocationStatus.CLOSE),
        (-5.0, AllocationStatus.CLOSE),
        (5.5, AllocationStatus.OFF_TARGET),
        (-30.0, AllocationStatus.OFF_TARGET),
    ],
)
def test_tri_state_bands(variance: float, expected: AllocationStatus) -> None:
    assert classify_variance(variance, TRI_STATE) is expected


def test_two_tier_collapses_close_and_off_target() -> None:
    assert classify_variance(1.5, TWO_TIER) is AllocationStatus.ON_TARGET
    assert classify_variance(3.0, TWO_TIER) is AllocationStatus.REBALANCE
    assert classify_variance(-12.0, TWO_TIER) is AllocationStatus.REBALANCE


def test_custom_policy() -> None:
    strict = ThresholdPolicy(bands=((0.5, AllocationStatus.ON_TARGET),), fallback=AllocationStatus.OFF_TARGET)
    assert strict.classify(0.4) is AllocationStatus.ON_TARGET
    assert strict.classify(0.6) is AllocationStatus.OFF_TARGET


def test_count_within() -> None:
    rows = [
        SectorVarianceRow("A", 10, 11, 1, 0, 0, 0),
        SectorVarianceRow("B", 10, 13, 3, 0, 0, 0),
        SectorVarianceRow("C", 10, 8, -2, 0, 0, 0),
    ]
    assert count_within(rows) == 2
    assert count_within([]) == 0


def test_sign_to_color() -> None:
    assert gain_loss_color(12.5) is Color.POSITIVE
    assert gain_loss_color(-0.01) is Color.NEGATIVE
    assert gain_loss_color(0) is Color.NEUTRAL


def test_pnl_label_and_sector_color() -> None:
    assert pnl_label(0) == "Profit"
    assert pnl_label(-1) == "Loss"
    assert sector_color("Technology") == "#3B82F6"
    assert sector_color("Collectibles") == Color.NEUTRAL.value
