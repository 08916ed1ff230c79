from __future__ import annotations

import pytest
from pydantic import ValidationError

from portfolio_dashboard.models import (
    CreateHoldingForm,
    Holding,
    MonthlyGrowthForm,
    Summary,
    UpdateHoldingForm,
    merge_holding_update,
)

VALID_HOLDING_FORM = {
    "symbol": "AAPL",
    "name": "Apple Inc",
    "sector": "Technology",
    "qty": 10,
    "avg_price": 150.0,
    "current_price": 155.0,
    "allocation_pct": 15.5,
}


def _holding() -> Holding:
    return Holding.model_validate(
        {
            "id": "h1",
            "symbol": "AAPL",
            "name": "Apple Inc",
            "sector": "Technology",
            "qty": 10,
            "avg_price": 150,
            "current_price": 155,
            "value": 1550,
            "rsi": 45.6,
            "allocation_pct": 15.5,
            "updated_at": "2024-05-01T12:00:00Z",
            "sheet_row": 7,
        }
    )


def test_holding_read_model_ignores_unknown_fields() -> None:
    h = _holding()
    assert h.market_value == 1550
    assert h.updated_at is not None and h.updated_at.year == 2024
    assert not hasattr(h, "sheet_row")


def test_holding_rejects_negative_quantity() -> None:
    data = _holding().model_dump()
    data["qty"] = -1
    with pytest.raises(ValidationError):
        Holding.model_validate(data)


def test_create_form_validates() -> None:
    form = CreateHoldingForm.model_validate({**VALID_HOLDING_FORM, "rsi": "", "notes": ""})
    assert form.rsi is None
    assert form.notes is None


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("symbol", ""),
        ("symbol", "X" * 21),
        ("qty", 0),
        ("avg_price", -1),
        ("current_price", 0),
        ("rsi", 101),
        ("allocation_pct", 100.5),
        ("notes", "n" * 501),
    ],
)
def test_create_form_rejects_out_of_range(field: str, value: object) -> None:
    with pytest.raises(ValidationError):
        CreateHoldingForm.model_validate({**VALID_HOLDING_FORM, field: value})


def test_create_form_forbids_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        CreateHoldingForm.model_validate({**VALID_HOLDING_FORM, "id": "abc"})


def test_update_form_sends_only_set_fields() -> None:
    form = UpdateHoldingForm(current_price=160.0, notes="trimmed")
    assert form.to_patch() == {"current_price": 160.0, "notes": "trimmed"}


def test_merge_holding_update_refreshes_value() -> None:
    original = _holding()
    merged = merge_holding_update(original, UpdateHoldingForm(qty=20))
    assert merged.qty == 20
    assert merged.value == 3100
    assert merged.symbol == "AAPL"
    assert original.qty == 10


@pytest.mark.parametrize("month", ["2024-1", "Jan 2024", "202401", "2024-01\n", "٢٠٢٣-12"])
def test_monthly_growth_form_requires_yyyy_mm(month: str) -> None:
    with pytest.raises(ValidationError):
        MonthlyGrowthForm(month=month, account="Main", pnl=1.0)


def test_monthly_growth_form_account_length() -> None:
    MonthlyGrowthForm(month="2024-01", account="Main Portfolio", pnl=-12.5)
    with pytest.raises(ValidationError):
        MonthlyGrowthForm(month="2024-01", account="", pnl=1.0)
    with pytest.raises(ValidationError):
        MonthlyGrowthForm(month="2024-01", account="a" * 51, pnl=1.0)


def test_summary_parses_nested_trend() -> None:
    s = Summary.model_validate(
        {
            "total_invested": 1000,
            "current_net_worth": 1200,
            "unrealized_gain_loss": 200,
            "unrealized_pct": 20,
            "allocation_variance": {"Technology": 4.5},
            "monthly_trend": [{"month": "2024-01", "account": "Main", "pnl": 50}],
            "ytd_growth": 50,
        }
    )
    assert s.monthly_trend[0].pnl == 50
    assert s.allocation_variance["Technology"] == 4.5
