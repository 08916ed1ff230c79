"""Pydantic models for data-API payloads and user forms.

Read models mirror what the data API returns and ignore unknown fields. Form
models carry the client-side validation rules applied before anything is sent.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Holding(BaseModel):
    """A single position as stored by the data API.

    Attributes:
        id: Backend identifier.
        symbol: Ticker symbol.
        name: Display name.
        sector: Sector label used for allocation grouping.
        qty: Number of units held.
        avg_price: Average cost basis per unit.
        current_price: Latest price per unit.
        value: Stored market value; may be stale, see `market_value`.
        rsi: Optional momentum indicator (0-100).
        allocation_pct: Target allocation percentage for this holding.
        notes: Optional free-text note.
        updated_at: Last update timestamp.
    """
    model_config = ConfigDict(extra="ignore")
    id: str
    symbol: str
    name: str
    sector: str
    qty: float = Field(..., ge=0)
    avg_price: float = Field(..., ge=0)
    current_price: float = Field(..., ge=0)
    value: float = 0.0
    rsi: float | None = Field(default=None, ge=0, le=100)
    allocation_pct: float = Field(default=0.0, ge=0, le=100)
    notes: str | None = None
    updated_at: datetime | None = None

    @property
    def market_value(self) -> float:
        """Value recomputed from quantity and current price."""
        return self.qty * self.current_price


class IdealAllocation(BaseModel):
    """Target allocation for one tracked sector."""
    model_config = ConfigDict(extra="ignore")
    sector: str
    target_pct: float


class MonthlyGrowth(BaseModel):
    """Profit/loss recorded for one account in one month (`YYYY-MM`)."""
    model_config = ConfigDict(extra="ignore")
    month: str
    account: str = ""
    pnl: float


class Snapshot(BaseModel):
    """One sector row of a persisted point-in-time allocation snapshot."""
    model_config = ConfigDict(extra="ignore")
    date: str
    sector: str
    actual_pct: float
    target_pct: float
    variance: float
    total_value: float


class Summary(BaseModel):
    """Aggregate object returned by `GET /v1/summary`."""
    model_config = ConfigDict(extra="ignore")
    total_invested: float
    current_net_worth: float
    unrealized_gain_loss: float
    unrealized_pct: float
    allocation_variance: dict[str, float] = Field(default_factory=dict)
    monthly_trend: list[MonthlyGrowth] = Field(default_factory=list)
    ytd_growth: float = 0.0


class ApiErrorBody(BaseModel):
    """Error payload returned by the data API on non-2xx responses."""
    model_config = ConfigDict(extra="ignore")
    error: str = "API Error"
    message: str = ""
    timestamp: str | None = None


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------

class CreateHoldingForm(BaseModel):
    """Validated payload for `POST /v1/holdings`."""
    model_config = ConfigDict(extra="forbid")
    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    sector: str = Field(..., min_length=1, max_length=50)
    qty: float = Field(..., gt=0)
    avg_price: float = Field(..., gt=0)
    current_price: float = Field(..., gt=0)
    rsi: float | None = Field(default=None, ge=0, le=100)
    allocation_pct: float = Field(..., ge=0, le=100)
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("rsi", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        """Treat empty strings from form inputs as missing values."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class UpdateHoldingForm(BaseModel):
    """Partial holding update for `PUT /v1/holdings/{id}`.

    Only fields that were explicitly set are sent; see `to_patch`.
    """
    model_config = ConfigDict(extra="forbid")
    symbol: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    sector: str | None = Field(default=None, min_length=1, max_length=50)
    qty: float | None = Field(default=None, gt=0)
    avg_price: float | None = Field(default=None, gt=0)
    current_price: float | None = Field(default=None, gt=0)
    rsi: float | None = Field(default=None, ge=0, le=100)
    allocation_pct: float | None = Field(default=None, ge=0, le=100)
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("rsi", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    def to_patch(self) -> dict[str, Any]:
        """Return only the explicitly-set fields, ready to serialize."""
        return self.model_dump(mode="json", exclude_unset=True)


class MonthlyGrowthForm(BaseModel):
    """Validated payload for `POST /v1/monthly-growth`."""
    model_config = ConfigDict(extra="forbid")
    month: str = Field(..., pattern=r"^[0-9]{4}-[0-9]{2}$")
    account: str = Field(..., min_length=1, max_length=50)
    pnl: float


def merge_holding_update(holding: Holding, update: UpdateHoldingForm) -> Holding:
    """Apply a partial update to a holding and refresh its stored value.

    Args:
        holding: Current holding as fetched from the API.
        update: Partial update; unset fields are left untouched.

    Returns:
        A new `Holding`; the input is not modified.
    """
    patched = holding.model_copy(update=update.model_dump(exclude_unset=True))
    return patched.model_copy(update={"value": patched.market_value})
