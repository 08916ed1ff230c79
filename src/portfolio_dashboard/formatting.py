"""Display formatting for currency, percentages and month keys."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd


def format_currency(amount: float) -> str:
    """Format as US dollars with two decimals, e.g. ``-$1,234.50``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_signed_currency(amount: float) -> str:
    """Currency with an explicit ``+`` for non-negative amounts."""
    return ("+" if amount >= 0 else "") + format_currency(amount)


def format_percent(value: float) -> str:
    """Signed percentage with two decimals, e.g. ``+1.25%``."""
    return f"{'+' if value >= 0 else ''}{value:.2f}%"


def format_month(month: str) -> str:
    """Render a ``YYYY-MM`` key as ``Jan 2024``."""
    year, mon = month.split("-")
    return date(int(year), int(mon), 1).strftime("%b %Y")


def format_date(value: str | date | datetime) -> str:
    """Render an ISO date (or date object) as ``Jan 5, 2024``.

    Values pandas cannot parse are returned unchanged as strings.
    """
    try:
        ts = pd.Timestamp(value)
    except ValueError:
        return str(value)
    if pd.isna(ts):
        return str(value)
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}"


def format_frame(pdf: pd.DataFrame, currency: list[str], percent: list[str]) -> pd.DataFrame:
    """Return a copy of `pdf` with the given columns rendered as strings."""
    out = pdf.copy()
    for col in currency:
        if col in out.columns:
            out[col] = out[col].map(format_currency)
    for col in percent:
        if col in out.columns:
            out[col] = out[col].map(format_percent)
    return out
