"""portfolio_dashboard package.

Contains the aggregation engine that derives portfolio metrics (totals, sector
allocation variance, cumulative P&L series, snapshot history) from raw records,
Pydantic models for holdings/targets/monthly growth, a thin client for the
remote data API, and a command-line dashboard that prints the derived reports.

Architecture:
- Remote data API owns persistence (holdings, targets, growth, snapshots)
- `aggregate` is pure and recomputes everything on each call
- Pydantic models validate API payloads and user forms
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
