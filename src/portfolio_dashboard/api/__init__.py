"""Client for the remote portfolio data API.

The data API owns persistence for holdings, ideal allocations, monthly growth
and snapshots. This package only speaks its HTTP contract and turns payloads
into `portfolio_dashboard.models` objects.
"""

from portfolio_dashboard.api.client import PortfolioApiClient, client_from_settings

__all__ = ["PortfolioApiClient", "client_from_settings"]
