"""HTTP client for the portfolio data API.

`PortfolioApiClient` wraps a `requests.Session` that carries the shared-secret
`x-api-key` header. Every call returns validated Pydantic models; any non-2xx
response or transport failure is raised as `ApiRequestError` carrying the
API's `message` field.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import requests  # type: ignore[import-untyped]
from pydantic import TypeAdapter, ValidationError

from portfolio_dashboard.config import Settings
from portfolio_dashboard.errors import ApiRequestError
from portfolio_dashboard.models import (
    ApiErrorBody,
    CreateHoldingForm,
    Holding,
    IdealAllocation,
    MonthlyGrowth,
    MonthlyGrowthForm,
    Snapshot,
    Summary,
    UpdateHoldingForm,
)

log = logging.getLogger(__name__)

_HOLDINGS = TypeAdapter(list[Holding])
_ALLOCATIONS = TypeAdapter(list[IdealAllocation])
_GROWTH = TypeAdapter(list[MonthlyGrowth])
_SNAPSHOTS = TypeAdapter(list[Snapshot])


class PortfolioApiClient:
    """Synchronous client for the `/v1` data API.

    Args:
        base_url: API root, e.g. ``http://localhost:3000``.
        api_token: Shared secret sent as `x-api-key`.
        timeout: Per-request timeout in seconds.
        session: Optional pre-built session (tests inject a mock here).
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "x-api-key": api_token,
            }
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> PortfolioApiClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -------------------------
    # Transport
    # -------------------------
    def _request(self, method: str, endpoint: str, payload: dict[str, Any] | None = None) -> Any:
        """Send one request and return the decoded JSON body.

        Returns:
            Parsed JSON, or ``None`` for 204 No Content.

        Raises:
            ApiRequestError: on transport failure, non-2xx status or an
                undecodable success body.
        """
        url = f"{self.base_url}{endpoint}"
        log.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("%s %s failed: %s", method, endpoint, e)
            raise ApiRequestError(str(e), error="Network Error") from e

        if not resp.ok:
            raise self._error_from_response(method, endpoint, resp)

        if resp.status_code == 204 or not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as e:
            raise ApiRequestError(
                f"Invalid JSON in response from {endpoint}",
                error="Invalid Response",
                status_code=resp.status_code,
            ) from e

    @staticmethod
    def _error_from_response(method: str, endpoint: str, resp: Any) -> ApiRequestError:
        fallback = f"HTTP {resp.status_code}: {resp.reason}"
        try:
            body = ApiErrorBody.model_validate(resp.json())
            message, error = body.message or fallback, body.error
        except (ValueError, ValidationError):
            message, error = fallback, "Network Error"

        log.warning("%s %s -> %d %s", method, endpoint, resp.status_code, message)
        return ApiRequestError(message, error=error, status_code=resp.status_code)

    def _parse(self, adapter_or_model: Any, data: Any, endpoint: str) -> Any:
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(data)
            return adapter_or_model.model_validate(data)
        except ValidationError as e:
            raise ApiRequestError(
                f"Unexpected payload from {endpoint}: {e.error_count()} validation error(s)",
                error="Invalid Response",
            ) from e

    # -------------------------
    # Endpoints
    # -------------------------
    def health(self) -> dict[str, Any]:
        """Liveness probe; returns the raw `{status, timestamp}` payload."""
        return self._request("GET", "/health") or {}

    def get_holdings(self) -> list[Holding]:
        return self._parse(_HOLDINGS, self._request("GET", "/v1/holdings"), "/v1/holdings")

    def create_holding(self, form: CreateHoldingForm) -> Holding:
        data = self._request("POST", "/v1/holdings", form.model_dump(mode="json", exclude_none=True))
        return self._parse(Holding, data, "/v1/holdings")

    def update_holding(self, holding_id: str, form: UpdateHoldingForm) -> Holding:
        """Send only the fields set on `form` (partial update)."""
        endpoint = f"/v1/holdings/{holding_id}"
        return self._parse(Holding, self._request("PUT", endpoint, form.to_patch()), endpoint)

    def delete_holding(self, holding_id: str) -> None:
        self._request("DELETE", f"/v1/holdings/{holding_id}")

    def get_ideal_allocation(self) -> list[IdealAllocation]:
        endpoint = "/v1/ideal-allocation"
        return self._parse(_ALLOCATIONS, self._request("GET", endpoint), endpoint)

    def get_monthly_growth(self) -> list[MonthlyGrowth]:
        endpoint = "/v1/monthly-growth"
        return self._parse(_GROWTH, self._request("GET", endpoint), endpoint)

    def create_monthly_growth(self, form: MonthlyGrowthForm) -> MonthlyGrowth:
        endpoint = "/v1/monthly-growth"
        return self._parse(MonthlyGrowth, self._request("POST", endpoint, form.model_dump(mode="json")), endpoint)

    def get_snapshots(self) -> list[Snapshot]:
        return self._parse(_SNAPSHOTS, self._request("GET", "/v1/snapshots"), "/v1/snapshots")

    def create_snapshot(self) -> list[Snapshot]:
        """Ask the backend to persist a new snapshot set and return it."""
        return self._parse(_SNAPSHOTS, self._request("POST", "/v1/snapshot"), "/v1/snapshot")

    def get_summary(self) -> Summary:
        return self._parse(Summary, self._request("GET", "/v1/summary"), "/v1/summary")


def client_from_settings(settings: Settings) -> PortfolioApiClient:
    """Build a client from environment-derived `Settings`."""
    return PortfolioApiClient(
        base_url=settings.backend_url,
        api_token=settings.api_token,
        timeout=settings.request_timeout,
    )
