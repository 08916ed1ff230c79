from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from portfolio_dashboard.api.client import PortfolioApiClient, client_from_settings
from portfolio_dashboard.config import Settings
from portfolio_dashboard.errors import ApiRequestError
from portfolio_dashboard.models import CreateHoldingForm, MonthlyGrowthForm, UpdateHoldingForm

HOLDING = {
    "id": "h1",
    "symbol": "AAPL",
    "name": "Apple Inc",
    "sector": "Technology",
    "qty": 10,
    "avg_price": 150,
    "current_price": 155,
    "value": 1550,
    "allocation_pct": 15,
    "updated_at": "2024-05-01T12:00:00Z",
}


def _response(status: int = 200, body: Any = None, reason: str = "OK") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.reason = reason
    if body is None:
        resp.content = b""
        resp.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "", 0)
    else:
        resp.content = b"{...}"
        resp.json.return_value = body
    return resp


def _client(*responses: MagicMock) -> tuple[PortfolioApiClient, MagicMock]:
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = list(responses)
    return PortfolioApiClient("http://api.local/", "secret", timeout=5, session=session), session


def test_session_carries_api_key() -> None:
    _, session = _client()
    assert session.headers["x-api-key"] == "secret"
    assert session.headers["Content-Type"] == "application/json"


def test_get_holdings_parses_models() -> None:
    client, session = _client(_response(body=[HOLDING]))
    [h] = client.get_holdings()
    assert h.symbol == "AAPL"
    session.request.assert_called_once_with("GET", "http://api.local/v1/holdings", json=None, timeout=5)


def test_create_holding_posts_form() -> None:
    client, session = _client(_response(201, body=HOLDING))
    form = CreateHoldingForm(
        symbol="AAPL",
        name="Apple Inc",
        sector="Technology",
        qty=10,
        avg_price=150,
        current_price=155,
        allocation_pct=15,
    )
    created = client.create_holding(form)
    assert created.id == "h1"
    method, url = session.request.call_args.args
    assert (method, url) == ("POST", "http://api.local/v1/holdings")
    payload = session.request.call_args.kwargs["json"]
    assert payload["symbol"] == "AAPL"
    assert "rsi" not in payload


def test_update_holding_sends_partial_body() -> None:
    client, session = _client(_response(body={**HOLDING, "current_price": 160}))
    updated = client.update_holding("h1", UpdateHoldingForm(current_price=160))
    assert updated.current_price == 160
    assert session.request.call_args.args == ("PUT", "http://api.local/v1/holdings/h1")
    assert session.request.call_args.kwargs["json"] == {"current_price": 160.0}


def test_delete_holding_handles_no_content() -> None:
    client, session = _client(_response(204, reason="No Content"))
    assert client.delete_holding("h1") is None
    assert session.request.call_args.args == ("DELETE", "http://api.local/v1/holdings/h1")


def test_read_endpoints() -> None:
    client, session = _client(
        _response(body=[{"sector": "Technology", "target_pct": 40}]),
        _response(body=[{"month": "2024-01", "account": "Main", "pnl": 12.5}]),
        _response(
            body=[
                {
                    "date": "2024-01-31",
                    "sector": "Technology",
                    "actual_pct": 42,
                    "target_pct": 40,
                    "variance": 2,
                    "total_value": 1000,
                }
            ]
        ),
        _response(
            body={
                "total_invested": 1,
                "current_net_worth": 2,
                "unrealized_gain_loss": 1,
                "unrealized_pct": 100,
                "allocation_variance": {},
                "monthly_trend": [],
                "ytd_growth": 0,
            }
        ),
        _response(body={"status": "ok", "timestamp": "2024-01-01T00:00:00Z"}),
    )
    assert client.get_ideal_allocation()[0].target_pct == 40
    assert client.get_monthly_growth()[0].pnl == 12.5
    assert client.get_snapshots()[0].variance == 2
    assert client.get_summary().current_net_worth == 2
    assert client.health()["status"] == "ok"
    urls = [c.args[1] for c in session.request.call_args_list]
    assert urls == [
        "http://api.local/v1/ideal-allocation",
        "http://api.local/v1/monthly-growth",
        "http://api.local/v1/snapshots",
        "http://api.local/v1/summary",
        "http://api.local/health",
    ]


def test_create_monthly_growth_and_snapshot() -> None:
    client, session = _client(
        _response(201, body={"month": "2024-02", "account": "Main", "pnl": -5}),
        _response(201, body=[]),
    )
    entry = client.create_monthly_growth(MonthlyGrowthForm(month="2024-02", account="Main", pnl=-5))
    assert entry.pnl == -5
    assert client.create_snapshot() == []
    assert session.request.call_args_list[1].args == ("POST", "http://api.local/v1/snapshot")


def test_error_body_message_is_surfaced() -> None:
    body = {"error": "Not Found", "message": "Holding h9 not found", "timestamp": "2024-01-01T00:00:00Z"}
    client, _ = _client(_response(404, body=body, reason="Not Found"))
    with pytest.raises(ApiRequestError) as exc_info:
        client.delete_holding("h9")
    assert exc_info.value.message == "Holding h9 not found"
    assert exc_info.value.error == "Not Found"
    assert exc_info.value.status_code == 404


def test_non_json_error_falls_back_to_status_line() -> None:
    client, _ = _client(_response(502, reason="Bad Gateway"))
    with pytest.raises(ApiRequestError) as exc_info:
        client.get_holdings()
    assert exc_info.value.message == "HTTP 502: Bad Gateway"
    assert exc_info.value.error == "Network Error"


def test_transport_failure_is_wrapped() -> None:
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = requests.ConnectionError("connection refused")
    client = PortfolioApiClient("http://api.local", "secret", session=session)
    with pytest.raises(ApiRequestError, match="connection refused") as exc_info:
        client.get_summary()
    assert exc_info.value.status_code is None


def test_unexpected_payload_is_reported() -> None:
    client, _ = _client(_response(body=[{"symbol": "AAPL"}]))
    with pytest.raises(ApiRequestError, match="Unexpected payload"):
        client.get_holdings()


def test_context_manager_closes_session() -> None:
    client, session = _client()
    with client:
        pass
    session.close.assert_called_once()


def test_client_from_settings() -> None:
    settings = Settings(
        backend_url="http://api.local",
        api_token="tok",
        request_timeout=7.5,
        log_level="INFO",
        log_file=None,
    )
    client = client_from_settings(settings)
    try:
        assert client.base_url == "http://api.local"
        assert client.timeout == 7.5
    finally:
        client.close()
