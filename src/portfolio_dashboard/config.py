"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the data-API location and credentials from the environment (including
a check that `API_TOKEN` is present).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_BACKEND_URL = "http://localhost:3000"


@dataclass(frozen=True)
class Settings:
    """Container for dashboard configuration read from the environment.

    Attributes:
        backend_url: Base URL of the portfolio data API.
        api_token: Shared secret sent as the `x-api-key` header.
        request_timeout: Per-request timeout in seconds.
        log_level: Logging level name.
        log_file: Optional log file path.
    """
    backend_url: str
    api_token: str
    request_timeout: float
    log_level: str
    log_file: Path | None


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `API_TOKEN` is not set or `API_TIMEOUT` is not a number.
    """
    backend_url = os.getenv("BACKEND_URL", DEFAULT_BACKEND_URL).strip().rstrip("/")
    api_token = os.getenv("API_TOKEN", "").strip()
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    log_file_raw = os.getenv("LOG_FILE", "").strip()

    if not api_token:
        raise RuntimeError(
            "API_TOKEN is required. Set it in .env "
            "(it must match the data API's shared secret)."
        )

    try:
        request_timeout = float(os.getenv("API_TIMEOUT", "30"))
    except ValueError as exc:
        raise RuntimeError("API_TIMEOUT must be a number of seconds.") from exc

    return Settings(
        backend_url=backend_url or DEFAULT_BACKEND_URL,
        api_token=api_token,
        request_timeout=request_timeout,
        log_level=log_level,
        log_file=Path(log_file_raw) if log_file_raw else None,
    )
