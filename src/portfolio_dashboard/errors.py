"""Exception types raised by the engine and the data-API client."""

from __future__ import annotations


class InvalidPeriodKey(ValueError):
    """A month key does not have the fixed ``YYYY-MM`` shape."""

    def __init__(self, key: object) -> None:
        super().__init__(f"Invalid period key {key!r}: expected YYYY-MM with month 01-12")
        self.key = key


class ApiRequestError(RuntimeError):
    """The data API returned a non-2xx response or could not be reached.

    Attributes:
        message: Human-readable message (the `message` field of the error body).
        error: Short error class reported by the API.
        status_code: HTTP status, or ``None`` for transport failures.
    """

    def __init__(self, message: str, error: str = "API Error", status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error
        self.status_code = status_code
