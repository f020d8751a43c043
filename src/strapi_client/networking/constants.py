"""HTTP constants shared by the networking layer."""

from __future__ import annotations

from http import HTTPStatus

# Default timeout for HTTP requests, in milliseconds.
DEFAULT_HTTP_TIMEOUT_MS = 10_000

# Largest integer representable without loss in an IEEE 754 double.
MAX_SAFE_INTEGER = 2**53 - 1

DEFAULT_CONTENT_TYPE = "application/json"

StatusCode = HTTPStatus


def is_success_status(status_code: int | None) -> bool:
    """Return True for 2xx status codes."""
    return status_code is not None and 200 <= status_code < 300
