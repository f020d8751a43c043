"""Error taxonomy for the Strapi client.

Three families live here:

- client-level errors (``StrapiError`` and subtypes) raised for invalid
  configuration or failed initialization,
- URL validation errors raised synchronously while configuring a base URL,
- HTTP errors: ``HTTPError`` and its status-specific subclasses built from a
  non-2xx response, plus transport errors (``HttpClientError`` and subtypes)
  for calls that never produced a response.
"""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import urlsplit

import requests


class StrapiError(Exception):
    """Base error for client-level failures.

    Args:
        message: Human readable description.
        cause: Optional underlying error or value kept for diagnostics.
    """

    default_message = (
        "An error occurred in the Strapi client. "
        "Please check the logs for more information."
    )

    def __init__(self, message: str | None = None, cause: Any = None) -> None:
        super().__init__(message or self.default_message)
        self.cause = cause


class StrapiValidationError(StrapiError):
    default_message = "Some of the provided values are not valid."


class StrapiInitializationError(StrapiError):
    default_message = "Could not initialize the Strapi client"


class URLValidationError(ValueError):
    """Base class for base URL validation failures."""


class URLParsingError(URLValidationError):
    def __init__(self, url: object) -> None:
        super().__init__(f'Could not parse invalid URL: "{url}"')
        self.url = url


class URLProtocolValidationError(URLValidationError):
    def __init__(self, url: str, allowed_protocols: Iterable[str]) -> None:
        self.url = url
        self.protocol = f"{urlsplit(url).scheme}:"
        self.allowed_protocols = tuple(allowed_protocols)
        formatted = ", ".join(f'"{protocol}"' for protocol in self.allowed_protocols)
        super().__init__(
            f"Only {formatted} protocols are supported, "
            f'but got "{self.protocol}" instead.'
        )


class HTTPError(Exception):
    """A request completed with a non-2xx response.

    Carries the triggering ``request`` and ``response`` for inspection.
    """

    def __init__(self, response: requests.Response, request: requests.Request) -> None:
        code = getattr(response, "status_code", None)
        title = getattr(response, "reason", None)
        status = f"{'' if code is None else code} {title or ''}".strip()
        reason = f"status code {status}" if status else "an unknown error"
        method = getattr(request, "method", None)
        url = getattr(request, "url", None)

        super().__init__(f"Request failed with {reason}: {method} {url}")

        self.response = response
        self.request = request

    @property
    def status_code(self) -> int | None:
        return getattr(self.response, "status_code", None)


class HTTPBadRequestError(HTTPError):
    pass


class HTTPAuthorizationError(HTTPError):
    pass


class HTTPForbiddenError(HTTPError):
    pass


class HTTPNotFoundError(HTTPError):
    pass


class HTTPTimeoutError(HTTPError):
    pass


class HTTPInternalServerError(HTTPError):
    pass


class HttpClientError(Exception):
    """A request failed before any response was received."""

    def __init__(self, message: str, request: requests.Request | None = None) -> None:
        super().__init__(message)
        self.request = request


class RequestTimeoutError(HttpClientError):
    """The client-level timeout elapsed and the call was cancelled."""


class HttpConnectionError(HttpClientError):
    """The connection could not be established or was dropped."""
