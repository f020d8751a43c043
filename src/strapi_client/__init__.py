"""Client library for the Strapi content API."""

from __future__ import annotations

from typing import Any

from .auth import API_TOKEN_AUTH_STRATEGY
from .client import Strapi
from .config import AuthConfig, StrapiConfig
from .content_types import CollectionTypeManager, SingleTypeManager
from .errors import (
    HTTPAuthorizationError,
    HTTPBadRequestError,
    HTTPError,
    HTTPForbiddenError,
    HTTPInternalServerError,
    HTTPNotFoundError,
    HTTPTimeoutError,
    HttpClientError,
    HttpConnectionError,
    RequestTimeoutError,
    StrapiError,
    StrapiInitializationError,
    StrapiValidationError,
    URLParsingError,
    URLProtocolValidationError,
    URLValidationError,
)


def strapi(base_url: str, auth: str | None = None, **kwargs: Any) -> Strapi:
    """Create a :class:`Strapi` client.

    Args:
        base_url: Root URL of the content API, e.g. ``http://localhost:1337/api``.
        auth: Optional API token; selects the ``api-token`` strategy.
        **kwargs: Extra ``StrapiConfig`` fields (``timeout``, ``headers``).
    """
    auth_config = (
        AuthConfig(API_TOKEN_AUTH_STRATEGY, {"token": auth}) if auth is not None else None
    )
    return Strapi(StrapiConfig(base_url=base_url, auth=auth_config, **kwargs))


__all__ = [
    "AuthConfig",
    "CollectionTypeManager",
    "HTTPAuthorizationError",
    "HTTPBadRequestError",
    "HTTPError",
    "HTTPForbiddenError",
    "HTTPInternalServerError",
    "HTTPNotFoundError",
    "HTTPTimeoutError",
    "HttpClientError",
    "HttpConnectionError",
    "RequestTimeoutError",
    "SingleTypeManager",
    "Strapi",
    "StrapiConfig",
    "StrapiError",
    "StrapiInitializationError",
    "StrapiValidationError",
    "URLParsingError",
    "URLProtocolValidationError",
    "URLValidationError",
    "strapi",
]
