"""Interceptors wiring defaults, error mapping and authentication into a client.

Each factory returns callables suitable for ``InterceptorManager.use``.
"""

from __future__ import annotations

from typing import Any, Callable

import structlog

from .auth.manager import AuthManager
from .errors import HTTPAuthorizationError
from .networking.client import HttpClient, RequestPayload, ResponsePayload
from .networking.constants import DEFAULT_CONTENT_TYPE, StatusCode, is_success_status

logger = structlog.get_logger()

RequestInterceptor = Callable[[RequestPayload], RequestPayload]
ResponseInterceptor = Callable[[ResponsePayload], ResponsePayload]

DEFAULT_HEADERS = {"Content-Type": DEFAULT_CONTENT_TYPE}


def set_default_headers() -> RequestInterceptor:
    """Set headers such as ``Content-Type`` unless the request already has them."""

    def interceptor(payload: RequestPayload) -> RequestPayload:
        headers = payload.request.headers
        for key, value in DEFAULT_HEADERS.items():
            if key not in headers:
                headers[key] = value
        return payload

    return interceptor


def transform_errors() -> ResponseInterceptor:
    """Raise the matching ``HTTPError`` subclass for non-2xx responses."""

    def interceptor(payload: ResponsePayload) -> ResponsePayload:
        if is_success_status(payload.response.status_code):
            return payload
        raise HttpClient.map_response_to_http_error(payload.response, payload.request)

    return interceptor


def ensure_pre_authentication(
    auth_manager: AuthManager, http_client: HttpClient
) -> RequestInterceptor:
    """Authenticate before the request when a strategy is set but not yet authenticated.

    The handshake runs on an interceptor-free fork of ``http_client`` so the
    provider's own request cannot re-enter this interceptor.
    """

    def interceptor(payload: RequestPayload) -> RequestPayload:
        if auth_manager.strategy and not auth_manager.is_authenticated:
            logger.debug("auth_preflight_started", strategy=auth_manager.strategy)
            auth_manager.authenticate(http_client.create(inherit_interceptors=False))
        return payload

    return interceptor


def authenticate_requests(auth_manager: AuthManager) -> RequestInterceptor:
    """Inject the current provider's headers into outgoing requests."""

    def interceptor(payload: RequestPayload) -> RequestPayload:
        auth_manager.authenticate_request(payload.request)
        return payload

    return interceptor


def notify_on_unauthorized_response(
    auth_manager: AuthManager,
) -> tuple[ResponseInterceptor, Callable[[Any], Any]]:
    """Reset the auth state on 401 responses.

    Returns a ``(fulfilled, rejected)`` pair: the first handles 401 responses
    that reach the chain unmapped, the second ``HTTPAuthorizationError``
    raised earlier in the pipeline.
    """

    def fulfilled(payload: ResponsePayload) -> ResponsePayload:
        if payload.response.status_code == StatusCode.UNAUTHORIZED:
            auth_manager.handle_unauthorized_error()
        return payload

    def rejected(error: Any) -> Any:
        if isinstance(error, HTTPAuthorizationError):
            auth_manager.handle_unauthorized_error()
        return error

    return fulfilled, rejected
