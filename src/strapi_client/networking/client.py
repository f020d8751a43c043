"""Synchronous HTTP client for the Strapi content API.

The client owns the base URL, the timeout and static headers, plus two
interceptor chains (request and response). It holds no policy of its own:
default headers, authentication and error classification are registered as
interceptors by the caller, not hard-wired here.
"""

from __future__ import annotations

import socket
import threading
from dataclasses import dataclass, field
from time import monotonic
from typing import Any, Mapping, MutableMapping

import requests
import structlog
from requests.structures import CaseInsensitiveDict

from ..errors import (
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
)
from ..formatters import format_path
from ..utilities import format_request
from ..validators import URLValidator
from .config import HttpClientConfig, validate_timeout
from .constants import StatusCode
from .interceptor_manager import InterceptorManager

logger = structlog.get_logger()


@dataclass
class RequestPayload:
    request: requests.Request


@dataclass
class ResponsePayload:
    request: requests.Request
    response: requests.Response


@dataclass
class InterceptorManagerMap:
    request: InterceptorManager[RequestPayload] = field(
        default_factory=InterceptorManager
    )
    response: InterceptorManager[ResponsePayload] = field(
        default_factory=InterceptorManager
    )


_STATUS_ERRORS: dict[int, type[HTTPError]] = {
    StatusCode.BAD_REQUEST: HTTPBadRequestError,
    StatusCode.UNAUTHORIZED: HTTPAuthorizationError,
    StatusCode.FORBIDDEN: HTTPForbiddenError,
    StatusCode.NOT_FOUND: HTTPNotFoundError,
    StatusCode.REQUEST_TIMEOUT: HTTPTimeoutError,
    StatusCode.INTERNAL_SERVER_ERROR: HTTPInternalServerError,
}


_CHUNK_SIZE = 8192


def _shutdown_connection(response: requests.Response) -> None:
    """Shut the response socket down, waking any thread blocked reading it."""
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as exc:
        logger.debug("http_socket_shutdown_failed", error=str(exc))


def _append_header(headers: MutableMapping[str, str], key: str, value: str) -> None:
    """Add ``value`` to ``key``, combining with any existing value."""
    existing = headers.get(key)
    headers[key] = value if existing is None else f"{existing}, {value}"


class HttpClient:
    """Core HTTP client (sync).

    Every call goes through :meth:`request`, which resolves the path against
    the base URL, runs the request interceptors, sends the request under the
    client timeout and runs the response interceptors. Failures are routed
    through the response chain's rejected handlers before being raised.
    """

    def __init__(
        self,
        config: HttpClientConfig,
        url_validator: URLValidator | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: Base URL, timeout and static headers.
            url_validator: Validator applied to the base URL.
            session: Session used for the network calls.

        Raises:
            URLParsingError: the base URL cannot be parsed.
            URLProtocolValidationError: the base URL protocol is not allowed.
        """
        self._url_validator = url_validator or URLValidator()
        self._url_validator.validate(config.base_url)

        self._config = config
        self._base_url = format_path(config.base_url, trailing_slashes=False)
        self._timeout = config.timeout
        self._headers: dict[str, str] = dict(config.headers)
        self._session = session or requests.Session()

        self.interceptors = InterceptorManagerMap()

        logger.debug("http_client_initialized", base_url=self._base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> int:
        """Request timeout, in milliseconds."""
        return self._timeout

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    def set_base_url(self, url: str) -> HttpClient:
        """Validate and replace the base URL.

        Raises:
            URLParsingError: ``url`` cannot be parsed.
            URLProtocolValidationError: ``url`` uses a disallowed protocol.
        """
        self._url_validator.validate(url)
        self._base_url = format_path(url, trailing_slashes=False)

        logger.debug("http_base_url_set", base_url=self._base_url)

        return self

    def set_timeout(self, timeout: int) -> HttpClient:
        """Replace the request timeout (milliseconds).

        Raises:
            TypeError: ``timeout`` is not a safe integer.
            ValueError: ``timeout`` is not positive.
        """
        logger.debug("http_timeout_set", timeout_ms=timeout)

        self._timeout = validate_timeout(timeout)
        return self

    def _timeout_seconds(self) -> float:
        return self._timeout / 1000

    def _map_transport_error(
        self, error: requests.exceptions.RequestException, request: requests.Request
    ) -> HttpClientError:
        """Map requests exceptions to client errors."""
        if isinstance(error, requests.exceptions.Timeout):
            return self._timeout_error(request)

        if isinstance(error, requests.exceptions.ConnectionError):
            return HttpConnectionError(str(error), request=request)

        # Generic fallback for other request exceptions
        return HttpClientError(str(error), request=request)

    def _timeout_error(self, request: requests.Request) -> RequestTimeoutError:
        return RequestTimeoutError(
            f"Request cancelled after {self._timeout} ms: {format_request(request)}",
            request=request,
        )

    def _send(self, request: requests.Request) -> requests.Response:
        """Perform the network call, headers and body, before the client deadline."""
        prepared = self._session.prepare_request(request)
        deadline = monotonic() + self._timeout_seconds()
        try:
            response = self._session.send(
                prepared, timeout=self._timeout_seconds(), stream=True
            )
        except requests.exceptions.RequestException as exc:
            raise self._map_transport_error(exc, request) from exc

        self._read_body(response, request, deadline)
        return response

    def _read_body(
        self, response: requests.Response, request: requests.Request, deadline: float
    ) -> None:
        """Load the streamed body of ``response`` before ``deadline``.

        The socket timeout only bounds each read, so a server trickling bytes
        could keep the call open indefinitely. A watchdog shuts the socket down
        once the deadline passes and the deadline is checked between chunks.

        Raises:
            RequestTimeoutError: the deadline passed before the body was read.
            HttpClientError: reading the body failed.
        """
        expired = threading.Event()

        def expire() -> None:
            expired.set()
            _shutdown_connection(response)

        watchdog = threading.Timer(max(deadline - monotonic(), 0.0), expire)
        watchdog.daemon = True
        watchdog.start()

        chunks: list[bytes] = []
        failure: requests.exceptions.RequestException | None = None
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if expired.is_set() or monotonic() >= deadline:
                    break
                chunks.append(chunk)
        except requests.exceptions.RequestException as exc:
            failure = exc
        finally:
            watchdog.cancel()

        if expired.is_set() or monotonic() >= deadline:
            response.close()
            logger.debug(
                "http_deadline_exceeded",
                request=format_request(request),
                timeout_ms=self._timeout,
                bytes_read=sum(len(chunk) for chunk in chunks),
            )
            raise self._timeout_error(request) from failure

        if failure is not None:
            response.close()
            raise self._map_transport_error(failure, request) from failure

        response._content = b"".join(chunks)
        response._content_consumed = True

    def request(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        data: Any | None = None,
        json: Any | None = None,
    ) -> requests.Response:
        """Send a request to ``path``, relative to the base URL.

        Args:
            path: Relative path; its leading slashes are collapsed to one.
            method: HTTP method.
            headers: Per-request headers. Static client headers are added on
                top, combined with any caller value for the same name.
            params: Extra query parameters.
            data: Raw body payload.
            json: JSON body payload (mutually exclusive with data).

        Returns:
            The response produced by the response interceptor chain.

        Raises:
            RequestTimeoutError: the client timeout elapsed.
            HttpClientError: the network call failed.
            Exception: whatever the response rejection chain produces, for
                instance an ``HTTPError`` subclass raised by an interceptor.
        """
        safe_path = format_path(path, leading_slashes="single")
        url = f"{self._base_url}{safe_path}"

        original_request = requests.Request(
            method=method.upper(),
            url=url,
            headers=CaseInsensitiveDict(headers or {}),
            params=dict(params or {}),
            data=data,
            json=json,
        )

        for key, value in self._headers.items():
            _append_header(original_request.headers, key, value)
            logger.debug(
                "http_header_set",
                header=key,
                request=format_request(original_request),
            )

        processed = self.interceptors.request.execute(
            RequestPayload(request=original_request)
        )
        request = processed.request

        try:
            response = self._send(request)

            logger.debug(
                "http_response_received",
                request=format_request(request),
                status_code=response.status_code,
            )

            result = self.interceptors.response.execute(
                ResponsePayload(request=request, response=response)
            )
            return result.response
        except Exception as exc:
            logger.debug(
                "http_request_failed",
                request=format_request(request),
                error=type(exc).__name__,
            )
            rejected = self.interceptors.response.reject(exc)
            if rejected is exc or not isinstance(rejected, BaseException):
                raise
            raise rejected from exc

    def get(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """Perform an HTTP GET request."""
        return self.request(path, method="GET", headers=headers, params=params)

    def post(
        self,
        path: str,
        *,
        data: Any | None = None,
        json: Any | None = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """Perform an HTTP POST request."""
        return self.request(
            path, method="POST", headers=headers, params=params, data=data, json=json
        )

    def put(
        self,
        path: str,
        *,
        data: Any | None = None,
        json: Any | None = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """Perform an HTTP PUT request."""
        return self.request(
            path, method="PUT", headers=headers, params=params, data=data, json=json
        )

    def delete(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """Perform an HTTP DELETE request."""
        return self.request(path, method="DELETE", headers=headers, params=params)

    def _fork(self, config: HttpClientConfig) -> HttpClient:
        """Build a client of the same concrete type sharing this one's dependencies.

        Subclasses with a different constructor signature override this.
        """
        return type(self)(config, self._url_validator, self._session)

    def create(
        self,
        *,
        base_url: str | None = None,
        timeout: int | None = None,
        headers: Mapping[str, str] | None = None,
        inherit_interceptors: bool = True,
    ) -> HttpClient:
        """Derive a new client from this one.

        Unset fields fall back to this client's values. With
        ``inherit_interceptors`` the fork starts from clones of both chains,
        so later ``use`` calls on either client stay local to it.

        Raises:
            StrapiError: the fork is not an ``HttpClient``.
        """
        config = HttpClientConfig(
            base_url=base_url if base_url is not None else self._base_url,
            timeout=timeout if timeout is not None else self._timeout,
            headers=headers if headers is not None else self._headers,
        )
        fork = self._fork(config)

        if not isinstance(fork, HttpClient):
            raise StrapiError("The created instance is not an instance of HttpClient")

        if inherit_interceptors:
            fork.interceptors.request = self.interceptors.request.clone()
            fork.interceptors.response = self.interceptors.response.clone()

        return fork

    @staticmethod
    def map_response_to_http_error(
        response: requests.Response, request: requests.Request
    ) -> HTTPError:
        """Return the ``HTTPError`` subclass instance matching the status code."""
        error_cls = _STATUS_ERRORS.get(response.status_code, HTTPError)
        return error_cls(response, request)
