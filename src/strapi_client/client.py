"""Top-level Strapi client."""

from __future__ import annotations

from typing import Any, Callable

import requests
import structlog

from . import interceptors
from .auth.manager import AuthManager
from .config import StrapiConfig
from .content_types import CollectionTypeManager, SingleTypeManager
from .errors import StrapiInitializationError
from .networking.client import HttpClient
from .networking.config import HttpClientConfig
from .validators import StrapiConfigValidator, validate_resource_name

logger = structlog.get_logger()

HttpClientFactory = Callable[[HttpClientConfig], HttpClient]


class Strapi:
    """Entry point for talking to a Strapi backend.

    Validates the configuration, builds the HTTP client, registers the
    default and auth interceptors and hands out resource managers.

    Example::

        client = Strapi(StrapiConfig(
            base_url="http://localhost:1337/api",
            auth=AuthConfig("api-token", {"token": "..."}),
        ))
        articles = client.collection("articles").find({"locale": "en"})
    """

    def __init__(
        self,
        config: StrapiConfig,
        validator: StrapiConfigValidator | None = None,
        auth_manager: AuthManager | None = None,
        http_client_factory: HttpClientFactory | None = None,
    ) -> None:
        """Create a client.

        Raises:
            StrapiInitializationError: the configuration is invalid or the
                auth strategy could not be set up.
        """
        self._config = config
        self._validator = validator or StrapiConfigValidator()
        self._auth_manager = auth_manager or AuthManager()

        logger.debug("client_initialization_started")

        self._preflight_validation()

        # The HTTP client relies on the preflight validation for the base URL.
        http_config = HttpClientConfig(
            base_url=config.base_url,
            timeout=config.timeout,
            headers=config.headers,
        )
        if http_client_factory is not None:
            self._http_client = http_client_factory(http_config)
        else:
            self._http_client = HttpClient(http_config, self._validator.url_validator)

        self._init_http()
        self._init_auth()

        logger.debug("client_initialization_finished", base_url=self.base_url)

    def _preflight_validation(self) -> None:
        try:
            self._validator.validate_config(self._config)
        except Exception as exc:
            raise StrapiInitializationError(cause=exc) from exc

    def _init_http(self) -> None:
        self._http_client.interceptors.request.use(interceptors.set_default_headers())
        self._http_client.interceptors.response.use(interceptors.transform_errors())

    def _init_auth(self) -> None:
        auth = self._config.auth
        if auth is not None:
            logger.debug("auth_strategy_setup", strategy=auth.strategy)
            try:
                self._auth_manager.set_strategy(auth.strategy, auth.options)
            except Exception as exc:
                raise StrapiInitializationError(
                    f"Failed to initialize the client auth manager: {exc}",
                    cause=exc,
                ) from exc

        (
            self._http_client.interceptors.request
            .use(
                interceptors.ensure_pre_authentication(
                    self._auth_manager, self._http_client
                )
            )
            .use(interceptors.authenticate_requests(self._auth_manager))
        )
        self._http_client.interceptors.response.use(
            *interceptors.notify_on_unauthorized_response(self._auth_manager)
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    @property
    def auth_manager(self) -> AuthManager:
        return self._auth_manager

    def fetch(self, path: str, **init: Any) -> requests.Response:
        """Send a request to ``path`` through the full interceptor pipeline.

        ``init`` is forwarded to :meth:`HttpClient.request` (``method``,
        ``headers``, ``params``, ``data``, ``json``).
        """
        return self._http_client.request(path, **init)

    def collection(self, resource: str) -> CollectionTypeManager:
        """Return a manager for the ``resource`` collection type (plural name)."""
        return CollectionTypeManager(validate_resource_name(resource), self._http_client)

    def single(self, resource: str) -> SingleTypeManager:
        """Return a manager for the ``resource`` single type (singular name)."""
        return SingleTypeManager(validate_resource_name(resource), self._http_client)
