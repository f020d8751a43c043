"""Authentication state and strategy selection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, MutableMapping

import structlog

from .factory import AuthProviderFactory
from .providers import (
    ApiTokenAuthProvider,
    AuthProvider,
    UsersPermissionsAuthProvider,
)

if TYPE_CHECKING:
    import requests

    from ..networking.client import HttpClient

logger = structlog.get_logger()


class AuthManager:
    """Own the current auth provider and track whether it is authenticated.

    ``is_authenticated`` starts False, turns True after a successful
    :meth:`authenticate` and goes back to False on a failed attempt or an
    unauthorized response.

    The manager is shared by every request issued through a client and takes
    no lock: two threads observing an unauthenticated state at the same time
    will both run the handshake.
    """

    def __init__(self, auth_provider_factory: AuthProviderFactory | None = None) -> None:
        self._auth_provider_factory = auth_provider_factory or AuthProviderFactory()
        self._auth_provider: AuthProvider | None = None
        self._is_authenticated = False

        self._register_default_providers()

    @property
    def strategy(self) -> str | None:
        """Name of the current strategy, None when no provider is set."""
        return self._auth_provider.name if self._auth_provider is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated

    def handle_unauthorized_error(self) -> None:
        """Reset the state so the next request triggers a new handshake."""
        logger.debug("auth_state_reset", strategy=self.strategy)
        self._is_authenticated = False

    def set_strategy(self, strategy: str, options: Any) -> None:
        """Replace the current provider with a new one for ``strategy``.

        The new provider starts unauthenticated. On failure the current
        provider and state are kept.

        Raises:
            StrapiError: ``strategy`` is not registered.
            StrapiValidationError: ``options`` are invalid for the strategy.
        """
        self._auth_provider = self._auth_provider_factory.create(strategy, options)
        self._is_authenticated = False

    def authenticate(self, http_client: HttpClient) -> None:
        """Run the current provider's handshake.

        Never raises: a failed handshake leaves ``is_authenticated`` False.
        """
        if self._auth_provider is None:
            self._is_authenticated = False
            return

        try:
            self._auth_provider.authenticate(http_client)
        except Exception as exc:
            logger.warning(
                "auth_failed",
                strategy=self._auth_provider.name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            self._is_authenticated = False
        else:
            self._is_authenticated = True

    def authenticate_request(self, request: requests.Request) -> None:
        """Copy the provider's headers onto ``request``, overwriting same-name headers."""
        if self._auth_provider is None:
            return

        headers: MutableMapping[str, str] = request.headers
        for key, value in self._auth_provider.headers.items():
            headers[key] = value

    def _register_default_providers(self) -> None:
        (
            self._auth_provider_factory
            .register(ApiTokenAuthProvider.identifier, ApiTokenAuthProvider)
            .register(
                UsersPermissionsAuthProvider.identifier, UsersPermissionsAuthProvider
            )
        )
