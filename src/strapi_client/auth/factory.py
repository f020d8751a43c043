"""Registry of authentication strategies."""

from __future__ import annotations

from typing import Any, Callable

import structlog

from ..errors import StrapiError
from .providers import AuthProvider

logger = structlog.get_logger()

AuthProviderCreator = Callable[[Any], AuthProvider]


class AuthProviderFactory:
    """Map strategy names to provider constructors.

    Example::

        factory = AuthProviderFactory()
        factory.register("api-token", ApiTokenAuthProvider)
        provider = factory.create("api-token", {"token": "secret"})
    """

    def __init__(self) -> None:
        self._registry: dict[str, AuthProviderCreator] = {}

    @property
    def strategies(self) -> list[str]:
        return sorted(self._registry)

    def register(self, strategy: str, creator: AuthProviderCreator) -> AuthProviderFactory:
        """Register ``creator`` under ``strategy``.

        Registering an existing name silently replaces the previous creator.
        """
        self._registry[strategy] = creator

        logger.debug("auth_strategy_registered", strategy=strategy)

        return self

    def create(self, strategy: str, options: Any) -> AuthProvider:
        """Instantiate the provider registered for ``strategy``.

        Raises:
            StrapiError: ``strategy`` is not registered.
            StrapiValidationError: the provider rejected ``options``.
        """
        creator = self._registry.get(strategy)

        if creator is None:
            logger.debug("auth_strategy_not_registered", strategy=strategy)
            raise StrapiError(f'Auth strategy "{strategy}" is not supported.')

        provider = creator(options)

        logger.debug("auth_provider_created", strategy=strategy)

        return provider
