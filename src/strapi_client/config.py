"""Configuration models for the Strapi client."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .networking.constants import DEFAULT_HTTP_TIMEOUT_MS


def _frozen_empty() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class AuthConfig:
    """Authentication strategy selection.

    ``strategy`` names a provider registered in the auth provider factory
    (``"api-token"`` or ``"users-permissions"`` by default) and ``options``
    holds the strategy-specific values, for instance ``{"token": "..."}``.
    """

    strategy: str
    options: Mapping[str, Any] = field(default_factory=_frozen_empty)


@dataclass(frozen=True)
class StrapiConfig:
    """Configuration for the top-level Strapi client.

    The base URL is validated by the client at construction, not here, so the
    failure surfaces as an initialization error.
    """

    base_url: str
    auth: AuthConfig | None = None
    timeout: int = DEFAULT_HTTP_TIMEOUT_MS
    headers: Mapping[str, str] = field(default_factory=_frozen_empty)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
