"""Configuration models for the HttpClient interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .constants import DEFAULT_HTTP_TIMEOUT_MS, MAX_SAFE_INTEGER


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


def validate_timeout(timeout: object) -> int:
    """Return ``timeout`` if it is a usable millisecond timeout.

    Raises:
        TypeError: not an integer, or outside the safe integer range.
        ValueError: not strictly positive.
    """
    if (
        isinstance(timeout, bool)
        or not isinstance(timeout, int)
        or abs(timeout) > MAX_SAFE_INTEGER
    ):
        raise TypeError("timeout must be a safe integer")
    if timeout <= 0:
        raise ValueError("timeout must be > 0")
    return timeout


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HttpClient behavior.

    ``base_url`` is validated and normalized by the client itself so that a
    custom URL validator can be injected there.
    """

    base_url: str
    timeout: int = DEFAULT_HTTP_TIMEOUT_MS
    headers: Mapping[str, str] = field(default_factory=_default_headers)

    def __post_init__(self) -> None:
        validate_timeout(self.timeout)

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "headers",
            MappingProxyType(dict(self.headers)),
        )
