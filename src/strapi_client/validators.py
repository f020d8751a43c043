"""Validators for base URLs, client configuration and API responses."""

from __future__ import annotations

import re
from typing import Any, Iterable
from urllib.parse import urlsplit

import requests
import structlog

from .config import StrapiConfig
from .networking.config import validate_timeout
from .errors import (
    StrapiValidationError,
    URLParsingError,
    URLProtocolValidationError,
    URLValidationError,
)

logger = structlog.get_logger()

DEFAULT_ALLOWED_PROTOCOLS = ("http:", "https:")

# Schemes whose URLs are meaningless without a host.
_HOST_REQUIRED_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})
_WHITESPACE = re.compile(r"\s")
_RESOURCE_NAME = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class URLValidator:
    """Validate base URLs against an allow-list of protocols.

    Args:
        allowed_protocols: Protocols written with their trailing colon, as in
            ``("http:", "https:")``.
    """

    def __init__(
        self, allowed_protocols: Iterable[str] = DEFAULT_ALLOWED_PROTOCOLS
    ) -> None:
        self._allowed_protocols = tuple(allowed_protocols)

    @property
    def allowed_protocols(self) -> tuple[str, ...]:
        return self._allowed_protocols

    def validate(self, url: object) -> None:
        """Raise if ``url`` is not a parseable URL with an allowed protocol.

        Raises:
            URLParsingError: ``url`` is not a string or cannot be parsed as
                an absolute URL.
            URLProtocolValidationError: the protocol is not allowed.
        """
        if not isinstance(url, str):
            logger.debug("url_not_a_string", url_type=type(url).__name__)
            raise URLParsingError(url)

        scheme = self._parse_scheme(url)
        if scheme is None:
            logger.debug("url_not_parseable", url=url)
            raise URLParsingError(url)

        if f"{scheme}:" not in self._allowed_protocols:
            logger.debug(
                "url_protocol_not_allowed",
                url=url,
                protocol=f"{scheme}:",
                allowed=self._allowed_protocols,
            )
            raise URLProtocolValidationError(url, self._allowed_protocols)

        logger.debug("url_validated", url=url)

    @staticmethod
    def _parse_scheme(url: str) -> str | None:
        """Return the lowercased scheme of an absolute URL, None if unparseable."""
        if not url or _WHITESPACE.search(url):
            return None
        try:
            parts = urlsplit(url)
            # Accessing the port validates it.
            parts.port
        except ValueError:
            return None

        scheme = parts.scheme.lower()
        if not scheme:
            return None
        if scheme in _HOST_REQUIRED_SCHEMES and not parts.hostname:
            return None
        if not parts.netloc and not parts.path:
            return None
        return scheme


class StrapiConfigValidator:
    """Validate the configuration used to initialize the Strapi client."""

    def __init__(self, url_validator: URLValidator | None = None) -> None:
        self._url_validator = url_validator or URLValidator()

    @property
    def url_validator(self) -> URLValidator:
        return self._url_validator

    def validate_config(self, config: StrapiConfig) -> None:
        """Validate ``config``.

        Raises:
            StrapiValidationError: the config is not a ``StrapiConfig`` or
                its base URL is invalid.
        """
        logger.debug("validating_client_config")

        if not isinstance(config, StrapiConfig):
            logger.debug("invalid_client_config", config_type=type(config).__name__)
            raise StrapiValidationError(
                "The provided configuration is not a valid object.",
                cause=TypeError(
                    f"expected StrapiConfig, got {type(config).__name__}"
                ),
            )

        self._validate_base_url(config.base_url)

        try:
            validate_timeout(config.timeout)
        except (TypeError, ValueError) as exc:
            raise StrapiValidationError(str(exc), cause=exc) from exc

        logger.debug("client_config_validated")

    def _validate_base_url(self, url: object) -> None:
        try:
            self._url_validator.validate(url)
        except URLValidationError as exc:
            logger.debug("invalid_base_url", url=url)
            raise StrapiValidationError(str(exc), cause=exc) from exc


def validate_resource_name(resource: object) -> str:
    """Ensure a content-type resource name is kebab-case."""
    if not isinstance(resource, str) or not _RESOURCE_NAME.match(resource):
        raise StrapiValidationError(
            f'Resource name must be a kebab-case string, got "{resource}"'
        )
    return resource


def parse_document_response(response: requests.Response) -> dict[str, Any]:
    """Decode a content API document response.

    Raises:
        StrapiValidationError: the body is not JSON or lacks ``data``/``meta``.
    """
    try:
        payload = response.json()
    except ValueError as exc:
        raise StrapiValidationError(
            "Response body is not valid JSON", cause=exc
        ) from exc

    if not isinstance(payload, dict) or "data" not in payload or "meta" not in payload:
        raise StrapiValidationError("Invalid response structure", cause=payload)

    return payload
