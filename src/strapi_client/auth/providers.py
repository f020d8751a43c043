"""Authentication providers.

A provider is anything exposing ``name``, ``headers`` and
``authenticate(http_client)``. Options are validated when the provider is
constructed, never on first use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, TypedDict, runtime_checkable

import structlog

from ..errors import StrapiError, StrapiValidationError
from ..networking.constants import is_success_status

if TYPE_CHECKING:
    from ..networking.client import HttpClient

logger = structlog.get_logger()

API_TOKEN_AUTH_STRATEGY = "api-token"
USERS_PERMISSIONS_AUTH_STRATEGY = "users-permissions"
LOCAL_AUTH_ENDPOINT = "/auth/local"


@runtime_checkable
class AuthProvider(Protocol):
    @property
    def name(self) -> str:
        """Identifier of the strategy this provider implements."""
        ...

    @property
    def headers(self) -> Mapping[str, str]:
        """Headers to attach to authenticated requests."""
        ...

    def authenticate(self, http_client: HttpClient) -> None:
        """Establish whatever state the provider needs to produce headers."""
        ...


class ApiTokenAuthProviderOptions(TypedDict):
    token: str


class UsersPermissionsAuthProviderOptions(TypedDict):
    identifier: str
    password: str


def _require_mapping(options: object, strategy: str) -> Mapping[str, Any]:
    if not isinstance(options, Mapping):
        logger.debug(
            "auth_options_invalid",
            strategy=strategy,
            options_type=type(options).__name__,
        )
        raise StrapiValidationError(
            f"Missing valid options for initializing the {strategy} auth provider."
        )
    return options


def _obfuscate(token: str) -> str:
    return f"{token[:5]}...{token[-5:]}"


class ApiTokenAuthProvider:
    """Static bearer token; no handshake needed."""

    identifier = API_TOKEN_AUTH_STRATEGY

    def __init__(self, options: ApiTokenAuthProviderOptions | Mapping[str, Any]) -> None:
        self._options = _require_mapping(options, self.identifier)
        self._preflight_validation()

    @property
    def name(self) -> str:
        return self.identifier

    @property
    def _token(self) -> Any:
        return self._options.get("token")

    def _preflight_validation(self) -> None:
        token = self._token
        if not isinstance(token, str) or not token.strip():
            logger.debug("api_token_invalid", token_type=type(token).__name__)
            raise StrapiValidationError(
                "A valid API token is required when using the api-token auth strategy."
            )

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    def authenticate(self, http_client: HttpClient) -> None:
        logger.debug("auth_handshake_skipped", strategy=self.name)


class UsersPermissionsAuthProvider:
    """Exchange an identifier and password for a session token.

    The exchange posts to ``/auth/local``. ``headers`` stays empty until a
    token has been obtained.
    """

    identifier = USERS_PERMISSIONS_AUTH_STRATEGY

    def __init__(
        self, options: UsersPermissionsAuthProviderOptions | Mapping[str, Any]
    ) -> None:
        self._options = _require_mapping(options, self.identifier)
        self._token: str | None = None
        self._preflight_validation()

    @property
    def name(self) -> str:
        return self.identifier

    def _preflight_validation(self) -> None:
        for option in ("identifier", "password"):
            value = self._options.get(option)
            if not isinstance(value, str):
                logger.debug(
                    "auth_option_invalid",
                    strategy=self.name,
                    option=option,
                    option_type=type(value).__name__,
                )
                raise StrapiValidationError(
                    f'The "{option}" option must be a string, '
                    f'but got "{type(value).__name__}"'
                )

    @property
    def headers(self) -> dict[str, str]:
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def authenticate(self, http_client: HttpClient) -> None:
        """Post the credentials and store the returned session token.

        ``http_client`` must not carry the auth interceptors, otherwise the
        exchange would trigger another pre-flight authentication.

        Raises:
            StrapiError: non-2xx response.
            StrapiValidationError: the body has no string ``jwt``.
        """
        identifier = self._options["identifier"]

        logger.debug(
            "auth_handshake_started",
            strategy=self.name,
            identifier=identifier,
            endpoint=LOCAL_AUTH_ENDPOINT,
        )

        response = http_client.post(
            LOCAL_AUTH_ENDPOINT,
            json={"identifier": identifier, "password": self._options["password"]},
            headers={"Content-Type": "application/json"},
        )

        if not is_success_status(response.status_code):
            raise StrapiError(
                f"Authentication failed: {response.status_code} {response.reason or ''}".strip()
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise StrapiValidationError(
                "Authentication response is not valid JSON", cause=exc
            ) from exc

        token = payload.get("jwt") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise StrapiValidationError(
                "Authentication response does not contain a token", cause=payload
            )

        self._token = token

        logger.debug(
            "auth_handshake_succeeded",
            strategy=self.name,
            identifier=identifier,
            token=_obfuscate(token),
        )
