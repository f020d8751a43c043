# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
from unittest.mock import Mock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from strapi_client.auth.factory import AuthProviderFactory
from strapi_client.auth.manager import AuthManager
from strapi_client.errors import StrapiError, StrapiValidationError


class FakeProvider:
    def __init__(self, options):
        self.options = options
        self.fail = False
        self.calls = 0

    @property
    def name(self):
        return "fake"

    @property
    def headers(self):
        return {"Authorization": "Bearer fake", "X-Fake": "1"}

    def authenticate(self, http_client):
        self.calls += 1
        if self.fail:
            raise RuntimeError("handshake failed")


@pytest.fixture
def manager():
    factory = AuthProviderFactory().register("fake", FakeProvider)
    return AuthManager(factory)


def _request(headers=None):
    return requests.Request(
        method="GET",
        url="http://localhost:1337/api/articles",
        headers=CaseInsensitiveDict(headers or {}),
    )


def test_initial_state():
    manager = AuthManager()

    assert manager.strategy is None
    assert manager.is_authenticated is False


def test_default_providers_are_registered():
    factory = AuthProviderFactory()
    AuthManager(factory)

    assert factory.strategies == ["api-token", "users-permissions"]


def test_set_strategy_selects_provider(manager):
    manager.set_strategy("fake", {})

    assert manager.strategy == "fake"


def test_set_strategy_with_builtin_provider():
    manager = AuthManager()

    manager.set_strategy("api-token", {"token": "abc"})

    assert manager.strategy == "api-token"


def test_set_strategy_resets_authentication(manager):
    manager.set_strategy("api-token", {"token": "abc"})
    manager.authenticate(Mock())
    assert manager.is_authenticated is True

    manager.set_strategy("fake", {})

    assert manager.strategy == "fake"
    assert manager.is_authenticated is False


def test_failed_set_strategy_keeps_current_provider(manager):
    manager.set_strategy("fake", {})
    manager.authenticate(Mock())

    with pytest.raises(StrapiValidationError):
        manager.set_strategy("api-token", {"token": ""})

    assert manager.strategy == "fake"
    assert manager.is_authenticated is True


def test_set_strategy_raises_for_unknown_strategy(manager):
    with pytest.raises(StrapiError, match="unknown"):
        manager.set_strategy("unknown", {})


def test_set_strategy_raises_for_invalid_options():
    with pytest.raises(StrapiValidationError):
        AuthManager().set_strategy("api-token", {"token": ""})


def test_authenticate_without_provider_stays_unauthenticated(manager):
    manager.authenticate(Mock())

    assert manager.is_authenticated is False


def test_authenticate_success(manager):
    manager.set_strategy("fake", {})
    http_client = Mock()

    manager.authenticate(http_client)

    assert manager.is_authenticated is True


def test_authenticate_swallows_provider_errors(manager):
    manager.set_strategy("fake", {})
    manager.authenticate(Mock())
    manager._auth_provider.fail = True

    manager.authenticate(Mock())

    assert manager.is_authenticated is False


def test_handle_unauthorized_error_resets_state(manager):
    manager.set_strategy("fake", {})
    manager.authenticate(Mock())
    assert manager.is_authenticated is True

    manager.handle_unauthorized_error()

    assert manager.is_authenticated is False

    manager.handle_unauthorized_error()

    assert manager.is_authenticated is False


def test_authenticate_request_without_provider_leaves_headers(manager):
    request = _request({"Authorization": "Basic x"})

    manager.authenticate_request(request)

    assert dict(request.headers) == {"Authorization": "Basic x"}


def test_authenticate_request_overwrites_same_name_headers(manager):
    manager.set_strategy("fake", {})
    request = _request({"authorization": "Basic x", "Accept": "application/json"})

    manager.authenticate_request(request)

    assert request.headers["Authorization"] == "Bearer fake"
    assert request.headers["X-Fake"] == "1"
    assert request.headers["Accept"] == "application/json"


def test_authenticate_request_is_idempotent(manager):
    manager.set_strategy("fake", {})
    request = _request()

    manager.authenticate_request(request)
    manager.authenticate_request(request)

    assert request.headers["Authorization"] == "Bearer fake"
    assert len(request.headers) == 2


def test_authenticate_request_injects_headers_while_unauthenticated():
    manager = AuthManager()
    manager.set_strategy("api-token", {"token": "abc"})
    request = _request()

    manager.authenticate_request(request)

    assert manager.is_authenticated is False
    assert request.headers["Authorization"] == "Bearer abc"
