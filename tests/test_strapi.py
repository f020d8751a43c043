# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportUnknownVariableType=false, reportMissingParameterType=false
# pyright: reportUnknownArgumentType=false
import json
from unittest.mock import patch

import pytest
import requests

from strapi_client import (
    AuthConfig,
    CollectionTypeManager,
    HTTPAuthorizationError,
    HTTPNotFoundError,
    SingleTypeManager,
    Strapi,
    StrapiConfig,
    StrapiInitializationError,
    StrapiValidationError,
    strapi,
)
from strapi_client.errors import URLParsingError
from strapi_client.networking.client import HttpClient

BASE_URL = "http://localhost:1337/api"


def _mock_response(*, payload=None, status: int = 200, reason: str = "OK"):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = json.dumps(payload).encode() if payload is not None else b""
    response._content_consumed = True
    response.headers["Content-Type"] = "application/json"
    return response


def _sent_requests(mock_send) -> list[requests.PreparedRequest]:
    return [call.args[0] for call in mock_send.call_args_list]


@patch("requests.Session.send")
def test_api_token_requests_carry_bearer_and_content_type(mock_send):
    mock_send.return_value = _mock_response(payload={"data": [], "meta": {}})
    client = strapi(BASE_URL, auth="abc")

    response = client.fetch("articles")

    assert response.status_code == 200
    sent = _sent_requests(mock_send)
    assert len(sent) == 1
    assert sent[0].url == f"{BASE_URL}/articles"
    assert sent[0].headers["Authorization"] == "Bearer abc"
    assert sent[0].headers["Content-Type"] == "application/json"
    assert mock_send.call_args.kwargs == {"timeout": 10.0, "stream": True}
    assert client.auth_manager.is_authenticated is True


@patch("requests.Session.send")
def test_requests_without_auth_have_no_authorization_header(mock_send):
    mock_send.return_value = _mock_response(payload={"data": [], "meta": {}})
    client = Strapi(StrapiConfig(base_url=BASE_URL))

    client.fetch("/articles")

    assert "Authorization" not in _sent_requests(mock_send)[0].headers
    assert client.auth_manager.strategy is None


@patch("requests.Session.send")
def test_users_permissions_handshake_precedes_request(mock_send):
    mock_send.side_effect = [
        _mock_response(payload={"jwt": "session-token", "user": {"id": 1}}),
        _mock_response(payload={"data": [], "meta": {}}),
    ]
    client = Strapi(
        StrapiConfig(
            base_url=BASE_URL,
            auth=AuthConfig(
                "users-permissions", {"identifier": "jane", "password": "secret"}
            ),
        )
    )

    client.fetch("/articles")

    handshake, request = _sent_requests(mock_send)
    assert handshake.method == "POST"
    assert handshake.url == f"{BASE_URL}/auth/local"
    assert json.loads(handshake.body) == {"identifier": "jane", "password": "secret"}
    assert "Authorization" not in handshake.headers
    assert request.method == "GET"
    assert request.headers["Authorization"] == "Bearer session-token"
    assert client.auth_manager.is_authenticated is True


@patch("requests.Session.send")
def test_handshake_runs_once_while_authenticated(mock_send):
    mock_send.side_effect = [
        _mock_response(payload={"jwt": "session-token"}),
        _mock_response(payload={"data": [], "meta": {}}),
        _mock_response(payload={"data": [], "meta": {}}),
    ]
    client = Strapi(
        StrapiConfig(
            base_url=BASE_URL,
            auth=AuthConfig(
                "users-permissions", {"identifier": "jane", "password": "secret"}
            ),
        )
    )

    client.fetch("/articles")
    client.fetch("/articles")

    assert [r.url for r in _sent_requests(mock_send)] == [
        f"{BASE_URL}/auth/local",
        f"{BASE_URL}/articles",
        f"{BASE_URL}/articles",
    ]


@patch("requests.Session.send")
def test_failed_handshake_sends_request_unauthenticated(mock_send):
    mock_send.side_effect = [
        _mock_response(status=400, reason="Bad Request", payload={"error": {}}),
        _mock_response(payload={"data": [], "meta": {}}),
    ]
    client = Strapi(
        StrapiConfig(
            base_url=BASE_URL,
            auth=AuthConfig(
                "users-permissions", {"identifier": "jane", "password": "wrong"}
            ),
        )
    )

    client.fetch("/articles")

    assert "Authorization" not in _sent_requests(mock_send)[1].headers
    assert client.auth_manager.is_authenticated is False


@patch("requests.Session.send")
def test_unauthorized_response_resets_auth_state(mock_send):
    mock_send.return_value = _mock_response(
        status=401, reason="Unauthorized", payload={"error": {}}
    )
    client = strapi(BASE_URL, auth="abc")

    with pytest.raises(HTTPAuthorizationError) as excinfo:
        client.fetch("/articles")

    assert excinfo.value.status_code == 401
    assert client.auth_manager.is_authenticated is False


@patch("requests.Session.send")
def test_non_success_responses_raise_http_errors(mock_send):
    mock_send.return_value = _mock_response(status=404, reason="Not Found")
    client = strapi(BASE_URL)

    with pytest.raises(HTTPNotFoundError, match="404 Not Found"):
        client.fetch("/missing")


@patch("requests.Session.send")
def test_invalid_base_url_fails_before_any_request(mock_send):
    with pytest.raises(StrapiInitializationError) as excinfo:
        strapi("not a url")

    assert isinstance(excinfo.value.cause, StrapiValidationError)
    assert isinstance(excinfo.value.cause.cause, URLParsingError)
    mock_send.assert_not_called()


def test_unsupported_protocol_fails_initialization():
    with pytest.raises(StrapiInitializationError):
        strapi("ftp://localhost:1337")


def test_unregistered_strategy_fails_initialization():
    with pytest.raises(
        StrapiInitializationError, match="Failed to initialize the client auth manager"
    ):
        Strapi(StrapiConfig(base_url=BASE_URL, auth=AuthConfig("magic-link", {})))


def test_invalid_strategy_options_fail_initialization():
    with pytest.raises(StrapiInitializationError) as excinfo:
        strapi(BASE_URL, auth="  ")

    assert isinstance(excinfo.value.cause, StrapiValidationError)


def test_strapi_factory_applies_extra_config():
    client = strapi(BASE_URL + "/", timeout=2500, headers={"X-Tenant": "acme"})

    assert client.base_url == BASE_URL + "/"
    assert client.http_client.base_url == BASE_URL
    assert client.http_client.timeout == 2500
    assert client.http_client.headers == {"X-Tenant": "acme"}


def test_interceptor_registration_order():
    client = strapi(BASE_URL, auth="abc")

    assert len(client.http_client.interceptors.request) == 3
    assert len(client.http_client.interceptors.response) == 2
    notify = client.http_client.interceptors.response.handlers[1]
    assert notify.fulfilled is not None
    assert notify.rejected is not None


def test_http_client_factory_is_used():
    created = []

    def factory(config):
        created.append(HttpClient(config))
        return created[-1]

    client = Strapi(
        StrapiConfig(base_url=BASE_URL, timeout=1234), http_client_factory=factory
    )

    assert len(created) == 1
    assert client.http_client is created[0]
    assert client.http_client.timeout == 1234
    assert len(client.http_client.interceptors.request) == 3


def test_collection_and_single_managers():
    client = strapi(BASE_URL)

    articles = client.collection("blog-posts")
    homepage = client.single("homepage")

    assert isinstance(articles, CollectionTypeManager)
    assert articles.plural_name == "blog-posts"
    assert isinstance(homepage, SingleTypeManager)
    assert homepage.singular_name == "homepage"


@pytest.mark.parametrize("name", ["Blog Posts", "blog_posts", ""])
def test_resource_names_must_be_kebab_case(name):
    client = strapi(BASE_URL)

    with pytest.raises(StrapiValidationError):
        client.collection(name)
    with pytest.raises(StrapiValidationError):
        client.single(name)


@patch("requests.Session.send")
def test_collection_find_through_pipeline(mock_send):
    mock_send.return_value = _mock_response(
        payload={"data": [{"documentId": "abc"}], "meta": {"pagination": {}}}
    )
    client = strapi(BASE_URL, auth="abc")

    document = client.collection("articles").find({"locale": "en"})

    assert document["data"] == [{"documentId": "abc"}]
    assert _sent_requests(mock_send)[0].url == f"{BASE_URL}/articles?locale=en"
