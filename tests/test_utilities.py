from urllib.parse import unquote

import pytest
import requests

from strapi_client.utilities import (
    append_query_params,
    encode_query_params,
    format_request,
    to_readable_path,
)


def test_append_query_params_without_params_returns_url():
    assert append_query_params("/articles") == "/articles"
    assert append_query_params("/articles", {}) == "/articles"
    assert append_query_params("/articles", {"locale": None}) == "/articles"


def test_scalar_params():
    assert append_query_params("/articles", {"locale": "en", "status": "draft"}) == (
        "/articles?locale=en&status=draft"
    )


def test_sequence_params_are_indexed():
    assert encode_query_params({"fields": ["title", "slug"]}) == (
        "fields%5B0%5D=title&fields%5B1%5D=slug"
    )


def test_sequence_params_drop_none_items():
    assert encode_query_params({"sort": ["title", None, "date:desc"]}) == (
        "sort%5B0%5D=title&sort%5B1%5D=date%3Adesc"
    )


def test_nested_mapping_params_are_bracketed():
    query = {"filters": {"title": {"$eq": "Hello"}}}

    assert encode_query_params(query) == "filters%5Btitle%5D%5B%24eq%5D=Hello"


def test_pagination_booleans_render_lowercase():
    query = {"pagination": {"page": 2, "pageSize": 10, "withCount": True}}

    assert encode_query_params(query) == (
        "pagination%5Bpage%5D=2&pagination%5BpageSize%5D=10"
        "&pagination%5BwithCount%5D=true"
    )


def test_nested_sequences_inside_mappings():
    query = {"populate": {"author": {"fields": ["name"]}}}

    assert encode_query_params(query) == "populate%5Bauthor%5D%5Bfields%5D%5B0%5D=name"


def test_mappings_inside_sequences_are_bracketed():
    query = {"filters": {"$or": [{"title": {"$eq": "a"}}, {"views": {"$gt": 10}}]}}

    assert unquote(encode_query_params(query)) == (
        "filters[$or][0][title][$eq]=a&filters[$or][1][views][$gt]=10"
    )


def test_sequences_inside_sequences_are_bracketed():
    assert unquote(encode_query_params({"sort": [["title", None], "date"]})) == (
        "sort[0][0]=title&sort[1]=date"
    )


def test_to_readable_path_drops_query_and_fragment():
    assert to_readable_path("https://example.com/api/items?filter=active#top") == (
        "https://example.com/api/items"
    )


def test_format_request():
    request = requests.Request(
        method="POST", url="https://example.com/api/items?filter=active"
    )

    assert format_request(request) == "POST - https://example.com/api/items"


def test_format_request_rejects_other_values():
    with pytest.raises(TypeError):
        format_request("GET https://example.com")  # type: ignore[arg-type]
