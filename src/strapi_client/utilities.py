"""Query string encoding and request formatting helpers."""

from __future__ import annotations

from typing import Any, Literal, Mapping, Sequence, TypedDict, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

import requests


class PaginationParams(TypedDict, total=False):
    page: int
    pageSize: int
    withCount: bool
    start: int
    limit: int


class QueryParams(TypedDict, total=False):
    """Query options understood by the content API."""

    populate: Union[str, Sequence[str], Mapping[str, Any]]
    fields: Sequence[str]
    filters: Mapping[str, Any]
    locale: str
    status: Literal["published", "draft"]
    sort: Union[str, Sequence[str]]
    pagination: PaginationParams


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(key: str, value: Any, pairs: list[tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(f"{key}[{sub_key}]", sub_value, pairs)
    elif isinstance(value, (list, tuple)):
        items = [item for item in value if item is not None]
        for index, item in enumerate(items):
            _flatten(f"{key}[{index}]", item, pairs)
    else:
        pairs.append((key, _stringify(value)))


def encode_query_params(query_params: Mapping[str, Any] | None) -> str:
    """Flatten nested params into a bracket-encoded query string.

    ``{"filters": {"title": {"$eq": "a"}}}`` becomes
    ``filters%5Btitle%5D%5B%24eq%5D=a`` and ``{"fields": ["a", "b"]}``
    becomes ``fields%5B0%5D=a&fields%5B1%5D=b``.
    """
    if not query_params:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in query_params.items():
        _flatten(key, value, pairs)
    return urlencode(pairs)


def append_query_params(url: str, query_params: Mapping[str, Any] | None = None) -> str:
    """Append encoded ``query_params`` to ``url``; return ``url`` unchanged if empty."""
    query_string = encode_query_params(query_params)
    return f"{url}?{query_string}" if query_string else url


def to_readable_path(url: str) -> str:
    """Strip the query string and fragment from ``url``."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def format_request(request: requests.Request | requests.PreparedRequest) -> str:
    """Render a request as ``<METHOD> - <url without query>`` for logs."""
    if not isinstance(request, (requests.Request, requests.PreparedRequest)):
        raise TypeError(
            "Invalid input, expected a requests.Request instance "
            f"but found {type(request).__name__}"
        )
    return f"{request.method} - {to_readable_path(request.url or '')}"
