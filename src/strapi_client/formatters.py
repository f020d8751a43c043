"""Slash normalization for URL path fragments."""

from __future__ import annotations

import re
from typing import Literal, Union

SlashConfig = Union[bool, Literal["single"]]

_LEADING_SLASHES = re.compile(r"^/+")
_TRAILING_SLASHES = re.compile(r"/+$")


def format_path(
    path: str,
    *,
    leading_slashes: SlashConfig = False,
    trailing_slashes: SlashConfig = False,
) -> str:
    """Normalize the leading and trailing slashes of ``path``.

    Each side accepts ``False`` (strip every slash), ``True`` (leave as is)
    or ``"single"`` (collapse to exactly one slash).
    """
    path = format_trailing_slashes(path, trailing_slashes)
    return format_leading_slashes(path, leading_slashes)


def format_trailing_slashes(path: str, config: SlashConfig = False) -> str:
    if config == "single":
        return ensure_single_trailing_slash(path)
    if not config:
        return remove_trailing_slashes(path)
    return path


def format_leading_slashes(path: str, config: SlashConfig = False) -> str:
    if config == "single":
        return ensure_single_leading_slash(path)
    if not config:
        return remove_leading_slashes(path)
    return path


def remove_trailing_slashes(path: str) -> str:
    return _TRAILING_SLASHES.sub("", path)


def ensure_single_trailing_slash(path: str) -> str:
    return f"{remove_trailing_slashes(path)}/"


def remove_leading_slashes(path: str) -> str:
    return _LEADING_SLASHES.sub("", path)


def ensure_single_leading_slash(path: str) -> str:
    return f"/{remove_leading_slashes(path)}"
