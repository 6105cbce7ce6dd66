"""
Utility functions for extrafeed.

The feed collapses single-child elements to a bare value, so anything that
can repeat has to go through force_list before it is iterated.
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


def force_list(value: T | list[T] | tuple[T, ...] | None) -> list[T]:
    """Return value as a list.

    Examples:
        [a, b] -> [a, b] (same object), {"x": 1} -> [{"x": 1}], None -> []
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]


def text_of(value: Any) -> str | None:
    """Return the text of a leaf node.

    A plain string is its own text; a mapping carries it under "text".
    Anything else (lists, empty mappings, None) has no text.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        text = value.get("text")
        if isinstance(text, str):
            return text
    return None


def last_path_segment(url: str) -> str:
    """Return everything after the last "/" in url.

    Examples:
        https://spreadsheets.google.com/feeds/worksheets/KEY/private/full/od6 -> od6
    """
    return url[url.rfind("/") + 1 :]
