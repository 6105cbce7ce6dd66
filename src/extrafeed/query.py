"""Query parameter builders for list (row) and cell feeds.

Options that are not set are left out of the query entirely rather than
sent as empty strings.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class _FeedQuery:
    """Base for option records mapped one-to-one onto query parameters."""

    # field name -> feed parameter name
    PARAMETERS: ClassVar[dict[str, str]] = {}

    def to_params(self) -> dict[str, str]:
        """Return the query parameters for the options that are set."""
        params: dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                params[self.PARAMETERS[f.name]] = _render(value)
        return params


@dataclass(frozen=True)
class RowQuery(_FeedQuery):
    """Options for the list (rows) feed.

    Attributes:
        start: 1-based index of the first row to return
        num: Maximum number of rows to return
        orderby: Ordering, e.g. ``column:name``
        reverse: Reverse the ordering
        sq: Structured query, e.g. ``age > 25``; passed through as-is
    """

    PARAMETERS: ClassVar[dict[str, str]] = {
        "start": "start-index",
        "num": "max-results",
        "orderby": "orderby",
        "reverse": "reverse",
        "sq": "sq",
    }

    start: int | None = None
    num: int | None = None
    orderby: str | None = None
    reverse: bool | None = None
    sq: str | None = None


@dataclass(frozen=True)
class CellQuery(_FeedQuery):
    """Options for the cells feed.

    Attributes:
        range: A1-style range, e.g. ``A1:C10``; passed through as-is
        max_row: Last row (1-based) to return
        min_row: First row (1-based) to return
        max_col: Last column (1-based) to return
        min_col: First column (1-based) to return
    """

    PARAMETERS: ClassVar[dict[str, str]] = {
        "range": "range",
        "max_row": "max-row",
        "min_row": "min-row",
        "max_col": "max-col",
        "min_col": "min-col",
    }

    range: str | None = None
    max_row: int | None = None
    min_row: int | None = None
    max_col: int | None = None
    min_col: int | None = None
