"""Normalize parsed feed trees into domain entities.

The feed format is loose: repeatable elements arrive bare when there is only
one of them, leaves are either plain text or a mapping carrying ``text``,
and empty elements arrive as ``{}``. Everything here tolerates those shapes
and nothing else touches raw trees.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from extrafeed.models import Author, Cell, Cells, Row, Spreadsheet, Worksheet
from extrafeed.tree import ITEMS_KEY, TEXT_KEY, FeedNode, FeedTree
from extrafeed.utils import force_list, last_path_segment, text_of

if TYPE_CHECKING:
    from extrafeed.client import FeedClient

logger = logging.getLogger(__name__)

CUSTOM_COLUMN_PREFIX = "gsx:"
CUSTOM_COLUMN_JSON_PREFIX = "gsx$"
CELL_KEY = "gs:cell"


# --- Spreadsheets and worksheets ---


def to_spreadsheet(
    key: str,
    auth: str | None,
    tree: FeedTree,
    client: FeedClient | None = None,
) -> Spreadsheet:
    """Build a Spreadsheet from a worksheets feed."""
    # Several authors can be listed; the first one owns the spreadsheet
    authors = [a for a in force_list(tree.get("author")) if isinstance(a, dict)]
    author_node = authors[0] if authors else {}

    worksheets = tuple(
        to_worksheet(entry, key, auth, client)
        for entry in _entries(tree)
    )
    logger.debug("Spreadsheet %s has %d worksheets", key, len(worksheets))

    return Spreadsheet(
        key=key,
        auth=auth,
        title=text_of(tree.get("title")),
        updated=text_of(tree.get("updated")),
        author=Author(
            name=text_of(author_node.get("name")),
            email=text_of(author_node.get("email")),
        ),
        worksheets=worksheets,
    )


def to_worksheet(
    entry: FeedTree,
    key: str,
    auth: str | None = None,
    client: FeedClient | None = None,
) -> Worksheet:
    """Build a Worksheet from one entry of the worksheets feed.

    The feed identifies a worksheet by its full URL; only the trailing path
    segment is kept.
    """
    return Worksheet(
        id=last_path_segment(text_of(entry.get("id")) or ""),
        title=text_of(entry.get("title")),
        row_count=_count(entry.get("gs:rowcount")),
        col_count=_count(entry.get("gs:colcount")),
        spreadsheet_key=key,
        auth=auth,
        client=client,
    )


def _count(node: FeedNode | None) -> int | str | None:
    text = text_of(node)
    if text is None:
        return None
    return int(text) if text.isdecimal() and text.isascii() else text


# --- Rows ---


RowField = tuple[str, "str | None"]


@dataclass(frozen=True)
class RowRule:
    """One step of row normalization.

    ``apply`` returns the (key, value) pair to store, or None to drop the
    field.
    """

    name: str
    matches: Callable[[str], bool]
    apply: Callable[[str, FeedNode], RowField | None]


def _column_value(value: FeedNode) -> str | None:
    """Unwrap a custom column value; empty elements are null."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and value:
        return text_of(value)
    return None


def _custom_column(prefix: str) -> Callable[[str, FeedNode], RowField]:
    def apply(key: str, value: FeedNode) -> RowField:
        column = key[len(prefix) :]
        if not column:
            # A header cell with no usable name leaves just the namespace
            column = prefix[:-1]
        return column, _column_value(value)

    return apply


def _identity(key: str, value: FeedNode) -> RowField:
    return key, value if isinstance(value, str) else text_of(value)


def _text_leaf(key: str, value: FeedNode) -> RowField | None:
    if isinstance(value, dict):
        text = value.get(TEXT_KEY)
        if isinstance(text, str) and text:
            return key, text
    return None


# Applied in order; the first rule whose predicate matches the key wins.
ROW_RULES: tuple[RowRule, ...] = (
    RowRule(
        "custom-column",
        lambda key: key.startswith(CUSTOM_COLUMN_PREFIX),
        _custom_column(CUSTOM_COLUMN_PREFIX),
    ),
    RowRule(
        "custom-column-json",
        lambda key: key.startswith(CUSTOM_COLUMN_JSON_PREFIX),
        _custom_column(CUSTOM_COLUMN_JSON_PREFIX),
    ),
    RowRule("identity", lambda key: key == "id", _identity),
    # Entry metadata such as link and category has no text and is dropped
    RowRule("text-leaf", lambda key: True, _text_leaf),
)


def to_row(entry: FeedTree) -> Row:
    """Build a Row from one entry of the list feed."""
    row = Row()
    for key, value in entry.items():
        for rule in ROW_RULES:
            if not rule.matches(key):
                continue
            result = rule.apply(key, value)
            if result is not None:
                row[result[0]] = result[1]
            break
    return row


def to_rows(tree: FeedTree) -> list[Row]:
    """Build all Rows of a list feed; a feed without entries has none."""
    rows = [to_row(entry) for entry in _entries(tree)]
    logger.debug("Normalized %d rows", len(rows))
    return rows


# --- Cells ---


def to_cells(tree: FeedTree) -> Cells:
    """Build the sparse cell grid of a cells feed.

    A feed without entries is an empty range, not an error.
    """
    grid: dict[str, dict[str, Cell]] = {}
    for entry in _entries(tree):
        cell = entry.get(CELL_KEY)
        if not isinstance(cell, dict):
            continue
        row = text_of(cell.get("row")) or ""
        col = text_of(cell.get("col")) or ""
        grid.setdefault(row, {})[col] = Cell(
            row=row,
            col=col,
            value=text_of(cell) or "",
            input_value=text_of(cell.get("inputvalue")),
            numeric_value=text_of(cell.get("numericvalue")),
        )
    logger.debug("Normalized %d cells in %d rows", sum(map(len, grid.values())), len(grid))
    return Cells(cells=grid)


def _entries(tree: FeedTree) -> list[FeedTree]:
    """Return the feed's entries, however many there are."""
    return [
        entry for entry in force_list(tree.get(ITEMS_KEY)) if isinstance(entry, dict)
    ]
