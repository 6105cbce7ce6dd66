"""Domain entities built from spreadsheet feeds.

Entities are immutable once built. A Worksheet does not point back at its
Spreadsheet; it carries a copy of the spreadsheet key and credential so it
can issue its own row and cell requests.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from extrafeed.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from extrafeed.client import FeedClient
    from extrafeed.query import CellQuery, RowQuery


@dataclass(frozen=True)
class Author:
    """Owner of a spreadsheet."""

    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class Worksheet:
    """A single worksheet (tab) of a spreadsheet."""

    id: str
    title: str | None
    row_count: int | str | None
    col_count: int | str | None
    spreadsheet_key: str
    auth: str | None = field(default=None, repr=False)
    client: FeedClient | None = field(default=None, repr=False, compare=False)

    def rows(
        self, query: RowQuery | None = None, **options: Any
    ) -> Awaitable[list[Row]]:
        """Fetch the rows of this worksheet.

        Example:
            >>> rows = await worksheet.rows(num=10, orderby="column:name")
        """
        return self._require_client().rows(
            self.spreadsheet_key, self.id, auth=self.auth, query=query, **options
        )

    def cells(self, query: CellQuery | None = None, **options: Any) -> Awaitable[Cells]:
        """Fetch the cells of this worksheet.

        Example:
            >>> grid = await worksheet.cells(range="A1:C10")
        """
        return self._require_client().cells(
            self.spreadsheet_key, self.id, auth=self.auth, query=query, **options
        )

    def _require_client(self) -> FeedClient:
        if self.client is None:
            raise InvalidArgumentError(
                f"Worksheet {self.id} is not bound to a client."
            )
        return self.client


@dataclass(frozen=True)
class Spreadsheet:
    """Spreadsheet metadata with its worksheets."""

    key: str
    auth: str | None = field(repr=False)
    title: str | None
    updated: str | None
    author: Author
    worksheets: tuple[Worksheet, ...] = ()

    def worksheet(self, title_or_id: str) -> Worksheet | None:
        """Find a worksheet by id or title (id is checked first)."""
        for worksheet in self.worksheets:
            if worksheet.id == title_or_id:
                return worksheet
        for worksheet in self.worksheets:
            if worksheet.title == title_or_id:
                return worksheet
        return None


class Row(dict[str, "str | None"]):
    """One row of the list feed.

    Keys are column names taken from the worksheet's header row, plus ``id``
    and whichever entry metadata carried text (``title``, ``content``...).
    """

    @property
    def id(self) -> str | None:
        return self.get("id")


@dataclass(frozen=True)
class Cell:
    """A single non-empty cell.

    row and col are 1-based and kept exactly as the feed provides them.
    input_value and numeric_value are only present in the full projection.
    """

    row: str
    col: str
    value: str = ""
    input_value: str | None = None
    numeric_value: str | None = None


@dataclass(frozen=True)
class Cells:
    """Sparse cell grid: row -> col -> Cell."""

    cells: dict[str, dict[str, Cell]] = field(default_factory=dict)

    def get(self, row: int | str, col: int | str) -> Cell | None:
        """Return the cell at (row, col), or None if it is empty."""
        return self.cells.get(str(row), {}).get(str(col))

    def __len__(self) -> int:
        return sum(len(cols) for cols in self.cells.values())
