"""FeedClient - Main API for extrafeed.

Provides `open_spreadsheet`, `rows`, and `cells`: fetch a feed through a
Transport and normalize it into domain entities.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any

from extrafeed.exceptions import InvalidArgumentError
from extrafeed.models import Cells, Row, Spreadsheet
from extrafeed.normalizer import to_cells, to_rows, to_spreadsheet
from extrafeed.query import CellQuery, RowQuery
from extrafeed.transport import FeedTransport, GoogleFeedTransport

logger = logging.getLogger(__name__)

__all__ = [
    "FeedClient",
    "fetch_cells",
    "fetch_rows",
    "open_spreadsheet",
]


class FeedClient:
    """Client for reading spreadsheets through the feed API.

    Argument checks run as soon as a method is called, before a coroutine is
    created, so a missing key or worksheet fails without any request being
    made. Everything else is reported when the returned awaitable is awaited.

    Example:
        >>> transport = GoogleFeedTransport()
        >>> client = FeedClient(transport)
        >>> spreadsheet = await client.open_spreadsheet("0AhyS7L3...")
        >>> rows = await spreadsheet.worksheets[0].rows(num=20)
    """

    def __init__(self, transport: FeedTransport) -> None:
        """Initialize the client.

        Args:
            transport: Transport implementation for fetching feeds
        """
        self._transport = transport

    def open_spreadsheet(
        self, key: str, auth: str | None = None
    ) -> Awaitable[Spreadsheet]:
        """Fetch spreadsheet metadata and its worksheets.

        Args:
            key: Spreadsheet key
            auth: Optional GoogleLogin auth token; switches to the private feed

        Raises:
            InvalidArgumentError: If key is missing
        """
        _require(key, "Spreadsheet key not provided.")
        return self._open_spreadsheet(key, auth)

    def rows(
        self,
        key: str,
        worksheet: str,
        auth: str | None = None,
        query: RowQuery | None = None,
        **options: Any,
    ) -> Awaitable[list[Row]]:
        """Fetch the rows of a worksheet.

        Args:
            key: Spreadsheet key
            worksheet: Worksheet id
            auth: Optional GoogleLogin auth token
            query: Row options; alternatively pass RowQuery fields as keywords

        Raises:
            InvalidArgumentError: If key or worksheet is missing
        """
        _require(key, "Spreadsheet key not provided.")
        _require(worksheet, "Worksheet not specified.")
        params = _resolve(query, RowQuery, options).to_params()
        return self._rows(key, worksheet, auth, params)

    def cells(
        self,
        key: str,
        worksheet: str,
        auth: str | None = None,
        query: CellQuery | None = None,
        **options: Any,
    ) -> Awaitable[Cells]:
        """Fetch the cells of a worksheet.

        Args:
            key: Spreadsheet key
            worksheet: Worksheet id
            auth: Optional GoogleLogin auth token
            query: Cell options; alternatively pass CellQuery fields as keywords

        Raises:
            InvalidArgumentError: If key or worksheet is missing
        """
        _require(key, "Spreadsheet key not provided.")
        _require(worksheet, "Worksheet not specified.")
        params = _resolve(query, CellQuery, options).to_params()
        return self._cells(key, worksheet, auth, params)

    async def _open_spreadsheet(self, key: str, auth: str | None) -> Spreadsheet:
        tree = await self._transport.get_feed(["worksheets", key], auth)
        return to_spreadsheet(key, auth, tree, client=self)

    async def _rows(
        self, key: str, worksheet: str, auth: str | None, params: dict[str, str]
    ) -> list[Row]:
        tree = await self._transport.get_feed(["list", key, worksheet], auth, params)
        return to_rows(tree)

    async def _cells(
        self, key: str, worksheet: str, auth: str | None, params: dict[str, str]
    ) -> Cells:
        tree = await self._transport.get_feed(["cells", key, worksheet], auth, params)
        return to_cells(tree)

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()


def _require(value: str | None, message: str) -> None:
    if not value:
        raise InvalidArgumentError(message)


def _resolve(query: Any, query_type: type[Any], options: dict[str, Any]) -> Any:
    """Return the query record, building it from keyword options if needed."""
    if query is not None and options:
        raise InvalidArgumentError("Pass either a query or keyword options, not both.")
    if query is not None:
        return query
    try:
        return query_type(**options)
    except TypeError as e:
        raise InvalidArgumentError(f"Invalid {query_type.__name__} option: {e}") from e


# --- Module-level shortcuts using the production transport ---


def _default_client() -> FeedClient:
    return FeedClient(GoogleFeedTransport())


def open_spreadsheet(key: str, auth: str | None = None) -> Awaitable[Spreadsheet]:
    """Fetch a spreadsheet through the public feed API.

    Example:
        >>> spreadsheet = await open_spreadsheet("0AhyS7L3...")
        >>> print(spreadsheet.title, [ws.title for ws in spreadsheet.worksheets])
    """
    return _default_client().open_spreadsheet(key, auth)


def fetch_rows(
    key: str, worksheet: str, auth: str | None = None, **options: Any
) -> Awaitable[list[Row]]:
    """Fetch the rows of a worksheet through the public feed API."""
    return _default_client().rows(key, worksheet, auth, **options)


def fetch_cells(
    key: str, worksheet: str, auth: str | None = None, **options: Any
) -> Awaitable[Cells]:
    """Fetch the cells of a worksheet through the public feed API."""
    return _default_client().cells(key, worksheet, auth, **options)
