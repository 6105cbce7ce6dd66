"""extrafeed - Async reader for Google Spreadsheets XML feeds.

Fetches spreadsheet, worksheet, row, and cell feeds and normalizes the loose
Atom trees they produce into small immutable entities.
"""

__version__ = "0.1.0"

from extrafeed.client import (
    FeedClient,
    fetch_cells,
    fetch_rows,
    open_spreadsheet,
)
from extrafeed.exceptions import (
    APIError,
    AuthenticationError,
    FeedError,
    FeedParseError,
    InvalidArgumentError,
    NotFoundError,
    TransportError,
)
from extrafeed.models import Author, Cell, Cells, Row, Spreadsheet, Worksheet
from extrafeed.query import CellQuery, RowQuery
from extrafeed.transport import (
    FeedTransport,
    GoogleFeedTransport,
    LocalFileTransport,
)
from extrafeed.tree import FeedTreeParser

__all__ = [
    "APIError",
    "AuthenticationError",
    "Author",
    "Cell",
    "CellQuery",
    "Cells",
    "FeedClient",
    "FeedError",
    "FeedParseError",
    "FeedTransport",
    "FeedTreeParser",
    "GoogleFeedTransport",
    "InvalidArgumentError",
    "LocalFileTransport",
    "NotFoundError",
    "Row",
    "RowQuery",
    "Spreadsheet",
    "TransportError",
    "Worksheet",
    "__version__",
    "fetch_cells",
    "fetch_rows",
    "open_spreadsheet",
]
