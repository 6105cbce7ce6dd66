"""Tests for the FeedClient facade.

Most tests run against golden feed files through LocalFileTransport; the
argument checks use a recording transport to prove no request is made.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import RecordingTransport
from extrafeed.client import FeedClient, fetch_rows, open_spreadsheet
from extrafeed.exceptions import APIError, AuthenticationError, InvalidArgumentError
from extrafeed.models import Cell, Cells, Row, Spreadsheet
from extrafeed.query import CellQuery, RowQuery
from extrafeed.transport import GoogleFeedTransport, LocalFileTransport


class TestOpenSpreadsheet:
    """Tests for FeedClient.open_spreadsheet()."""

    @pytest.mark.asyncio
    async def test_public_spreadsheet(self, client: FeedClient) -> None:
        spreadsheet = await client.open_spreadsheet("sheetkey")

        assert isinstance(spreadsheet, Spreadsheet)
        assert spreadsheet.key == "sheetkey"
        assert spreadsheet.auth is None
        assert spreadsheet.title == "Team Directory"
        assert spreadsheet.updated == "2013-05-02T09:14:31.517Z"
        assert spreadsheet.author.name == "ada"
        assert spreadsheet.author.email == "ada@example.com"

        assert [ws.id for ws in spreadsheet.worksheets] == ["od6", "od7"]
        staff = spreadsheet.worksheets[0]
        assert staff.title == "Staff"
        assert staff.row_count == 100
        assert staff.col_count == 20

    @pytest.mark.asyncio
    async def test_private_spreadsheet(
        self, client: FeedClient, local_transport: LocalFileTransport
    ) -> None:
        spreadsheet = await client.open_spreadsheet("sheetkey", auth="token")

        assert spreadsheet.title == "Team Directory (private)"
        assert spreadsheet.auth == "token"
        assert [ws.id for ws in spreadsheet.worksheets] == ["od6"]
        assert local_transport.requests == [(("worksheets", "sheetkey"), "token", {})]

    @pytest.mark.asyncio
    async def test_single_worksheet(self, client: FeedClient) -> None:
        spreadsheet = await client.open_spreadsheet("singlekey")
        assert len(spreadsheet.worksheets) == 1
        assert spreadsheet.worksheets[0].row_count == 1000

    def test_missing_key_fails_before_request(
        self, recording_transport: RecordingTransport
    ) -> None:
        client = FeedClient(recording_transport)
        with pytest.raises(InvalidArgumentError, match="Spreadsheet key"):
            client.open_spreadsheet("")
        assert recording_transport.calls == []


class TestRows:
    """Tests for FeedClient.rows()."""

    @pytest.mark.asyncio
    async def test_rows(self, client: FeedClient) -> None:
        rows = await client.rows("sheetkey", "od6")

        assert len(rows) == 2
        assert all(isinstance(row, Row) for row in rows)
        alice, bob = rows
        assert alice == {
            "id": "https://spreadsheets.google.com/feeds/list/sheetkey/od6/public/values/cokwr",
            "title": "Alice",
            "content": "role: Engineer, notes: Team lead",
            "name": "Alice",
            "role": "Engineer",
            "notes": "Team lead",
        }
        assert bob["notes"] is None
        assert "link" not in bob
        assert "updated" not in bob

    @pytest.mark.asyncio
    async def test_empty_worksheet(self, client: FeedClient) -> None:
        assert await client.rows("sheetkey", "od7") == []

    @pytest.mark.asyncio
    async def test_query_options(
        self, client: FeedClient, local_transport: LocalFileTransport
    ) -> None:
        await client.rows("sheetkey", "od6", query=RowQuery(num=1, sq="name = Alice"))
        await client.rows("sheetkey", "od6", start=2, orderby="column:name")

        assert [params for _, _, params in local_transport.requests] == [
            {"max-results": "1", "sq": "name = Alice"},
            {"start-index": "2", "orderby": "column:name"},
        ]

    def test_missing_worksheet_fails_before_request(
        self, recording_transport: RecordingTransport
    ) -> None:
        client = FeedClient(recording_transport)
        with pytest.raises(InvalidArgumentError, match="Worksheet not specified"):
            client.rows("sheetkey", "")
        assert recording_transport.calls == []

    def test_missing_key_fails_before_request(
        self, recording_transport: RecordingTransport
    ) -> None:
        client = FeedClient(recording_transport)
        with pytest.raises(InvalidArgumentError):
            client.rows("", "od6")
        assert recording_transport.calls == []

    def test_unknown_option(self, recording_transport: RecordingTransport) -> None:
        client = FeedClient(recording_transport)
        with pytest.raises(InvalidArgumentError, match="RowQuery"):
            client.rows("sheetkey", "od6", limit=5)
        assert recording_transport.calls == []

    def test_query_and_options_together(
        self, recording_transport: RecordingTransport
    ) -> None:
        client = FeedClient(recording_transport)
        with pytest.raises(InvalidArgumentError):
            client.rows("sheetkey", "od6", query=RowQuery(num=1), start=2)


class TestCells:
    """Tests for FeedClient.cells()."""

    @pytest.mark.asyncio
    async def test_cells(self, client: FeedClient) -> None:
        cells = await client.cells("sheetkey", "od6")

        assert isinstance(cells, Cells)
        assert cells.get(1, 1) == Cell(row="1", col="1", value="Name")
        assert cells.get(1, 2) == Cell(row="1", col="2", value="Role")
        assert cells.get(2, 1) == Cell(row="2", col="1", value="Alice")
        assert cells.get(3, 2) == Cell(
            row="3", col="2", value="42", numeric_value="42.0"
        )
        assert cells.get(2, 2) is None
        assert len(cells) == 4

    @pytest.mark.asyncio
    async def test_empty_range(self, client: FeedClient) -> None:
        cells = await client.cells("sheetkey", "od7")
        assert cells == Cells(cells={})

    @pytest.mark.asyncio
    async def test_query_options(
        self, client: FeedClient, local_transport: LocalFileTransport
    ) -> None:
        await client.cells("sheetkey", "od6", query=CellQuery(range="A1:B2"))
        await client.cells("sheetkey", "od6", min_row=2, max_col=3)

        assert [params for _, _, params in local_transport.requests] == [
            {"range": "A1:B2"},
            {"min-row": "2", "max-col": "3"},
        ]

    def test_missing_worksheet_fails_before_request(
        self, recording_transport: RecordingTransport
    ) -> None:
        client = FeedClient(recording_transport)
        with pytest.raises(InvalidArgumentError):
            client.cells("sheetkey", None)  # type: ignore[arg-type]
        assert recording_transport.calls == []


class TestWorksheetBindings:
    """Tests for Worksheet.rows() and Worksheet.cells()."""

    @pytest.mark.asyncio
    async def test_rows_use_owning_spreadsheet(
        self, client: FeedClient, local_transport: LocalFileTransport
    ) -> None:
        spreadsheet = await client.open_spreadsheet("sheetkey")
        staff = spreadsheet.worksheet("Staff")
        assert staff is not None

        rows = await staff.rows(num=5)

        assert [row["name"] for row in rows] == ["Alice", "Bob"]
        assert local_transport.requests[-1] == (
            ("list", "sheetkey", "od6"),
            None,
            {"max-results": "5"},
        )

    @pytest.mark.asyncio
    async def test_cells_use_owning_spreadsheet(
        self, client: FeedClient, local_transport: LocalFileTransport
    ) -> None:
        spreadsheet = await client.open_spreadsheet("sheetkey")

        cells = await spreadsheet.worksheets[1].cells()

        assert len(cells) == 0
        assert local_transport.requests[-1] == (("cells", "sheetkey", "od7"), None, {})

    @pytest.mark.asyncio
    async def test_auth_carried_to_worksheet_requests(self) -> None:
        transport = RecordingTransport(
            {
                "title": "Private",
                "items": {"id": "https://x/worksheets/KEY/private/full/od6"},
            }
        )
        client = FeedClient(transport)
        spreadsheet = await client.open_spreadsheet("KEY", auth="token")

        await spreadsheet.worksheets[0].rows()
        await spreadsheet.worksheets[0].cells(range="A1")

        assert transport.calls[1:] == [
            (("list", "KEY", "od6"), "token", {}),
            (("cells", "KEY", "od6"), "token", {"range": "A1"}),
        ]

    @pytest.mark.asyncio
    async def test_parallel_fetches(self, client: FeedClient) -> None:
        spreadsheet = await client.open_spreadsheet("sheetkey")

        results = await asyncio.gather(*(ws.rows() for ws in spreadsheet.worksheets))

        assert [len(rows) for rows in results] == [2, 0]


class TestHttpFacade:
    """End-to-end tests with simulated HTTP responses."""

    @staticmethod
    def _client(status: int, content: bytes = b"") -> FeedClient:
        mock = httpx.MockTransport(lambda request: httpx.Response(status, content=content))
        transport = GoogleFeedTransport(client=httpx.AsyncClient(transport=mock))
        return FeedClient(transport)

    @pytest.mark.asyncio
    async def test_200_yields_spreadsheet(self) -> None:
        body = (
            b"<feed xmlns='http://www.w3.org/2005/Atom'>"
            b"<title type='text'>Budget</title>"
            b"<author><name>ada</name><email>ada@example.com</email></author>"
            b"</feed>"
        )
        client = self._client(200, body)
        spreadsheet = await client.open_spreadsheet("KEY")
        await client.close()

        assert spreadsheet.title == "Budget"
        assert spreadsheet.worksheets == ()

    @pytest.mark.asyncio
    async def test_401_yields_authentication_error(self) -> None:
        client = self._client(401)
        with pytest.raises(AuthenticationError):
            await client.rows("KEY", "od6", auth="bad")
        await client.close()

    @pytest.mark.asyncio
    async def test_500_yields_api_error(self) -> None:
        client = self._client(500)
        with pytest.raises(APIError) as exc_info:
            await client.cells("KEY", "od6")
        await client.close()
        assert exc_info.value.status_code == 500


class TestModuleShortcuts:
    """Tests for the module-level helpers."""

    def test_open_spreadsheet_requires_key(self) -> None:
        with pytest.raises(InvalidArgumentError):
            open_spreadsheet("")

    def test_fetch_rows_requires_worksheet(self) -> None:
        with pytest.raises(InvalidArgumentError):
            fetch_rows("KEY", "")
