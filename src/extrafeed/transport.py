"""Transport layer for fetching spreadsheet feeds.

Defines the Transport protocol and implementations:
- GoogleFeedTransport: Production transport using the spreadsheets feed API
- LocalFileTransport: Test transport reading feed XML from local golden files
"""

from __future__ import annotations

import logging
import ssl
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

import certifi
import httpx

from extrafeed.config import get_settings
from extrafeed.exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    TransportError,
)
from extrafeed.tree import FeedTree, FeedTreeParser

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

AUTH_SCHEME = "GoogleLogin"


def access_level(auth: str | None) -> tuple[str, str]:
    """Return (visibility, projection) for a request.

    A credential always switches both: private/full with auth,
    public/values without.
    """
    if auth:
        return "private", "full"
    return "public", "values"


def build_feed_url(feed_url: str, path: Sequence[str], auth: str | None) -> str:
    """Build the feed URL for a resource path.

    Example:
        >>> build_feed_url("https://spreadsheets.google.com/feeds/", ["worksheets", "KEY"], None)
        'https://spreadsheets.google.com/feeds/worksheets/KEY/public/values'
    """
    visibility, projection = access_level(auth)
    segments = [*path, visibility, projection]
    return feed_url.rstrip("/") + "/" + "/".join(segments)


def auth_headers(auth: str | None) -> dict[str, str]:
    """Return the Authorization header for a credential, if any."""
    if not auth:
        return {}
    return {"Authorization": f"{AUTH_SCHEME} auth={auth}"}


class FeedTransport(ABC):
    """Abstract base class for feed transport.

    Implementations fetch one feed document and return it parsed into a
    generic tree. Each call makes exactly one request and never retries.
    """

    @abstractmethod
    async def get_feed(
        self,
        path: Sequence[str],
        auth: str | None = None,
        query: dict[str, str] | None = None,
    ) -> FeedTree:
        """Fetch and parse a feed.

        Args:
            path: Resource path segments, e.g. ["list", key, worksheet_id]
            auth: Optional GoogleLogin auth token
            query: Query parameters; omitted from the URL when empty

        Returns:
            The fully parsed feed tree

        Raises:
            AuthenticationError: On a 401 response
            APIError: On any other response with status >= 400
            FeedParseError: If the body is not well-formed XML
            TransportError: On network failure
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleFeedTransport(FeedTransport):
    """Production transport that fetches feeds over HTTPS.

    Without an explicit client, a short-lived httpx.AsyncClient is created
    for every request, so the transport holds no shared connection state and
    concurrent calls are independent. Pass ``client`` to reuse a pool; the
    transport then owns that client and close() closes it.
    """

    def __init__(
        self,
        feed_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            feed_url: Feed root; defaults to the configured feed_url
            timeout: Request timeout in seconds; defaults to the configured timeout
            client: Optional HTTP client to reuse; closed by close()
        """
        settings = get_settings()
        self._feed_url = feed_url or settings.feed_url
        self._timeout = timeout if timeout is not None else settings.timeout
        self._client = client

    def _new_client(self) -> httpx.AsyncClient:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        return httpx.AsyncClient(
            timeout=self._timeout,
            verify=ssl_context,
            follow_redirects=True,
        )

    async def get_feed(
        self,
        path: Sequence[str],
        auth: str | None = None,
        query: dict[str, str] | None = None,
    ) -> FeedTree:
        """Fetch a feed from the spreadsheets API."""
        url = build_feed_url(self._feed_url, path, auth)
        if self._client is not None:
            return await self._request(self._client, url, auth, query)
        async with self._new_client() as client:
            return await self._request(client, url, auth, query)

    async def _request(
        self,
        client: httpx.AsyncClient,
        url: str,
        auth: str | None,
        query: dict[str, str] | None,
    ) -> FeedTree:
        """Make a GET request and stream the body into the tree parser."""
        logger.debug("GET %s params=%s", url, query or {})
        try:
            async with client.stream(
                "GET",
                url,
                params=query or None,
                headers=auth_headers(auth),
            ) as response:
                _check_response(response, url)
                parser = FeedTreeParser()
                async for chunk in response.aiter_bytes():
                    parser.write(chunk)
                return parser.end()
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client passed at construction, if any."""
        if self._client is not None:
            await self._client.aclose()


class LocalFileTransport(FeedTransport):
    """Test transport that reads feed XML from local golden files.

    Expected directory structure mirrors the feed URL:
        golden_dir/
            worksheets/<key>/public/values.xml
            list/<key>/<worksheet_id>/private/full.xml
            cells/<key>/<worksheet_id>/public/values.xml

    Query parameters are recorded but otherwise ignored.
    """

    def __init__(self, golden_dir: Path, chunk_size: int | None = None) -> None:
        """Initialize the transport.

        Args:
            golden_dir: Directory containing golden feed files
            chunk_size: Bytes fed to the parser per write
        """
        self._golden_dir = golden_dir
        self._chunk_size = chunk_size or get_settings().chunk_size
        self.requests: list[tuple[tuple[str, ...], str | None, dict[str, str]]] = []

    async def get_feed(
        self,
        path: Sequence[str],
        auth: str | None = None,
        query: dict[str, str] | None = None,
    ) -> FeedTree:
        """Read a feed from a local file."""
        self.requests.append((tuple(path), auth, dict(query or {})))
        visibility, projection = access_level(auth)
        file_path = self._golden_dir.joinpath(*path, visibility, f"{projection}.xml")
        if not file_path.is_file():
            raise NotFoundError(str(file_path))

        parser = FeedTreeParser()
        with file_path.open("rb") as f:
            while chunk := f.read(self._chunk_size):
                parser.write(chunk)
        return parser.end()

    async def close(self) -> None:
        """No-op for local file transport."""
        pass


def _check_response(response: httpx.Response, url: str) -> None:
    """Raise for error statuses without reading the body."""
    status = response.status_code
    if status == 401:
        logger.warning("Feed rejected authorization key: %s", url)
        raise AuthenticationError()
    if status >= 400:
        reason = httpx.codes.get_reason_phrase(status)
        logger.warning("Feed request failed (%s %s): %s", status, reason, url)
        raise APIError(status, reason)
