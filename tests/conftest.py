"""Shared test fixtures for extrafeed."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from extrafeed.client import FeedClient
from extrafeed.transport import FeedTransport, LocalFileTransport
from extrafeed.tree import FeedTree

GOLDEN_DIR = Path(__file__).parent / "golden"


class RecordingTransport(FeedTransport):
    """Transport that returns a canned tree and records every request."""

    def __init__(self, tree: FeedTree | None = None) -> None:
        self.tree: FeedTree = tree if tree is not None else {}
        self.calls: list[tuple[tuple[str, ...], str | None, dict[str, str]]] = []

    async def get_feed(
        self,
        path: Sequence[str],
        auth: str | None = None,
        query: dict[str, str] | None = None,
    ) -> FeedTree:
        self.calls.append((tuple(path), auth, dict(query or {})))
        return self.tree

    async def close(self) -> None:
        pass


@pytest.fixture
def golden_dir() -> Path:
    return GOLDEN_DIR


@pytest.fixture
def local_transport(golden_dir: Path) -> LocalFileTransport:
    """Create a transport that reads from golden files.

    A tiny chunk size makes every document arrive in many writes.
    """
    return LocalFileTransport(golden_dir, chunk_size=64)


@pytest.fixture
def client(local_transport: LocalFileTransport) -> FeedClient:
    """Create a FeedClient with local file transport."""
    return FeedClient(local_transport)


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()
