"""Streaming XML-to-tree parser for spreadsheet feeds.

Turns an Atom feed into a generic nested tree of mappings, lists, and text
leaves. The tree mirrors the XML loosely, the way the feed protocol is
usually consumed:

- names keep their namespace prefix and are lower-cased (``gs:rowcount``,
  ``gsx:name``); the default (Atom) namespace has no prefix
- an element with neither attributes nor children is its text, kept
  verbatim, or ``{}`` when it is empty
- any other element is a mapping of attributes and children, with its
  text under ``text`` (stripped when the element also has children)
- repeated siblings become a list; a single element stays bare
- ``entry`` elements of the feed are collected under ``items``
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import TypeAlias

from extrafeed.exceptions import FeedParseError

FeedNode: TypeAlias = "str | dict[str, FeedNode] | list[FeedNode]"
FeedTree: TypeAlias = "dict[str, FeedNode]"

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

ENTRY_TAG = "entry"
ITEMS_KEY = "items"
TEXT_KEY = "text"


class FeedTreeParser:
    """Incremental parser producing a FeedTree.

    Feed it with write() as bytes arrive, then call end() once to get the
    fully assembled tree. A parser instance handles exactly one document.

    Example:
        >>> parser = FeedTreeParser()
        >>> parser.write(b"<feed><title>Budget</title>")
        >>> parser.write(b"</feed>")
        >>> parser.end()
        {'title': 'Budget'}
    """

    def __init__(self) -> None:
        self._parser = ET.XMLPullParser(events=("start-ns", "end"))
        self._prefixes: dict[str, str] = {XML_NAMESPACE: "xml"}
        self._root: ET.Element | None = None
        self._done = False

    def write(self, data: bytes) -> None:
        """Feed a chunk of the document."""
        if self._done:
            raise FeedParseError("Parser already finished")
        try:
            self._parser.feed(data)
            self._drain()
        except ET.ParseError as e:
            raise FeedParseError(f"Malformed feed document: {e}") from e

    def end(self) -> FeedTree:
        """Finish parsing and return the assembled tree."""
        if self._done:
            raise FeedParseError("Parser already finished")
        self._done = True
        try:
            self._parser.close()
            self._drain()
        except ET.ParseError as e:
            raise FeedParseError(f"Malformed feed document: {e}") from e

        if self._root is None:
            raise FeedParseError("Empty feed document")
        return self._convert_root(self._root)

    def _drain(self) -> None:
        for event, payload in self._parser.read_events():
            if event == "start-ns":
                prefix, uri = payload
                # First declaration wins; feeds never rebind a prefix
                self._prefixes.setdefault(uri, prefix)
            else:
                # The last element to close is the document root
                self._root = payload

    def _name(self, qualified: str) -> str:
        """Map ``{uri}local`` to ``prefix:local`` (lower-cased)."""
        if qualified.startswith("{"):
            uri, _, local = qualified[1:].partition("}")
            prefix = self._prefixes.get(uri, "")
            name = f"{prefix}:{local}" if prefix else local
        else:
            name = qualified
        return name.lower()

    def _convert_root(self, root: ET.Element) -> FeedTree:
        tree: FeedTree = {self._name(k): v for k, v in root.attrib.items()}
        tree.update(self._group(root, root=True))
        return tree

    def _convert(self, element: ET.Element) -> FeedNode:
        node: dict[str, FeedNode] = {
            self._name(k): v for k, v in element.attrib.items()
        }
        children = self._group(element)
        # Leaf text is data and kept verbatim; text around children is layout
        text = element.text or ""
        if children:
            text = text.strip()

        if not node and not children:
            return text if text else {}

        node.update(children)
        if text:
            node[TEXT_KEY] = text
        return node

    def _group(self, element: ET.Element, *, root: bool = False) -> FeedTree:
        grouped: FeedTree = {}
        for child in element:
            key = self._name(child.tag)
            if root and key == ENTRY_TAG:
                key = ITEMS_KEY
            value = self._convert(child)

            if key not in grouped:
                grouped[key] = value
                continue
            existing = grouped[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                grouped[key] = [existing, value]
        return grouped


def parse_feed(data: bytes) -> FeedTree:
    """Parse a complete feed document in one call."""
    parser = FeedTreeParser()
    parser.write(data)
    return parser.end()
