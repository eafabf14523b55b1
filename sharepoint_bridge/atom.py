"""
Atom Feed Parser
================

SharePoint's REST endpoint answers list queries with an Atom feed in which
each result row is an ``entry`` element. Field values live in elements of
the OData data services namespace, conventionally bound to the ``d`` prefix::

    <feed xmlns="http://www.w3.org/2005/Atom"
          xmlns:d="http://schemas.microsoft.com/ado/2007/08/dataservices"
          xmlns:m="http://schemas.microsoft.com/ado/2007/08/dataservices/metadata">
      <entry>
        <content type="application/xml">
          <m:properties>
            <d:Title>Documents</d:Title>
          </m:properties>
        </content>
      </entry>
    </feed>

Field Lookup
------------
By default a field is looked up across the whole document and the result is
indexed by entry position: the value for entry ``i`` is the ``i``-th
``d:<field>`` element in document order. This only lines up when every
entry carries every requested field. Scoped lookup restricts the search to
the ``i``-th entry instead and returns None when that entry lacks the field.
"""

import logging
from xml.etree import ElementTree as ET

from sharepoint_bridge.exceptions import XmlParseError

logger = logging.getLogger(__name__)

NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "d": "http://schemas.microsoft.com/ado/2007/08/dataservices",
    "m": "http://schemas.microsoft.com/ado/2007/08/dataservices/metadata",
}

_ENTRY_LOCAL_NAME = "entry"


def _local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def _field_tag(field_name: str) -> str:
    return f"{{{NS['d']}}}{field_name}"


def _text_content(element: ET.Element) -> str:
    return "".join(element.itertext())


def _normalize(element: ET.Element) -> None:
    """Drop whitespace-only text and tails, they carry no data."""
    for node in element.iter():
        if node.text is not None and not node.text.strip() and len(node):
            node.text = None
        if node.tail is not None and not node.tail.strip():
            node.tail = None


class AtomDocument:
    """A parsed feed, exposing entry count and field values."""

    def __init__(self, root: ET.Element) -> None:
        self._root = root
        self._entries = [
            node for node in root.iter() if _local_name(node.tag) == _ENTRY_LOCAL_NAME
        ]

    @property
    def root(self) -> ET.Element:
        return self._root

    def count_entries(self) -> int:
        return len(self._entries)

    def field_value(
        self, field_name: str, entry_index: int, *, scoped: bool = False
    ) -> str | None:
        """Return the text of ``d:<field_name>`` for the entry at ``entry_index``.

        Returns None when there is no such element at that position.
        """
        tag = _field_tag(field_name)
        if scoped:
            if not 0 <= entry_index < len(self._entries):
                return None
            element = self._entries[entry_index].find(f".//{tag}")
            return None if element is None else _text_content(element)

        elements = list(self._root.iter(tag))
        if not 0 <= entry_index < len(elements):
            return None
        return _text_content(elements[entry_index])


def parse_feed(body: str) -> AtomDocument:
    """Parse a SharePoint Atom response body.

    :raises XmlParseError: the body is not well formed XML
    """
    try:
        root = ET.fromstring(body.encode("utf-8"))
    except (ET.ParseError, UnicodeEncodeError) as exc:
        logger.error(f"Full XML Error: {exc}")
        raise XmlParseError(str(exc)) from exc
    _normalize(root)
    return AtomDocument(root)
