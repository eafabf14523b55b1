"""
SharePoint bridge adapter.

Implements the count, retrieve and search operations of the bridge contract
on top of the SharePoint list REST endpoint. Every call runs the same
pipeline::

    qualification -> URL -> HTTP GET -> Atom feed -> result shaping

No state is shared between calls apart from the read-only configuration, so
one adapter instance may serve concurrent callers.
"""

from __future__ import annotations

import logging
from typing import Callable

from sharepoint_bridge.atom import AtomDocument, parse_feed
from sharepoint_bridge.config import AdapterConfig
from sharepoint_bridge.data_types import BridgeRequest, Count, Record, RecordList
from sharepoint_bridge.exceptions import AmbiguousResultError, InvalidStructureError
from sharepoint_bridge.pagination import normalize_pagination_metadata
from sharepoint_bridge.qualification import (
    QualificationParser,
    SharePointQualificationParser,
)
from sharepoint_bridge.query import build_query_url
from sharepoint_bridge.result import Result, capture
from sharepoint_bridge.transport import BasicAuthCredentials, HttpTransport, Transport

logger = logging.getLogger(__name__)

NAME = "Sharepoint Bridge"
VERSION = "1.0.0"

# Structures that are valid to use in the bridge
VALID_STRUCTURES = ("Lists",)


class SharePointAdapter:
    """Bridge adapter answering queries against SharePoint lists."""

    def __init__(
        self,
        config: AdapterConfig,
        *,
        transport: Transport | None = None,
        parser: Callable[[str], AtomDocument] = parse_feed,
        qualification_parser: QualificationParser | None = None,
    ) -> None:
        self._config = config
        self._transport = transport or HttpTransport(
            BasicAuthCredentials(config.username, config.password),
            timeout=config.timeout,
        )
        self._parse = parser
        self._qualification_parser = (
            qualification_parser or SharePointQualificationParser()
        )

    @property
    def config(self) -> AdapterConfig:
        return self._config

    def get_name(self) -> str:
        return NAME

    def get_version(self) -> str:
        return VERSION

    def count(self, request: BridgeRequest) -> Count:
        logger.debug("Counting the SharePoint records")
        self._log_request(request)

        document = self._execute(request)
        return Count(document.count_entries())

    def retrieve(self, request: BridgeRequest) -> Record:
        logger.debug("Retrieving a SharePoint record")
        self._log_request(request)

        document = self._execute(request)
        entries = document.count_entries()
        if entries > 1:
            raise AmbiguousResultError(entries)
        if entries == 0 or not request.fields:
            return Record(None)
        return Record(self._extract(document, request.fields, 0))

    def search(self, request: BridgeRequest) -> RecordList:
        logger.debug("Searching SharePoint records")
        self._log_request(request)

        fields = list(request.fields or [])
        metadata = normalize_pagination_metadata(request.metadata)
        document = self._execute(request)

        records = [
            Record(self._extract(document, fields, index))
            for index in range(document.count_entries())
        ]
        return RecordList(fields, records, metadata)

    def try_count(self, request: BridgeRequest) -> Result[Count]:
        return capture(self.count, request)

    def try_retrieve(self, request: BridgeRequest) -> Result[Record]:
        return capture(self.retrieve, request)

    def try_search(self, request: BridgeRequest) -> Result[RecordList]:
        return capture(self.search, request)

    def build_url(self, request: BridgeRequest) -> str:
        """Validate the request and return the URL it will be sent to."""
        if request.structure not in VALID_STRUCTURES:
            raise InvalidStructureError(request.structure)
        query = self._qualification_parser.parse(request.query, request.parameters)
        return build_query_url(self._config.server_url, query)

    def _execute(self, request: BridgeRequest) -> AtomDocument:
        url = self.build_url(request)
        body = self._transport.execute(url)
        return self._parse(body)

    def _extract(
        self, document: AtomDocument, fields: list[str], index: int
    ) -> dict[str, str | None]:
        scoped = self._config.scoped_field_lookup
        return {
            field_name: document.field_value(field_name, index, scoped=scoped)
            for field_name in fields
        }

    @staticmethod
    def _log_request(request: BridgeRequest) -> None:
        logger.debug(f"  Structure: {request.structure}")
        logger.debug(f"  Query: {request.query}")
        if request.fields is not None:
            logger.debug(f"  Fields: {request.field_string()}")
