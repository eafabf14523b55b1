import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

import pytest

from sharepoint_bridge.adapter import NAME, VERSION, SharePointAdapter
from sharepoint_bridge.atom import parse_feed
from sharepoint_bridge.config import AdapterConfig
from sharepoint_bridge.data_types import BridgeRequest, Record
from sharepoint_bridge.exceptions import (
    AmbiguousResultError,
    InvalidStructureError,
    QueryParseError,
    SharePointConnectionError,
    XmlParseError,
)
from sharepoint_bridge.result import Err, ErrorKind, Ok
from sharepoint_bridge.tests.feeds import entry, feed
from sharepoint_bridge.transport import HttpTransport

tc = unittest.TestCase()

SERVER = "https://contoso.sharepoint.com/sites/demo"
TITLE_QUERY = "$filter=Title eq '<%= parameter[\"Title\"] %>'"


class FakeTransport:
    """Records every URL and answers with a fixed body or error."""

    def __init__(self, body: str = "", error: Exception | None = None) -> None:
        self.body = body
        self.error = error
        self.urls: list[str] = []

    def execute(self, url: str) -> str:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.body


def _config(**options) -> AdapterConfig:
    return AdapterConfig(
        username="alice", password="secret", server_url=f"{SERVER}/", **options
    )


def _adapter(transport: FakeTransport, **options) -> SharePointAdapter:
    return SharePointAdapter(_config(**options), transport=transport)


def _three_lists() -> str:
    return feed(
        entry(Title="Documents", Id="1"),
        entry(Title="Site Assets", Id="2"),
        entry(Title="Site Pages", Id="3"),
    )


def test_adapter_identity() -> None:
    adapter = _adapter(FakeTransport())

    tc.assertEqual(adapter.get_name(), NAME)
    tc.assertEqual(adapter.get_version(), VERSION)
    tc.assertEqual(adapter.config.server_url, SERVER)


def test_default_transport_uses_config_credentials_and_timeout() -> None:
    adapter = SharePointAdapter(_config(timeout=7.5))

    tc.assertIsInstance(adapter._transport, HttpTransport)
    tc.assertEqual(adapter._transport._timeout, 7.5)
    tc.assertEqual(adapter._transport._credentials.username, "alice")


@pytest.mark.parametrize("structure", ["Items", "lists", "", "Lists "])
@pytest.mark.parametrize("operation", ["count", "retrieve", "search"])
def test_invalid_structure_fails_before_network(structure, operation) -> None:
    transport = FakeTransport(_three_lists())
    adapter = _adapter(transport)
    request = BridgeRequest(structure, TITLE_QUERY, {"Title": "x"}, ["Title"])

    with pytest.raises(InvalidStructureError) as exc:
        getattr(adapter, operation)(request)

    tc.assertEqual(exc.value.structure, structure)
    tc.assertEqual(transport.urls, [])


def test_query_parse_error_fails_before_network() -> None:
    transport = FakeTransport(_three_lists())
    adapter = _adapter(transport)

    with pytest.raises(QueryParseError):
        adapter.count(BridgeRequest("Lists", TITLE_QUERY, {}))

    tc.assertEqual(transport.urls, [])


def test_request_url_is_built_from_qualification() -> None:
    transport = FakeTransport(feed())
    adapter = _adapter(transport)

    adapter.count(BridgeRequest("Lists", TITLE_QUERY, {"Title": "Site Pages"}))

    tc.assertEqual(
        transport.urls,
        [f"{SERVER}/_api/web/lists?%24filter=Title+eq+%27Site+Pages%27"],
    )


def test_request_without_query_lists_everything() -> None:
    transport = FakeTransport(feed())
    adapter = _adapter(transport)

    adapter.count(BridgeRequest("Lists"))

    tc.assertEqual(transport.urls, [f"{SERVER}/_api/web/lists?"])


@pytest.mark.parametrize("entries", [0, 1, 3])
def test_count(entries: int) -> None:
    body = feed(*[entry(Title=str(i)) for i in range(entries)])
    adapter = _adapter(FakeTransport(body))

    count = adapter.count(BridgeRequest("Lists"))

    tc.assertEqual(count.value, entries)


def test_retrieve_no_match_returns_empty_record() -> None:
    adapter = _adapter(FakeTransport(feed()))

    record = adapter.retrieve(BridgeRequest("Lists", fields=["Title", "Id"]))

    tc.assertTrue(record.is_empty)
    tc.assertEqual(record, Record(None))


def test_retrieve_single_match_returns_fields_in_order() -> None:
    body = feed(entry(Id="7", Title="Documents", ItemCount="12"))
    adapter = _adapter(FakeTransport(body))

    record = adapter.retrieve(BridgeRequest("Lists", fields=["Title", "Id"]))

    tc.assertEqual(record.data, {"Title": "Documents", "Id": "7"})
    tc.assertEqual(list(record.data), ["Title", "Id"])


@pytest.mark.parametrize("fields", [None, []])
def test_retrieve_without_fields_returns_empty_record(fields) -> None:
    adapter = _adapter(FakeTransport(feed(entry(Title="Documents"))))

    record = adapter.retrieve(BridgeRequest("Lists", fields=fields))

    tc.assertTrue(record.is_empty)


def test_retrieve_multiple_matches_raises() -> None:
    adapter = _adapter(FakeTransport(_three_lists()))

    with pytest.raises(AmbiguousResultError) as exc:
        adapter.retrieve(BridgeRequest("Lists", fields=["Title"]))

    tc.assertEqual(exc.value.count, 3)


def test_search_returns_record_per_entry() -> None:
    adapter = _adapter(FakeTransport(_three_lists()))
    metadata = {"pageSize": "25", "pageNumber": "2", "order": "Title"}

    result = adapter.search(BridgeRequest("Lists", fields=["Title"], metadata=metadata))

    tc.assertEqual(len(result), 3)
    tc.assertEqual(result.fields, ["Title"])
    tc.assertEqual(
        [record.data for record in result.records],
        [{"Title": "Documents"}, {"Title": "Site Assets"}, {"Title": "Site Pages"}],
    )
    tc.assertEqual(
        result.metadata,
        {"pageSize": "25", "pageNumber": "2", "order": "Title", "offset": "25"},
    )
    # the request metadata is left untouched
    tc.assertNotIn("offset", metadata)


def test_search_without_fields_returns_empty_mappings() -> None:
    adapter = _adapter(FakeTransport(_three_lists()))

    result = adapter.search(BridgeRequest("Lists"))

    tc.assertEqual(result.fields, [])
    tc.assertEqual([record.data for record in result.records], [{}, {}, {}])
    tc.assertEqual(result.metadata["pageNumber"], "1")


def test_search_no_entries() -> None:
    adapter = _adapter(FakeTransport(feed()))

    result = adapter.search(BridgeRequest("Lists", fields=["Title"]))

    tc.assertEqual(result.records, [])


def test_search_flat_lookup_misaligns_missing_fields() -> None:
    body = feed(entry(Title="Documents"), entry(Title="Site Assets", Hidden="true"))

    flat = _adapter(FakeTransport(body)).search(
        BridgeRequest("Lists", fields=["Title", "Hidden"])
    )
    scoped = _adapter(FakeTransport(body), scoped_field_lookup=True).search(
        BridgeRequest("Lists", fields=["Title", "Hidden"])
    )

    tc.assertEqual(
        [record.data for record in flat.records],
        [
            {"Title": "Documents", "Hidden": "true"},
            {"Title": "Site Assets", "Hidden": None},
        ],
    )
    tc.assertEqual(
        [record.data for record in scoped.records],
        [
            {"Title": "Documents", "Hidden": None},
            {"Title": "Site Assets", "Hidden": "true"},
        ],
    )


def test_transport_error_propagates() -> None:
    adapter = _adapter(FakeTransport(error=SharePointConnectionError()))

    with pytest.raises(SharePointConnectionError):
        adapter.search(BridgeRequest("Lists", fields=["Title"]))


def test_malformed_response_raises_xml_parse_error() -> None:
    adapter = _adapter(FakeTransport("<html><body>Sign in</body>"))

    with pytest.raises(XmlParseError):
        adapter.count(BridgeRequest("Lists"))


def test_custom_parser_is_used() -> None:
    bodies = []

    def parser(body):
        bodies.append(body)
        return parse_feed(feed(entry(Title="Parsed")))

    adapter = SharePointAdapter(
        _config(), transport=FakeTransport("raw"), parser=parser
    )

    record = adapter.retrieve(BridgeRequest("Lists", fields=["Title"]))

    tc.assertEqual(bodies, ["raw"])
    tc.assertEqual(record.data, {"Title": "Parsed"})


def test_try_operations_return_tagged_results() -> None:
    adapter = _adapter(FakeTransport(_three_lists()))

    count = adapter.try_count(BridgeRequest("Lists"))
    ambiguous = adapter.try_retrieve(BridgeRequest("Lists", fields=["Title"]))
    invalid = adapter.try_search(BridgeRequest("Files", fields=["Title"]))

    tc.assertIsInstance(count, Ok)
    tc.assertEqual(count.value.value, 3)
    tc.assertIsInstance(ambiguous, Err)
    tc.assertIs(ambiguous.kind, ErrorKind.AMBIGUOUS_RESULT)
    tc.assertIsInstance(invalid, Err)
    tc.assertIs(invalid.kind, ErrorKind.INVALID_STRUCTURE)


@pytest.mark.parametrize(
    "transport, kind",
    [
        (FakeTransport(error=SharePointConnectionError()), ErrorKind.CONNECTION),
        (FakeTransport("<feed>"), ErrorKind.XML_PARSE),
    ],
)
def test_try_operations_tag_pipeline_errors(transport, kind) -> None:
    adapter = _adapter(transport)

    outcome = adapter.try_count(BridgeRequest("Lists"))

    tc.assertIsInstance(outcome, Err)
    tc.assertIs(outcome.kind, kind)


def test_try_operations_tag_query_parse_errors() -> None:
    adapter = _adapter(FakeTransport(feed()))

    outcome = adapter.try_search(BridgeRequest("Lists", TITLE_QUERY))

    tc.assertIs(outcome.kind, ErrorKind.QUERY_PARSE)


class RoutingTransport:
    """Answers each title filter with a feed of entries named after it."""

    def __init__(self) -> None:
        self._barrier = threading.Barrier(4)

    def execute(self, url: str) -> str:
        # Hold every call until all are in flight so their parsing overlaps
        self._barrier.wait(timeout=5)
        name = url.rsplit("%27", 2)[1]
        return feed(*[entry(Title=f"{name}-{i}", Id=str(i)) for i in range(5)])


def test_concurrent_searches_do_not_interfere() -> None:
    adapter = _adapter(RoutingTransport())
    names = ["alpha", "beta", "gamma", "delta"]

    def run(name):
        return adapter.search(
            BridgeRequest("Lists", TITLE_QUERY, {"Title": name}, ["Title", "Id"])
        )

    with ThreadPoolExecutor(max_workers=len(names)) as pool:
        results = list(pool.map(run, names))

    for name, result in zip(names, results):
        tc.assertEqual(
            [record.data for record in result.records],
            [{"Title": f"{name}-{i}", "Id": str(i)} for i in range(5)],
        )


def test_try_count_with_schemeless_server_url_returns_connection_error() -> None:
    adapter = SharePointAdapter(
        AdapterConfig("alice", "secret", "contoso.sharepoint.com")
    )

    outcome = adapter.try_count(BridgeRequest("Lists"))

    tc.assertIsInstance(outcome, Err)
    tc.assertIs(outcome.kind, ErrorKind.CONNECTION)
    tc.assertEqual(
        outcome.error.url, "contoso.sharepoint.com/_api/web/lists?"
    )
