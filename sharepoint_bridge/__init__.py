"""
sharepoint-bridge: SharePoint list adapter for the bridge framework.

Translates bridge requests (structure, qualification, parameters, fields and
pagination metadata) into SharePoint list REST queries and maps the Atom
feed responses back into bridge records.

Example:
    >>> from sharepoint_bridge import AdapterConfig, BridgeRequest, SharePointAdapter
    >>> adapter = SharePointAdapter(
    ...     AdapterConfig("alice", "secret", "https://contoso.sharepoint.com")
    ... )
    >>> adapter.count(BridgeRequest("Lists", "$filter=Hidden eq false")).value
"""

from sharepoint_bridge.adapter import (
    NAME,
    VALID_STRUCTURES,
    VERSION,
    SharePointAdapter,
)
from sharepoint_bridge.atom import AtomDocument, parse_feed
from sharepoint_bridge.config import AdapterConfig
from sharepoint_bridge.data_types import BridgeRequest, Count, Record, RecordList
from sharepoint_bridge.exceptions import (
    AmbiguousResultError,
    BridgeError,
    InvalidStructureError,
    QueryParseError,
    SharePointConnectionError,
    XmlParseError,
)
from sharepoint_bridge.qualification import (
    QualificationParser,
    SharePointQualificationParser,
)
from sharepoint_bridge.query import build_query_url
from sharepoint_bridge.result import Err, ErrorKind, Ok
from sharepoint_bridge.transport import BasicAuthCredentials, HttpTransport

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Adapter
    "NAME",
    "VERSION",
    "VALID_STRUCTURES",
    "SharePointAdapter",
    "AdapterConfig",
    # Pipeline
    "QualificationParser",
    "SharePointQualificationParser",
    "build_query_url",
    "BasicAuthCredentials",
    "HttpTransport",
    "AtomDocument",
    "parse_feed",
    # Data types
    "BridgeRequest",
    "Count",
    "Record",
    "RecordList",
    # Results and errors
    "Ok",
    "Err",
    "ErrorKind",
    "BridgeError",
    "InvalidStructureError",
    "QueryParseError",
    "SharePointConnectionError",
    "XmlParseError",
    "AmbiguousResultError",
]
