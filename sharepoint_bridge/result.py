"""
Tagged results for callers that prefer matching on outcomes over catching
exceptions.

    >>> outcome = adapter.try_count(request)
    >>> if isinstance(outcome, Err) and outcome.kind is ErrorKind.CONNECTION:
    ...     retry_later()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar, Union

from sharepoint_bridge.exceptions import (
    AmbiguousResultError,
    BridgeError,
    InvalidStructureError,
    QueryParseError,
    SharePointConnectionError,
    XmlParseError,
)

T = TypeVar("T")


class ErrorKind(Enum):
    INVALID_STRUCTURE = "invalid_structure"
    QUERY_PARSE = "query_parse"
    CONNECTION = "connection"
    XML_PARSE = "xml_parse"
    AMBIGUOUS_RESULT = "ambiguous_result"


_ERROR_KINDS = (
    (InvalidStructureError, ErrorKind.INVALID_STRUCTURE),
    (QueryParseError, ErrorKind.QUERY_PARSE),
    (SharePointConnectionError, ErrorKind.CONNECTION),
    (XmlParseError, ErrorKind.XML_PARSE),
    (AmbiguousResultError, ErrorKind.AMBIGUOUS_RESULT),
)


def error_kind(error: BridgeError) -> ErrorKind:
    for error_type, kind in _ERROR_KINDS:
        if isinstance(error, error_type):
            return kind
    raise TypeError(f"No error kind for {type(error).__name__}")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: BridgeError

    @property
    def kind(self) -> ErrorKind:
        return error_kind(self.error)


Result = Union[Ok[T], Err]


def capture(func: Callable[..., T], *args, **kwargs) -> Result[T]:
    """Call ``func`` and wrap its return value or bridge error."""
    try:
        return Ok(func(*args, **kwargs))
    except BridgeError as exc:
        return Err(exc)
