"""
Request and result types exchanged with the host bridge framework.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BridgeRequest:
    """A single count, retrieve or search request from the host."""

    structure: str
    query: str | None = None
    parameters: dict[str, str] = field(default_factory=dict)
    fields: list[str] | None = None
    metadata: dict[str, str] | None = None

    def field_string(self) -> str:
        """Comma separated field list, used for logging."""
        if not self.fields:
            return ""
        return ",".join(self.fields)


@dataclass(frozen=True)
class Count:
    """Number of entries matched by a query."""

    value: int

    def to_json(self) -> dict[str, Any]:
        return {"count": self.value}


@dataclass(frozen=True)
class Record:
    """A single record. ``data`` is None when no record was found."""

    data: dict[str, str | None] | None = None

    @property
    def is_empty(self) -> bool:
        return self.data is None

    def to_json(self) -> dict[str, Any]:
        return {"record": self.data}


@dataclass(frozen=True)
class RecordList:
    """Records of a search together with the requested fields and paging."""

    fields: list[str]
    records: list[Record]
    metadata: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def to_json(self) -> dict[str, Any]:
        return {
            "fields": list(self.fields),
            "records": [record.data for record in self.records],
            "metadata": dict(self.metadata),
        }
