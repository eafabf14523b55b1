from __future__ import annotations

from typing import Mapping

PAGE_SIZE = "pageSize"
PAGE_NUMBER = "pageNumber"
OFFSET = "offset"


def _as_int(value: str | None) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_pagination_metadata(
    metadata: Mapping[str, str] | None,
) -> dict[str, str]:
    """Return a copy of ``metadata`` with the standard paging keys filled in.

    Values already present are kept as given, unknown keys pass through.
    """
    normalized = dict(metadata or {})
    normalized.setdefault(PAGE_SIZE, "0")
    normalized.setdefault(PAGE_NUMBER, "1")
    if OFFSET not in normalized:
        page_size = _as_int(normalized[PAGE_SIZE])
        page_number = _as_int(normalized[PAGE_NUMBER])
        if page_size is None or page_number is None:
            normalized[OFFSET] = "0"
        else:
            normalized[OFFSET] = str(max(page_number - 1, 0) * page_size)
    return normalized
