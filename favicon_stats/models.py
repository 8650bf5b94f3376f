# favicon_stats/models.py
"""
Data shapes for crawl records flowing through the favicon pipeline.

Records stay plain dicts (they come from and go back to JSON); the typed
dicts below only document the known keys. Unknown keys are preserved.
"""
from __future__ import annotations

from typing import Any, Final, FrozenSet, TypedDict, Union

STATUS_DOWNLOADED: Final[str] = "downloaded"
STATUS_NOT_MODIFIED: Final[str] = "not_modified"
STATUS_SKIPPED_RECENT: Final[str] = "skipped_recent"
STATUS_FAILED: Final[str] = "failed"
STATUS_ERROR: Final[str] = "error"
STATUS_UNKNOWN: Final[str] = "unknown"

#: statuses for which an icon file is expected in the icon store
SIZED_STATUSES: Final[FrozenSet[str]] = frozenset(
    {STATUS_DOWNLOADED, STATUS_NOT_MODIFIED, STATUS_SKIPPED_RECENT}
)

MISSING_FIELDS_ERROR: Final[str] = "Missing url or favicon field"
INVALID_URL_PREFIX: Final[str] = "Invalid URL: "


class DateValue(TypedDict):
    """Wrapped crawl date, e.g. ``{"value": "2024-01-01"}``."""

    value: Any


class RawRecord(TypedDict, total=False):
    """One unprocessed crawl result."""

    url: str
    favicon: str
    date: Union[DateValue, str, None]
    status: str
    httpStatus: Union[int, str, None]
    error: str


class NormalizedRecord(TypedDict, total=False):
    """Crawl result after URL resolution, date flattening and classification."""

    url: str
    favicon: str
    date: Any
    status: str
    httpStatus: Union[int, str, None]
    error: str


__all__ = [
    "DateValue",
    "RawRecord",
    "NormalizedRecord",
    "SIZED_STATUSES",
    "STATUS_DOWNLOADED",
    "STATUS_NOT_MODIFIED",
    "STATUS_SKIPPED_RECENT",
    "STATUS_FAILED",
    "STATUS_ERROR",
    "STATUS_UNKNOWN",
    "MISSING_FIELDS_ERROR",
    "INVALID_URL_PREFIX",
]
