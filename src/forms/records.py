"""Records view: in-memory search, date filtering and pagination of submissions.

The store only hands back every record of a template; everything here runs on
that list. Changing any filter (or the page size) sends the view back to
page 1.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, time, timezone
from typing import Any, Protocol
from zoneinfo import ZoneInfo

from src.schemas.forms import FieldValue

# Inclusive day boundaries for the date filter
DAY_START = time(0, 0, 0, 0)
DAY_END = time(23, 59, 59, 999000)


class RecordLike(Protocol):
    job_order: str | None
    data: Mapping[str, Mapping[str, Any]]
    created_at: datetime


def flatten_record_data(data: Mapping[str, Mapping[str, FieldValue]]) -> dict[str, FieldValue]:
    """{section: {field: value}} -> {field: value} (later sections win on clashes)."""
    flat: dict[str, FieldValue] = {}
    for section_values in data.values():
        if isinstance(section_values, Mapping):
            flat.update(section_values)
    return flat


def searchable_values(record: RecordLike) -> list[str]:
    """Every scalar of a record as text, plus its job order."""
    texts: list[str] = [record.job_order] if record.job_order else []
    for value in flatten_record_data(record.data).values():
        if isinstance(value, list):
            texts.extend(str(v) for v in value)
        elif value is not None and value != "":
            texts.append(str(value))
    return texts


def matches_search(record: RecordLike, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(needle in text.lower() for text in searchable_values(record))


def within_dates(
    created_at: datetime,
    start: date | None,
    end: date | None,
    tz: str = "UTC",
) -> bool:
    """Inclusive day-range check; `start` from 00:00:00.000, `end` to 23:59:59.999."""
    zone = ZoneInfo(tz)
    moment = created_at if created_at.tzinfo else created_at.replace(tzinfo=timezone.utc)
    if start is not None and moment < datetime.combine(start, DAY_START, tzinfo=zone):
        return False
    if end is not None and moment > datetime.combine(end, DAY_END, tzinfo=zone):
        return False
    return True


def page_range(current: int, total_pages: int) -> list[int]:
    """Page links to show: at most 7, centred on the current page."""
    if total_pages <= 7:
        return list(range(1, total_pages + 1))
    if current <= 4:
        return list(range(1, 8))
    if current >= total_pages - 3:
        return list(range(total_pages - 6, total_pages + 1))
    return list(range(current - 3, current + 4))


class RecordListView:
    """Filter + pagination state over one template's records."""

    def __init__(
        self,
        records: Iterable[RecordLike],
        *,
        page_size: int = 10,
        tz: str = "UTC",
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._records = list(records)
        self._page_size = page_size
        self._tz = tz
        self._search = ""
        self._start: date | None = None
        self._end: date | None = None
        self._page = 1

    # ── Filters (each resets to page 1) ────────────────────────────

    @property
    def search(self) -> str:
        return self._search

    @search.setter
    def search(self, value: str | None) -> None:
        self._search = value or ""
        self._page = 1

    def set_date_range(self, start: date | None, end: date | None) -> None:
        self._start, self._end = start, end
        self._page = 1

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        if value < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = value
        self._page = 1

    # ── Derived views ──────────────────────────────────────────────

    @property
    def filtered(self) -> list[RecordLike]:
        return [
            r for r in self._records
            if matches_search(r, self._search) and within_dates(r.created_at, self._start, self._end, self._tz)
        ]

    @property
    def total(self) -> int:
        return len(self.filtered)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self._page_size))

    @property
    def page(self) -> int:
        return self._page

    def go_to(self, page: int) -> int:
        """Move to a page, clamped to the available range."""
        self._page = min(max(1, page), self.total_pages)
        return self._page

    def page_items(self) -> Sequence[RecordLike]:
        start = (self._page - 1) * self._page_size
        return self.filtered[start:start + self._page_size]

    def pages(self) -> list[int]:
        return page_range(self._page, self.total_pages)
