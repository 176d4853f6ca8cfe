"""Tests for the records view: search, date filter, pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any

import pytest

from src.forms.records import (
    RecordListView,
    flatten_record_data,
    matches_search,
    page_range,
    within_dates,
)


@dataclass
class _Record:
    data: dict[str, dict[str, Any]]
    created_at: datetime = field(default_factory=lambda: datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))
    job_order: str | None = None


def _many(count: int) -> list[_Record]:
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        _Record(data={"basicInformation": {"seq": str(i)}}, created_at=base + timedelta(hours=i))
        for i in range(1, count + 1)
    ]


class TestFlatten:
    def test_sections_merged(self):
        data = {"basicInformation": {"a": "1"}, "serviceDetails": {"b": ["x", "y"]}}
        assert flatten_record_data(data) == {"a": "1", "b": ["x", "y"]}

    def test_non_mapping_section_ignored(self):
        assert flatten_record_data({"broken": "text", "ok": {"a": "1"}}) == {"a": "1"}


class TestSearch:
    def test_case_insensitive_substring(self):
        acme = _Record({"basicInformation": {"customerName": "Acme Corp", "site": "Dock"}})
        beta = _Record({"basicInformation": {"customerName": "Beta Inc", "site": "Yard"}})
        view = RecordListView([acme, beta])
        view.search = "ACME"
        assert view.filtered == [acme]

    def test_matches_list_values(self):
        record = _Record({"serviceDetails": {"checks": ["Oil change", "Belt"]}})
        assert matches_search(record, "belt")

    def test_matches_job_order(self):
        record = _Record({"basicInformation": {}}, job_order="JO-2024-17")
        assert matches_search(record, "jo-2024")

    def test_matches_numbers(self):
        record = _Record({"engineInformation": {"runHours": 1250}})
        assert matches_search(record, "125")

    def test_empty_search_matches_all(self):
        assert matches_search(_Record({}), "")


class TestDateFilter:
    created = datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)

    def test_same_day_range_includes(self):
        assert within_dates(self.created, date(2024, 3, 15), date(2024, 3, 15))

    def test_end_before_excludes(self):
        assert not within_dates(self.created, None, date(2024, 3, 14))

    def test_start_after_excludes(self):
        assert not within_dates(self.created, date(2024, 3, 16), None)

    def test_end_of_day_inclusive(self):
        late = datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=timezone.utc)
        assert within_dates(late, None, date(2024, 3, 15))

    def test_open_range(self):
        assert within_dates(self.created, None, None)

    def test_timezone_shifts_day(self):
        # 02:00 UTC on the 15th is still the evening of the 14th in Los Angeles
        early = datetime(2024, 3, 15, 2, 0, tzinfo=timezone.utc)
        assert within_dates(early, None, date(2024, 3, 14), tz="America/Los_Angeles")
        assert not within_dates(early, None, date(2024, 3, 14), tz="UTC")

    def test_view_date_range(self):
        inside = _Record({"a": {"x": "1"}})
        outside = _Record({"a": {"x": "2"}}, created_at=datetime(2024, 3, 20, tzinfo=timezone.utc))
        view = RecordListView([inside, outside])
        view.set_date_range(date(2024, 3, 15), date(2024, 3, 15))
        assert view.filtered == [inside]


class TestPagination:
    def test_twenty_five_records(self):
        records = _many(25)
        view = RecordListView(records, page_size=10)
        assert view.total_pages == 3
        assert list(view.page_items()) == records[:10]
        view.go_to(3)
        assert list(view.page_items()) == records[20:25]

    def test_search_resets_page(self):
        view = RecordListView(_many(25), page_size=10)
        view.go_to(3)
        view.search = "1"
        assert view.page == 1

    def test_date_range_resets_page(self):
        view = RecordListView(_many(25), page_size=10)
        view.go_to(2)
        view.set_date_range(None, None)
        assert view.page == 1

    def test_page_size_resets_page(self):
        view = RecordListView(_many(25), page_size=10)
        view.go_to(2)
        view.page_size = 5
        assert view.page == 1
        assert view.total_pages == 5

    def test_go_to_clamps(self):
        view = RecordListView(_many(25), page_size=10)
        assert view.go_to(99) == 3
        assert view.go_to(0) == 1

    def test_empty_has_one_page(self):
        view = RecordListView([], page_size=10)
        assert view.total == 0
        assert view.total_pages == 1
        assert list(view.page_items()) == []

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            RecordListView([], page_size=0)


class TestPageRange:
    def test_few_pages(self):
        assert page_range(1, 3) == [1, 2, 3]

    def test_start(self):
        assert page_range(2, 20) == [1, 2, 3, 4, 5, 6, 7]

    def test_middle(self):
        assert page_range(10, 20) == [7, 8, 9, 10, 11, 12, 13]

    def test_end(self):
        assert page_range(19, 20) == [14, 15, 16, 17, 18, 19, 20]
