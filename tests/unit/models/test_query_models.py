"""Tests for pagination clamping, sort validation, and search plans."""

from __future__ import annotations

import pytest

from leadsift.models.query import Pagination, SearchPlan, SortField, SortRequest, is_valid_sort_field


class TestPagination:
    @pytest.mark.parametrize(
        ("limit", "offset", "expected"),
        [
            (None, None, (100, 0)),
            ("9999", None, (1000, 0)),
            ("0", None, (1, 0)),
            ("-3", None, (1, 0)),
            ("abc", "xyz", (100, 0)),
            ("25", "-5", (25, 0)),
            ("50", "200", (50, 200)),
            ("12abc", "7.9", (12, 7)),
            (" 30 ", " 4", (30, 4)),
            (40, 8, (40, 8)),
        ],
    )
    def test_from_raw(self, limit: object, offset: object, expected: tuple[int, int]) -> None:
        page = Pagination.from_raw(limit, offset)
        assert (page.limit, page.offset) == expected


class TestSortRequest:
    @pytest.mark.parametrize("name", ["created_at", "linked_Last_Updated.keyword", "@timestamp", "a-b", "x.y@z"])
    def test_valid_names(self, name: str) -> None:
        assert is_valid_sort_field(name)

    @pytest.mark.parametrize("name", ["a); DROP", "", None, "a b", "f\n", "{\"script\":1}", "naïve", "a,b"])
    def test_invalid_names(self, name: str | None) -> None:
        assert not is_valid_sort_field(name)

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, "desc"), ("asc", "asc"), ("ASC", "asc"), ("desc", "desc"), ("up", "desc")],
    )
    def test_direction(self, raw: str | None, expected: str) -> None:
        assert SortRequest.from_raw("created_at", raw).direction == expected

    def test_is_valid(self) -> None:
        assert SortRequest.from_raw("created_at").is_valid
        assert not SortRequest.from_raw("a); DROP").is_valid
        assert not SortRequest().is_valid


class TestSearchPlan:
    def test_body_with_and_without_sort(self) -> None:
        plan = SearchPlan(
            index="leads",
            query={"match_all": {}},
            sort=[SortField(field="created_at", missing_last=True), SortField(field="linked_id")],
        )
        assert plan.body() == {
            "query": {"match_all": {}},
            "track_total_hits": True,
            "sort": [
                {"created_at": {"order": "desc", "missing": "_last"}},
                {"linked_id": {"order": "desc"}},
            ],
        }
        assert plan.body(with_sort=False) == {"query": {"match_all": {}}, "track_total_hits": True}

    def test_empty_sort_is_document_order(self) -> None:
        plan = SearchPlan(index="leads", query={"match_all": {}})
        assert plan.sort_clause() == ["_doc"]
