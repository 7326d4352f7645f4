"""Tests for FilterSet parsing and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from leadsift.core.exceptions import InvalidFilterError
from leadsift.models.filters import FilterSet


class TestFilterSetValues:
    def test_blank_values_become_none(self) -> None:
        filters = FilterSet(city="  ", company_name="", phone=" \t")
        assert filters.city is None
        assert filters.company_name is None
        assert filters.phone is None
        assert filters.is_empty()

    def test_values_are_stripped(self) -> None:
        assert FilterSet(city="  Austin ").city == "Austin"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", True), ("true", True), ("TRUE", True), (" True ", True), ("0", False), ("yes", False), ("", False)],
    )
    def test_exact_flag(self, raw: str, expected: bool) -> None:
        assert FilterSet(exact=raw).exact is expected

    def test_exact_alone_is_empty(self) -> None:
        assert FilterSet(exact="1").is_empty()

    def test_unknown_field_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FilterSet(favourite_color="blue")

    def test_frozen(self) -> None:
        filters = FilterSet(city="Austin")
        with pytest.raises(ValidationError):
            filters.city = "Dallas"


class TestFromParams:
    def test_reserved_params_are_skipped(self) -> None:
        filters = FilterSet.from_params(
            [("city", "Austin"), ("limit", "10"), ("offset", "5"), ("sort_field", "x"), ("sort_dir", "asc")]
        )
        assert filters.city == "Austin"

    def test_unknown_params_are_rejected(self) -> None:
        with pytest.raises(InvalidFilterError) as exc_info:
            FilterSet.from_params([("city", "Austin"), ("zzz", "1"), ("aaa", "2"), ("zzz", "3")])
        assert exc_info.value.unknown == ["aaa", "zzz"]

    def test_repeated_list_params_are_joined(self) -> None:
        filters = FilterSet.from_params([("state_code", "TX"), ("state_code", " CA "), ("state_code", "")])
        assert filters.state_code == "TX,CA"

    def test_repeated_scalar_params_take_first_non_blank(self) -> None:
        filters = FilterSet.from_params([("city", " "), ("city", "Austin"), ("city", "Dallas")])
        assert filters.city == "Austin"

    def test_all_blank_is_absent(self) -> None:
        filters = FilterSet.from_params([("city", ""), ("skills", "  ")])
        assert filters.is_empty()
