"""Tests for mapping decoding and sort-field discovery."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from leadsift.adapters.base.exceptions import ConnectionError
from leadsift.core.schema import (
    INTRINSIC_ID,
    FieldResolver,
    IdSort,
    choose_date_sort_field,
    choose_id_sort,
    decode_properties,
    field_exists,
)

FIELDS: dict[str, Any] = {"created_at": {"type": "date"}, "linked_id": {"type": "keyword"}}


# ── Unwrap strategies ────────────────────────────────────────────────────────


class TestDecodeProperties:
    @pytest.mark.parametrize(
        ("response", "strategy"),
        [
            ({"leads": {"mappings": {"properties": FIELDS}}}, "properties"),
            ({"leads": {"mappings": {"_doc": {"properties": FIELDS}}}}, "_doc"),
            ({"leads": {"mappings": {"lead": {"properties": FIELDS}}}}, "type_name"),
            ({"leads": {"properties": FIELDS}}, "properties"),
            ({"properties": FIELDS}, "properties"),
            ({"_doc": {"properties": FIELDS}}, "_doc"),
        ],
    )
    def test_shapes(self, response: dict[str, Any], strategy: str) -> None:
        discovery = decode_properties(response)
        assert discovery.ok
        assert discovery.properties == FIELDS
        assert discovery.strategy == strategy

    def test_mapping_without_fields(self) -> None:
        discovery = decode_properties({"leads": {"mappings": {}}})
        assert not discovery.ok
        assert discovery.error

    def test_non_dict_response(self) -> None:
        discovery = decode_properties(["not", "a", "mapping"])
        assert not discovery.ok
        assert "list" in (discovery.error or "")

    def test_empty_response(self) -> None:
        assert not decode_properties({}).ok


# ── Field existence ──────────────────────────────────────────────────────────


class TestFieldExists:
    @pytest.fixture
    def props(self) -> dict[str, Any]:
        return {
            "linked_Last_Updated": {"type": "text", "fields": {"keyword": {"type": "keyword"}}},
            "linked": {"properties": {"Last_Updated": {"type": "date"}}},
            "a.b": {"type": "keyword"},
        }

    def test_top_level(self, props: dict[str, Any]) -> None:
        assert field_exists(props, "linked_Last_Updated")

    def test_multi_field(self, props: dict[str, Any]) -> None:
        assert field_exists(props, "linked_Last_Updated.keyword")
        assert not field_exists(props, "linked_Last_Updated.raw")

    def test_object_path(self, props: dict[str, Any]) -> None:
        assert field_exists(props, "linked.Last_Updated")
        assert not field_exists(props, "linked.last_updated")

    def test_literal_dotted_key(self, props: dict[str, Any]) -> None:
        assert field_exists(props, "a.b")

    def test_no_properties(self) -> None:
        assert not field_exists(None, "created_at")
        assert not field_exists({}, "created_at")


# ── Sort choices ─────────────────────────────────────────────────────────────


class TestSortChoices:
    def test_date_field_preference_order(self) -> None:
        props = {"created": {"type": "date"}, "@timestamp": {"type": "date"}}
        assert choose_date_sort_field(props) == "@timestamp"

    def test_linked_last_updated_wins(self) -> None:
        props = {"created_at": {"type": "date"}, "linked_Last_Updated": {"type": "date"}}
        assert choose_date_sort_field(props) == "linked_Last_Updated"

    def test_no_date_field(self) -> None:
        assert choose_date_sort_field({"name": {"type": "text"}}) is None
        assert choose_date_sort_field(None) is None

    def test_id_prefers_linked_id(self) -> None:
        assert choose_id_sort({"id": {}, "linked_id": {}}) == IdSort(field="linked_id", sortable=True)

    def test_id_falls_back_to_generic_id(self) -> None:
        assert choose_id_sort({"id": {}}) == IdSort(field="id", sortable=True)

    def test_intrinsic_id_is_not_sortable(self) -> None:
        choice = choose_id_sort({"name": {}})
        assert choice == INTRINSIC_ID
        assert choice.field == "_id"
        assert not choice.sortable


# ── Resolver ─────────────────────────────────────────────────────────────────


class TestFieldResolver:
    async def test_resolve_schema_fields(self, adapter: MagicMock) -> None:
        resolver = FieldResolver(adapter)
        discovery = await resolver.resolve_schema_fields("leads_v3")
        assert discovery.ok
        assert "created_at" in (discovery.properties or {})
        adapter.get_mapping.assert_awaited_once_with("leads_v3")

    async def test_fetch_failure_is_reported_not_raised(self, adapter: MagicMock) -> None:
        adapter.get_mapping.side_effect = ConnectionError("cluster down")
        discovery = await FieldResolver(adapter).resolve_schema_fields("leads_v3")
        assert not discovery.ok
        assert discovery.error == "cluster down"

    async def test_choose_helpers(self, adapter: MagicMock) -> None:
        resolver = FieldResolver(adapter)
        assert await resolver.choose_date_sort_field("leads_v3") == "created_at"
        assert await resolver.choose_id_sort("leads_v3") == IdSort(field="linked_id", sortable=True)

    async def test_choose_helpers_degrade_on_failure(self, adapter: MagicMock) -> None:
        adapter.get_mapping.side_effect = RuntimeError("boom")
        resolver = FieldResolver(adapter)
        assert await resolver.choose_date_sort_field("leads_v3") is None
        assert await resolver.choose_id_sort("leads_v3") == INTRINSIC_ID
