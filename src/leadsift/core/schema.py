"""Field resolver — Discover which sort fields an index actually maps.

Mapping responses come in several shapes depending on cluster version and
how the index was created.  The field map is located by first stepping
into the per-index entry, then trying each unwrap strategy in order:

  1. ``properties`` directly on the mapping
  2. ``_doc.properties`` (legacy default type name)
  3. ``<any type>.properties`` (legacy custom type name)

Discovery never raises: failures come back as a ``SchemaDiscovery`` with an
``error`` so the caller can decide how to fall back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from leadsift.adapters.base.adapter import SearchAdapter
from leadsift.core.fields import DATE_SORT_CANDIDATES, ID_SORT_CANDIDATES

logger = logging.getLogger(__name__)

Properties = dict[str, Any]


class SchemaDiscovery(BaseModel):
    """Outcome of a mapping lookup: the field map, or the reason there is none."""

    properties: Properties | None = None
    strategy: str | None = Field(default=None, description="Unwrap strategy that found the field map")
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.properties is not None


class IdSort(BaseModel):
    """Identifier field choice for tie-breaking sorts."""

    field: str
    sortable: bool = Field(description="False for the intrinsic ``_id``, which must not be sorted on")


INTRINSIC_ID = IdSort(field="_id", sortable=False)


# ── Unwrap strategies ────────────────────────────────────────────────────────


def _as_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _direct(mapping: dict[str, Any]) -> Properties | None:
    return _as_dict(mapping.get("properties"))


def _doc_type(mapping: dict[str, Any]) -> Properties | None:
    doc = _as_dict(mapping.get("_doc"))
    return _as_dict(doc.get("properties")) if doc else None


def _any_type(mapping: dict[str, Any]) -> Properties | None:
    for value in mapping.values():
        typed = _as_dict(value)
        if typed and _as_dict(typed.get("properties")) is not None:
            return typed["properties"]
    return None


UNWRAP_STRATEGIES: tuple[tuple[str, Callable[[dict[str, Any]], Properties | None]], ...] = (
    ("properties", _direct),
    ("_doc", _doc_type),
    ("type_name", _any_type),
)


def _index_entry(response: dict[str, Any]) -> dict[str, Any]:
    """Step into ``{<index>: {"mappings": {...}}}`` when present."""
    if not response:
        return response
    first = _as_dict(next(iter(response.values())))
    if first is None:
        return response
    mappings = _as_dict(first.get("mappings"))
    if mappings is not None:
        return mappings
    # Already a bare mapping rather than an index-keyed response.
    if "properties" in response or "_doc" in response:
        return response
    return first


def decode_properties(response: Any) -> SchemaDiscovery:
    """Locate the field map inside a raw mapping response."""
    body = _as_dict(response)
    if body is None:
        return SchemaDiscovery(error=f"unexpected mapping response type {type(response).__name__}")

    mapping = _index_entry(body)
    for name, strategy in UNWRAP_STRATEGIES:
        properties = strategy(mapping)
        if properties is not None:
            return SchemaDiscovery(properties=properties, strategy=name)
    return SchemaDiscovery(error="no field map found in mapping response")


# ── Field lookups ────────────────────────────────────────────────────────────


def field_exists(properties: Properties | None, name: str) -> bool:
    """Whether ``name`` is mapped.

    Dotted names resolve through object ``properties`` and multi-field
    ``fields`` (``title.keyword``), as well as matching a literal dotted key.
    """
    if not properties:
        return False
    if name in properties:
        return True

    current: Properties | None = properties
    parts = name.split(".")
    for i, part in enumerate(parts):
        node = _as_dict(current.get(part)) if current else None
        if node is None:
            return False
        if i == len(parts) - 1:
            return True
        current = _as_dict(node.get("properties")) or _as_dict(node.get("fields"))
    return False


def find_first_existing(properties: Properties | None, candidates: tuple[str, ...]) -> str | None:
    for candidate in candidates:
        if field_exists(properties, candidate):
            return candidate
    return None


def choose_date_sort_field(properties: Properties | None) -> str | None:
    """First mapped timestamp field by preference, or None."""
    return find_first_existing(properties, DATE_SORT_CANDIDATES)


def choose_id_sort(properties: Properties | None) -> IdSort:
    """Prefer a mapped domain identifier; fall back to the intrinsic ``_id``."""
    for candidate in ID_SORT_CANDIDATES:
        if properties and candidate in properties:
            return IdSort(field=candidate, sortable=True)
    return INTRINSIC_ID


class FieldResolver:
    """Fetches index mappings through the adapter and answers field questions."""

    def __init__(self, adapter: SearchAdapter) -> None:
        self._adapter = adapter

    async def resolve_schema_fields(self, index: str) -> SchemaDiscovery:
        """Fetch and flatten the field map of ``index``. Never raises."""
        try:
            response = await self._adapter.get_mapping(index)
        except Exception as e:
            logger.warning("Mapping fetch for index %s failed: %s", index, e)
            return SchemaDiscovery(error=str(e))

        discovery = decode_properties(response)
        if not discovery.ok:
            logger.warning("Could not read field map of index %s: %s", index, discovery.error)
        return discovery

    async def choose_date_sort_field(self, index: str) -> str | None:
        discovery = await self.resolve_schema_fields(index)
        return choose_date_sort_field(discovery.properties)

    async def choose_id_sort(self, index: str) -> IdSort:
        discovery = await self.resolve_schema_fields(index)
        return choose_id_sort(discovery.properties)
