"""Search request models — Pagination, sort requests, and the compiled search plan."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, Field

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000

# Sort field names may only contain word characters, dots, '@' and '-'.
_SORT_FIELD_RE = re.compile(r"[\w.@-]+", re.ASCII)
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _parse_int(raw: Any) -> int | None:
    """Parse the leading integer of ``raw``; ``None`` if there is none."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT_RE.match(str(raw))
    return int(match.group(1)) if match else None


def is_valid_sort_field(name: str | None) -> bool:
    """Whether ``name`` is safe to use verbatim as a sort field."""
    return bool(name) and _SORT_FIELD_RE.fullmatch(name) is not None


class Pagination(BaseModel):
    """Clamped paging window."""

    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Page size")
    offset: int = Field(default=0, ge=0, description="Offset of the first record")

    @classmethod
    def from_raw(cls, limit: Any = None, offset: Any = None) -> Pagination:
        """Build a window from raw query values.

        ``limit`` is clamped to [1, 1000] and ``offset`` to >= 0.  Missing or
        non-numeric input falls back to the defaults (100 / 0).
        """
        parsed_limit = _parse_int(limit)
        parsed_offset = _parse_int(offset)
        return cls(
            limit=DEFAULT_LIMIT if parsed_limit is None else max(1, min(MAX_LIMIT, parsed_limit)),
            offset=0 if parsed_offset is None else max(0, parsed_offset),
        )


class SortRequest(BaseModel):
    """Caller-requested ordering, not yet validated against the allow-list."""

    field: str | None = Field(default=None, description="Requested sort field")
    direction: Literal["asc", "desc"] = Field(default="desc", description="Requested sort direction")

    @classmethod
    def from_raw(cls, field: str | None = None, direction: str | None = None) -> SortRequest:
        """Anything other than ``asc`` (case-insensitive) means descending."""
        return cls(
            field=field,
            direction="asc" if (direction or "desc").strip().lower() == "asc" else "desc",
        )

    @property
    def is_valid(self) -> bool:
        return is_valid_sort_field(self.field)


class SortField(BaseModel):
    """One sort key of a search plan."""

    field: str
    order: Literal["asc", "desc"] = "desc"
    missing_last: bool = Field(default=False, description="Sort documents without the field last")

    def to_dsl(self) -> dict[str, Any]:
        options: dict[str, Any] = {"order": self.order}
        if self.missing_last:
            options["missing"] = "_last"
        return {self.field: options}


class SearchPlan(BaseModel):
    """Everything needed to run one paginated lead search.

    An empty ``sort`` means intrinsic document order (``_doc``).
    """

    index: str
    query: dict[str, Any]
    sort: list[SortField] = Field(default_factory=list)
    offset: int = 0
    limit: int = DEFAULT_LIMIT

    def sort_clause(self) -> list[Any]:
        if not self.sort:
            return ["_doc"]
        return [s.to_dsl() for s in self.sort]

    def body(self, with_sort: bool = True) -> dict[str, Any]:
        """Search request body; exact total tracking is always on."""
        body: dict[str, Any] = {"query": self.query, "track_total_hits": True}
        if with_sort:
            body["sort"] = self.sort_clause()
        return body
