"""Lead filter models — The validated set of user filters for one search request."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leadsift.core.exceptions import InvalidFilterError

# Query parameters that control paging and ordering rather than filtering.
RESERVED_PARAMS = frozenset({"limit", "offset", "sort_field", "sort_dir"})

# Parameters whose repeated occurrences are merged into one delimited list.
LIST_PARAMS = frozenset(
    {
        "state_code",
        "state",
        "company_location_country",
        "company_location_region",
        "company_location_locality",
        "company_location_continent",
        "countries",
        "es_id",
        "linked_id",
        "job_title",
        "skills",
    }
)


class FilterSet(BaseModel):
    """User filters for a lead search.

    Every text field is stripped on input; blank values become ``None`` and
    never constrain the query.  Unknown fields are rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    exact: bool = Field(default=False, description="Exact-match mode for attributes that support it")

    # Multi-field text attributes
    contact_full_name: str | None = None
    company_name: str | None = None
    industry: str | None = None
    city: str | None = None
    zip_code: str | None = None
    website: str | None = None
    domain: str | None = None
    job_title: str | None = None
    company: str | None = None
    sub_role: str | None = None

    # Contact channels
    normalized_email: str | None = None
    phone: str | None = None

    # List-valued attributes (comma/semicolon delimited)
    state_code: str | None = None
    state: str | None = None
    company_location_country: str | None = None
    company_location_region: str | None = None
    company_location_locality: str | None = None
    company_location_continent: str | None = None
    countries: str | None = None
    es_id: str | None = None
    linked_id: str | None = None
    skills: str | None = None

    # Numeric ranges (kept as text; unparseable values are ignored at compile time)
    employees_min: str | None = None
    employees_max: str | None = None
    revenue_min: str | None = None
    revenue_max: str | None = None

    @field_validator("exact", mode="before")
    @classmethod
    def _parse_exact(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        if v is None:
            return False
        return str(v).strip() == "1" or str(v).strip().lower() == "true"

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @classmethod
    def from_params(cls, items: Iterable[tuple[str, str]]) -> FilterSet:
        """Build a FilterSet from raw query-string pairs.

        Repeated list-valued keys are joined with ``,``; for other keys the
        first non-blank value wins.  Paging and sort keys are skipped.

        Raises:
            InvalidFilterError: If any key is outside the recognized vocabulary.
        """
        grouped: dict[str, list[str]] = {}
        unknown: list[str] = []
        for key, value in items:
            if key in RESERVED_PARAMS:
                continue
            if key not in cls.model_fields:
                if key not in unknown:
                    unknown.append(key)
                continue
            grouped.setdefault(key, []).append(value)

        if unknown:
            raise InvalidFilterError(sorted(unknown))

        data: dict[str, str] = {}
        for key, values in grouped.items():
            present = [v.strip() for v in values if v and v.strip()]
            if not present:
                continue
            data[key] = ",".join(present) if key in LIST_PARAMS else present[0]
        return cls(**data)

    def is_empty(self) -> bool:
        """True when no attribute constrains the search (``exact`` alone does not)."""
        return all(value is None for name, value in self if name != "exact")
