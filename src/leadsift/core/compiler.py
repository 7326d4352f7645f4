"""Query compiler — Translate a ``FilterSet`` into an OpenSearch bool query.

Compilation is pure: no I/O, and the same FilterSet always yields the same
query.  The output is a plain OpenSearch DSL dict::

    {"bool": {"must": [...], "should": [...], "filter": [...]}}

with empty arrays omitted, or ``{"match_all": {}}`` when nothing constrains
the search.

Matching modes
--------------
``exact`` switches text attributes that define an exact form from loose
phrase matching (slop 2, OR'ed across candidate fields, scored under
``must``) to lower-cased ``term`` matching against each candidate field and
its ``.keyword`` sub-field (non-scoring, under ``filter``).  List-valued,
skills and range attributes ignore the flag.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from leadsift.core.fields import (
    DOMAIN_FIELDS,
    EMAIL_EXACT_FIELDS,
    LIST_ATTRIBUTES,
    PHONE_EXACT_FIELDS,
    PHONE_FIELDS,
    RANGE_ATTRIBUTES,
    SKILLS_FIELDS,
    TEXT_ATTRIBUTES,
    TextAttribute,
)
from leadsift.models.filters import FilterSet

logger = logging.getLogger(__name__)

MATCH_ALL: dict[str, Any] = {"match_all": {}}

TEXT_SLOP = 2
TOKEN_SLOP = 1

_LIST_SPLIT_RE = re.compile(r"[;,]+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


# ── Leaf clauses ─────────────────────────────────────────────────────────────


def term(field: str, value: Any) -> dict[str, Any]:
    return {"term": {field: value}}


def phrase(field: str, value: str, slop: int | None = None) -> dict[str, Any]:
    options: dict[str, Any] = {"query": value}
    if slop is not None:
        options["slop"] = slop
    return {"match_phrase": {field: options}}


def match(field: str, value: str) -> dict[str, Any]:
    return {"match": {field: {"query": value}}}


def wildcard(field: str, pattern: str) -> dict[str, Any]:
    return {"wildcard": {field: pattern}}


def numeric_range(field: str, **bounds: float) -> dict[str, Any]:
    return {"range": {field: bounds}}


def any_of(clauses: list[dict[str, Any]]) -> dict[str, Any]:
    """A bool group that matches when at least one clause matches."""
    return {"bool": {"should": clauses, "minimum_should_match": 1}}


# ── Input normalization ──────────────────────────────────────────────────────


def split_tokens(value: str | None) -> list[str]:
    """Split a comma/semicolon-delimited value into trimmed, non-empty tokens."""
    if not value:
        return []
    return [tok.strip() for tok in _LIST_SPLIT_RE.split(value) if tok.strip()]


def normalize_domain(value: str) -> str:
    """``https://www.Example.com/path`` -> ``example.com``."""
    domain = value.strip().lower()
    domain = re.sub(r"^https?://", "", domain)
    domain = re.sub(r"^www\.", "", domain)
    return domain.split("/", 1)[0]


def phone_digits(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value)


def parse_number(value: str | None) -> int | float | None:
    """Parse a finite decimal number; ``None`` for blank or non-numeric input.

    Only plain decimal and exponent notation is accepted (no ``1_000``).
    """
    if value is None or not _NUMBER_RE.fullmatch(value.strip()):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _exact_fields(fields: tuple[str, ...]) -> list[str]:
    """Each field followed by its ``.keyword`` variant, de-duplicated."""
    out: list[str] = []
    for f in fields:
        out.append(f)
        if not f.endswith(".keyword"):
            out.append(f"{f}.keyword")
    return list(dict.fromkeys(out))


# ── Compiler ─────────────────────────────────────────────────────────────────


class QueryCompiler:
    """Compiles one FilterSet into a bool query.

    A fresh instance per compilation holds the three clause arrays; use
    :func:`compile_query` rather than instantiating directly.
    """

    def __init__(self, filters: FilterSet) -> None:
        self.filters = filters
        self.exact = filters.exact
        self.must: list[dict[str, Any]] = []
        self.should: list[dict[str, Any]] = []
        self.filter: list[dict[str, Any]] = []

    def compile(self) -> dict[str, Any]:
        f = self.filters
        if f.is_empty():
            return {"match_all": {}}

        for name in ("contact_full_name", "company_name", "industry", "city", "zip_code", "website"):
            self._add_text(getattr(f, name), TEXT_ATTRIBUTES[name])

        self._add_domain(f.domain)
        self._add_email(f.normalized_email)
        self._add_phone(f.phone)

        for name in (
            "state_code",
            "state",
            "company_location_country",
            "company_location_region",
            "company_location_locality",
            "company_location_continent",
        ):
            self._add_list(getattr(f, name), LIST_ATTRIBUTES[name])

        # job_title constrains both as free text and as a token list
        self._add_text(f.job_title, TEXT_ATTRIBUTES["job_title"])
        self._add_list(f.job_title, LIST_ATTRIBUTES["job_title"])

        self._add_text(f.company, TEXT_ATTRIBUTES["company"])
        for name in ("es_id", "linked_id", "countries"):
            self._add_list(getattr(f, name), LIST_ATTRIBUTES[name])

        self._add_skills(f.skills)
        self._add_text(f.sub_role, TEXT_ATTRIBUTES["sub_role"])

        for name, (field, op) in RANGE_ATTRIBUTES.items():
            self._add_range(name, getattr(f, name), field, op)

        return self._assemble()

    def _assemble(self) -> dict[str, Any]:
        if not (self.must or self.should or self.filter):
            return {"match_all": {}}

        bool_query: dict[str, Any] = {}
        if self.must:
            bool_query["must"] = self.must
        if self.should:
            bool_query["should"] = self.should
        if self.filter:
            bool_query["filter"] = self.filter
        return {"bool": bool_query}

    # ── Attribute handlers ───────────────────────────────────────────────

    def _add_text(self, value: str | None, attribute: TextAttribute) -> None:
        if not value:
            return
        if self.exact and attribute.allow_exact:
            lowered = value.lower()
            self.filter.append(any_of([term(f, lowered) for f in _exact_fields(attribute.fields)]))
            return
        self.must.append(any_of([phrase(f, value, TEXT_SLOP) for f in attribute.fields]))

    def _add_domain(self, value: str | None) -> None:
        if not value:
            return
        domain = normalize_domain(value)
        if not domain:
            return
        primary, linked_raw, plain, merged = DOMAIN_FIELDS
        self.should.extend(
            [
                term(primary, domain),
                phrase(primary, domain),
                phrase(linked_raw, domain),
                phrase(plain, domain),
                wildcard(primary, f"*{domain}*"),
                term(merged, domain),
            ]
        )

    def _add_email(self, value: str | None) -> None:
        if not value:
            return
        email = value.lower()
        if self.exact:
            self.filter.append(any_of([term(f, email) for f in EMAIL_EXACT_FIELDS]))
            return
        self.filter.append(
            any_of(
                [
                    term("linked_normalized_email", email),
                    term("merged_normalized_email", email),
                    phrase("linked_normalized_email", email),
                    match("normalized_email", email),
                ]
            )
        )

    def _add_phone(self, value: str | None) -> None:
        if not value:
            return
        digits = phone_digits(value)
        if not digits:
            if not self.exact:
                self._add_text(value, TextAttribute(PHONE_FIELDS, allow_exact=False))
            return
        if self.exact:
            self.filter.append(any_of([term(f, digits) for f in PHONE_EXACT_FIELDS]))
        else:
            self.filter.append(any_of([phrase(f, value, TOKEN_SLOP) for f in PHONE_FIELDS]))

    def _add_list(self, value: str | None, fields: tuple[str, ...]) -> None:
        # One group per token, all required: "TX,CA" means TX and CA.
        for token in split_tokens(value):
            clauses: list[dict[str, Any]] = []
            for f in fields:
                clauses.append(term(f, token.lower()))
                clauses.append(phrase(f, token, TOKEN_SLOP))
            self.filter.append(any_of(clauses))

    def _add_skills(self, value: str | None) -> None:
        # Every token must match in every skills field.
        for token in split_tokens(value):
            self.must.extend(phrase(f, token, TOKEN_SLOP) for f in SKILLS_FIELDS)

    def _add_range(self, name: str, value: str | None, field: str, op: str) -> None:
        if value is None:
            return
        number = parse_number(value)
        if number is None:
            logger.debug("Ignoring non-numeric %s=%r", name, value)
            return
        self.filter.append(numeric_range(field, **{op: number}))


def compile_query(filters: FilterSet) -> dict[str, Any]:
    """Compile ``filters`` into an OpenSearch query dict."""
    return QueryCompiler(filters).compile()
