"""Candidate field catalog.

Lead records come from several data lineages (``linked_*``, ``merged_*`` and
plain names) that store the same attribute under different field names.
Each tuple below lists every field one logical attribute may live in; the
compiler ORs across all of them.
"""

from __future__ import annotations

from typing import NamedTuple


class TextAttribute(NamedTuple):
    fields: tuple[str, ...]
    allow_exact: bool = True


# ── Multi-field text attributes ──────────────────────────────────────────────

TEXT_ATTRIBUTES: dict[str, TextAttribute] = {
    "contact_full_name": TextAttribute(
        (
            "linked_normalized_full_name",
            "linked_normalized_full_name.keyword",
            "linked_Full_name",
            "linked_Full_name.keyword",
            "merged_normalized_full_name",
            "merged_normalized_full_name.keyword",
            "contact_full_name",
            "contact_name",
            "linked_First_Name",
            "linked_Last_Name",
        )
    ),
    "company_name": TextAttribute(
        (
            "linked_Company_Name",
            "linked_Company_Name.keyword",
            "linked_normalized_company_name",
            "merged_Company",
            "merged_normalized_company_name",
            "company",
        )
    ),
    "industry": TextAttribute(
        (
            "linked_Company_Industry",
            "linked_Company_Industry.keyword",
            "linked_Industry",
            "linked_Industry_2",
            "industry",
            "job_title",
            "linked_Job_title",
        )
    ),
    "city": TextAttribute(
        (
            "linked_Locality",
            "linked_Locality.keyword",
            "merged_City",
            "company_location_locality",
            "city",
        )
    ),
    "zip_code": TextAttribute(("linked_Postal_Code", "zip", "zip_code", "merged_Zip")),
    "website": TextAttribute(
        (
            "linked_Company_Website",
            "linked_normalized_company_website",
            "website",
            "merged_normalized_website",
            "merged_Web_Address",
        )
    ),
    "job_title": TextAttribute(
        ("linked_Job_title", "job_title", "merged_Title_Full", "merged_Title_Full.keyword")
    ),
    "company": TextAttribute(("merged_Company", "linked_Company_Name", "company", "merged_Name")),
    "sub_role": TextAttribute(("linked_Sub_Role", "sub_role"), allow_exact=False),
}

# ── List-valued attributes ───────────────────────────────────────────────────

LIST_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    "state_code": (
        "linked_normalized_state",
        "linked_normalized_state.keyword",
        "merged_State",
        "linked_state_hash",
    ),
    "state": ("linked_normalized_state", "merged_State"),
    "company_location_country": (
        "linked_Location_Country",
        "linked_Countries",
        "merged_Country",
        "company_location_country",
    ),
    "company_location_region": (
        "linked_region",
        "linked_Location",
        "company_location_region",
        "merged_State",
        "merged_Region",
    ),
    "company_location_locality": ("linked_Locality", "company_location_locality", "merged_City"),
    "company_location_continent": ("linked_Location_Continent", "company_location_continent"),
    "job_title": ("linked_Job_title", "job_title", "merged_Title_Full"),
    "es_id": ("es_id", "linked_id", "merged_id"),
    "linked_id": ("linked_id", "merged_id"),
    "countries": ("linked_Countries", "merged_Country"),
}

# ── Special-cased attributes ─────────────────────────────────────────────────

DOMAIN_FIELDS = (
    "linked_normalized_company_website",
    "linked_Company_Website",
    "website",
    "merged_normalized_website",
)

EMAIL_EXACT_FIELDS = (
    "linked_normalized_email",
    "linked_normalized_email.keyword",
    "merged_normalized_email",
    "merged_normalized_email.keyword",
    "normalized_email",
    "normalized_email.keyword",
)

PHONE_EXACT_FIELDS = (
    "linked_normalized_phone",
    "linked_normalized_phone.keyword",
    "merged_normalized_phone",
    "merged_normalized_phone.keyword",
    "linked_Mobile",
    "merged_Phone",
)

PHONE_FIELDS = (
    "linked_Mobile",
    "linked_Phone_numbers",
    "linked_normalized_phone",
    "merged_Phone",
    "merged_Telephone_Number",
)

SKILLS_FIELDS = ("linked_Skills", "skills")

# Numeric range parameters: (target field, bound operator)
RANGE_ATTRIBUTES: dict[str, tuple[str, str]] = {
    "employees_min": ("employees", "gte"),
    "employees_max": ("employees", "lte"),
    "revenue_min": ("min_revenue", "gte"),
    "revenue_max": ("revenue_max", "lte"),
}

# ── Sort discovery ───────────────────────────────────────────────────────────

DATE_SORT_CANDIDATES = (
    "linked_Last_Updated",
    "linked_Last_Updated.keyword",
    "linked.Last_Updated",
    "linked.last_updated",
    "created_at",
    "createdAt",
    "@timestamp",
    "created_date",
    "created",
)

ID_SORT_CANDIDATES = ("linked_id", "id")
