"""Leads endpoints — Filtered lead search, plan inspection, and single-lead lookup.

Filters arrive as query parameters from a fixed vocabulary (see
``FilterSet``).  Paging and sort parameters are read leniently: bad values
fall back to defaults instead of failing the request.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request

from leadsift.api.deps import get_engine
from leadsift.core.engine import LeadSearchEngine
from leadsift.models.filters import FilterSet
from leadsift.models.query import Pagination, SortRequest
from leadsift.models.response import ErrorResponse, LeadsResponse, PlanResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    422: {"model": ErrorResponse, "description": "Unrecognized filter parameter"},
    500: {
        "model": ErrorResponse,
        "description": (
            "No index found (`tried` lists candidates), query rejected by "
            "OpenSearch (`detail` carries the engine error), or other search failure"
        ),
    },
}


def _parse_request(
    request: Request,
    limit: str | None,
    offset: str | None,
    sort_field: str | None,
    sort_dir: str | None,
) -> tuple[FilterSet, Pagination, SortRequest]:
    filters = FilterSet.from_params(request.query_params.multi_items())
    return filters, Pagination.from_raw(limit, offset), SortRequest.from_raw(sort_field, sort_dir)


@router.get(
    "/leads",
    response_model=LeadsResponse,
    summary="Search Leads",
    description=(
        "Search leads with any combination of filter parameters.\n\n"
        "- `exact=1` switches name/company/location/email/phone filters to exact matching.\n"
        "- List filters (`state_code`, `countries`, ...) accept comma/semicolon separated "
        "values; **every** value must match.\n"
        "- `skills` values must all match.\n"
        "- Without a valid `sort_field`, results are ordered by the newest date field, then id."
    ),
    responses=_ERROR_RESPONSES,
)
async def search_leads(
    request: Request,
    limit: str | None = Query(default=None, description="Page size, clamped to [1, 1000] (default 100)"),
    offset: str | None = Query(default=None, description="Offset, clamped to >= 0 (default 0)"),
    sort_field: str | None = Query(default=None, description="Sort field; must match ^[\\w.@-]+$"),
    sort_dir: str | None = Query(default=None, description="'asc' or 'desc' (default)"),
    engine: LeadSearchEngine = Depends(get_engine),
) -> LeadsResponse:
    """Run a filtered, paginated lead search."""
    filters, pagination, sort = _parse_request(request, limit, offset, sort_field, sort_dir)
    result = await engine.search(filters, pagination, sort)
    return LeadsResponse.from_result(result)


@router.get(
    "/leads/plan",
    response_model=PlanResponse,
    summary="Inspect Lead Search Plan",
    description=(
        "Compile the filters into the OpenSearch query and sort that `/leads` would run, "
        "without executing the search."
    ),
    responses=_ERROR_RESPONSES,
)
async def plan_leads(
    request: Request,
    limit: str | None = Query(default=None),
    offset: str | None = Query(default=None),
    sort_field: str | None = Query(default=None),
    sort_dir: str | None = Query(default=None),
    engine: LeadSearchEngine = Depends(get_engine),
) -> PlanResponse:
    filters, pagination, sort = _parse_request(request, limit, offset, sort_field, sort_dir)
    plan = await engine.plan(filters, pagination, sort)
    return PlanResponse(
        index=plan.index,
        query=plan.query,
        sort=plan.sort_clause(),
        from_=plan.offset,
        size=plan.limit,
    )


@router.get(
    "/leads/{lead_id}",
    summary="Get Lead",
    description="Fetch a single lead by its OpenSearch document id.",
    responses={404: {"model": ErrorResponse, "description": "Lead not found"}, 500: _ERROR_RESPONSES[500]},
)
async def get_lead(
    lead_id: str,
    engine: LeadSearchEngine = Depends(get_engine),
) -> dict:
    return await engine.get_lead(lead_id)
