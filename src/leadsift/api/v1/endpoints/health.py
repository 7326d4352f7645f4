"""Health check endpoints — Service and OpenSearch health."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from leadsift import __version__
from leadsift.adapters.base.adapter import AdapterHealth
from leadsift.api.deps import get_engine
from leadsift.core.engine import LeadSearchEngine

router = APIRouter()


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="LeadSift server version")
    service: str = Field(description="Service name ('leadsift')")
    adapter: str = Field(description="Name of the search adapter")
    index_candidates: list[str] = Field(description="Index names probed, in order")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="System Health Check",
)
async def health_check(
    engine: LeadSearchEngine = Depends(get_engine),
) -> HealthResponse:
    """Basic liveness check; does not contact OpenSearch."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="leadsift",
        adapter=engine.adapter.name,
        index_candidates=engine.index_resolver.candidates(),
    )


@router.get(
    "/health/opensearch",
    response_model=AdapterHealth,
    summary="OpenSearch Health Check",
    description="Cluster health as reported by OpenSearch, with round-trip latency.",
)
async def opensearch_health(
    engine: LeadSearchEngine = Depends(get_engine),
) -> AdapterHealth:
    return await engine.health_check()
