"""API v1 Router — Lead search and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from leadsift.api.v1.endpoints.health import router as health_router
from leadsift.api.v1.endpoints.leads import router as leads_router

router = APIRouter(tags=["v1"])
router.include_router(leads_router)
router.include_router(health_router)
