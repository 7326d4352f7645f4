"""Error responses — Map lead search exceptions to JSON error bodies.

Every search failure is a 500 with a generic ``message``; only engine
rejections of the query carry the engine's ``detail``, and only index
resolution failures carry the ``tried`` candidate list.
"""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from leadsift.core.exceptions import (
    IndexUnavailableError,
    InvalidFilterError,
    LeadNotFoundError,
    LeadSearchError,
    SearchEngineError,
)
from leadsift.models.response import ErrorResponse

logger = logging.getLogger(__name__)


def _json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def lead_search_exception_handler(request: Request, exc: LeadSearchError) -> JSONResponse:
    """Handle every ``LeadSearchError`` raised by an endpoint."""
    if isinstance(exc, IndexUnavailableError):
        return _json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(message="No OpenSearch index found", tried=exc.tried),
        )
    if isinstance(exc, SearchEngineError):
        return _json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(message=str(exc), detail=exc.detail),
        )
    if isinstance(exc, LeadNotFoundError):
        return _json(status.HTTP_404_NOT_FOUND, ErrorResponse(message=str(exc)))
    if isinstance(exc, InvalidFilterError):
        return _json(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ErrorResponse(message="Unrecognized filter parameters", unknown=exc.unknown),
        )
    return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponse(message=str(exc) or "Server error"))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the traceback, return a generic message."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponse(message="Server error"))
