"""Lead search response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """Outcome of one lead search, before HTTP shaping."""

    index: str = Field(description="Index that was searched")
    total: int = Field(description="Exact total when available, otherwise the engine's lower bound")
    total_is_estimate: bool = Field(default=False, description="True if ``total`` is a lower bound")
    offset: int
    limit: int
    records: list[dict[str, Any]] = Field(default_factory=list, description="``{_id, ...source}`` records")


class ResponseMeta(BaseModel):
    """Paging metadata of a leads response."""

    model_config = ConfigDict(populate_by_name=True)

    index: str = Field(description="Index that was searched")
    total: int = Field(description="Total number of matching leads")
    from_: int = Field(alias="from", description="Offset of the first returned lead")
    size: int = Field(description="Requested page size")


class LeadsResponse(BaseModel):
    """Body of ``GET /v1/leads``."""

    meta: ResponseMeta
    data: list[dict[str, Any]] = Field(default_factory=list, description="Matching leads")

    @classmethod
    def from_result(cls, result: SearchResult) -> LeadsResponse:
        return cls(
            meta=ResponseMeta(index=result.index, total=result.total, from_=result.offset, size=result.limit),
            data=result.records,
        )


class PlanResponse(BaseModel):
    """Body of ``GET /v1/leads/plan`` — the compiled search, not executed."""

    model_config = ConfigDict(populate_by_name=True)

    index: str = Field(description="Index the search would run against")
    query: dict[str, Any] = Field(description="Compiled OpenSearch query")
    sort: list[Any] = Field(description="Sort clause")
    from_: int = Field(alias="from", description="Offset")
    size: int = Field(description="Page size")


class ErrorResponse(BaseModel):
    """Error body; optional fields are only present for the failures that define them."""

    message: str
    tried: list[str] | None = None
    detail: Any = None
    unknown: list[str] | None = None
