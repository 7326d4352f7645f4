"""LeadSift Python SDK — Async and sync clients for the LeadSift REST API.

Usage::

    # Async
    async with AsyncLeadSiftClient("http://localhost:8080") as client:
        page = await client.search_leads({"city": "Austin", "state_code": "TX"}, limit=50)

    # Sync (wraps async client internally)
    client = LeadSiftClient("http://localhost:8080")
    page = client.search_leads({"normalized_email": "jane@example.com"}, exact=True)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Mapping
from typing import Any, TypeVar, cast

import httpx

_T = TypeVar("_T")

logger = logging.getLogger(__name__)

LeadsPage = dict[str, Any]
"""Leads response dict: ``{"meta": {...}, "data": [...]}``."""

PlanResult = dict[str, Any]
"""Plan response dict: ``{"index", "query", "sort", "from", "size"}``."""


def _build_params(
    filters: Mapping[str, Any] | None,
    *,
    exact: bool,
    limit: int | None,
    offset: int | None,
    sort_field: str | None,
    sort_dir: str | None,
) -> dict[str, str]:
    """Flatten filters into query parameters; list values are comma-joined."""
    params: dict[str, str] = {}
    for key, value in (filters or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            params[key] = ",".join(str(v) for v in value)
        else:
            params[key] = str(value)
    if exact:
        params["exact"] = "1"
    if limit is not None:
        params["limit"] = str(limit)
    if offset is not None:
        params["offset"] = str(offset)
    if sort_field:
        params["sort_field"] = sort_field
    if sort_dir:
        params["sort_dir"] = sort_dir
    return params


class AsyncLeadSiftClient:
    """Async Python client for the LeadSift API.

    Args:
        base_url: LeadSift server URL, e.g. ``"http://localhost:8080"``.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 60.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncLeadSiftClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── Health ──

    async def health(self) -> dict[str, Any]:
        """Check server health."""
        return await self._get("/v1/health")

    async def opensearch_health(self) -> dict[str, Any]:
        """Check OpenSearch cluster health as seen by the server."""
        return await self._get("/v1/health/opensearch")

    # ── Leads ──

    async def search_leads(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        exact: bool = False,
        limit: int | None = None,
        offset: int | None = None,
        sort_field: str | None = None,
        sort_dir: str | None = None,
    ) -> LeadsPage:
        """Search leads.

        Args:
            filters: Filter parameters, e.g. ``{"city": "Austin", "state_code": ["TX", "CA"]}``.
            exact: Use exact matching for attributes that support it.
            limit: Page size (server clamps to [1, 1000]).
            offset: Offset of the first lead.
            sort_field: Explicit sort field.
            sort_dir: ``"asc"`` or ``"desc"``.

        Returns:
            Leads response dict with ``meta`` and ``data``.
        """
        params = _build_params(
            filters, exact=exact, limit=limit, offset=offset, sort_field=sort_field, sort_dir=sort_dir
        )
        return await self._get("/v1/leads", params)

    async def plan(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        exact: bool = False,
        limit: int | None = None,
        offset: int | None = None,
        sort_field: str | None = None,
        sort_dir: str | None = None,
    ) -> PlanResult:
        """Return the compiled OpenSearch query and sort without running the search."""
        params = _build_params(
            filters, exact=exact, limit=limit, offset=offset, sort_field=sort_field, sort_dir=sort_dir
        )
        return await self._get("/v1/leads/plan", params)

    async def get_lead(self, lead_id: str) -> dict[str, Any]:
        """Fetch a single lead by document id."""
        return await self._get(f"/v1/leads/{lead_id}")


class LeadSiftClient:
    """Synchronous Python client for the LeadSift API.

    Wraps :class:`AsyncLeadSiftClient` using ``asyncio.run``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 60.0,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._httpx_kwargs = httpx_kwargs

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        """Run an async coroutine synchronously."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already inside an event loop (e.g. Jupyter): run on a worker thread
            import concurrent.futures

            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    def _make_client(self) -> AsyncLeadSiftClient:
        return AsyncLeadSiftClient(self._base_url, timeout=self._timeout, **self._httpx_kwargs)

    def health(self) -> dict[str, Any]:
        """Check server health."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.health()

        return self._run(_call())

    def search_leads(self, filters: Mapping[str, Any] | None = None, **kwargs: Any) -> LeadsPage:
        """Search leads. See :meth:`AsyncLeadSiftClient.search_leads`."""

        async def _call() -> LeadsPage:
            async with self._make_client() as c:
                return await c.search_leads(filters, **kwargs)

        return self._run(_call())

    def plan(self, filters: Mapping[str, Any] | None = None, **kwargs: Any) -> PlanResult:
        """Compile a search without running it. See :meth:`AsyncLeadSiftClient.plan`."""

        async def _call() -> PlanResult:
            async with self._make_client() as c:
                return await c.plan(filters, **kwargs)

        return self._run(_call())

    def get_lead(self, lead_id: str) -> dict[str, Any]:
        """Fetch a single lead by document id."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.get_lead(lead_id)

        return self._run(_call())
