"""LeadSift Engine — Orchestrates one paginated lead search.

The engine manages the request lifecycle:
  1. Index Resolution: first existing configured/default index
  2. Query Compilation: FilterSet → OpenSearch bool query
  3. Sort Selection: validated caller field, or discovered date + id fields
  4. Execution: one retry without sort on failure
  5. Total Reconciliation: exact count when the engine reports a lower bound
  6. Response Assembly: ``{_id, ...source}`` records
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from leadsift.adapters.base.adapter import AdapterHealth, SearchAdapter
from leadsift.adapters.base.exceptions import AdapterError, DocumentNotFoundError, QueryError
from leadsift.adapters.opensearch.adapter import OpenSearchAdapter
from leadsift.core.compiler import compile_query
from leadsift.core.exceptions import (
    IndexUnavailableError,
    InternalSearchError,
    LeadNotFoundError,
    SearchEngineError,
)
from leadsift.core.indices import IndexResolver
from leadsift.core.schema import FieldResolver, choose_date_sort_field, choose_id_sort
from leadsift.models.query import Pagination, SearchPlan, SortField, SortRequest
from leadsift.models.response import SearchResult

if TYPE_CHECKING:
    from leadsift.config.settings import Settings
    from leadsift.models.filters import FilterSet

logger = logging.getLogger(__name__)

# Engine error types that mean the query itself was rejected.
STRUCTURAL_ERROR_TYPES = frozenset({"search_phase_execution_exception", "query_shard_exception"})


def extract_total(hits: dict[str, Any]) -> tuple[int, bool]:
    """Read ``hits.total`` as ``(count, is_lower_bound)``.

    The engine reports either a bare number or ``{"value": n, "relation": "eq"|"gte"}``.
    """
    raw = hits.get("total")
    if raw is None:
        return 0, False
    if isinstance(raw, dict):
        estimate = str(raw.get("relation", "")).lower() == "gte"
        return _to_int(raw.get("value")), estimate
    return _to_int(raw), False


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def shape_record(hit: dict[str, Any]) -> dict[str, Any]:
    """Document id first, then the source attributes (which win on collision)."""
    return {"_id": hit.get("_id"), **(hit.get("_source") or {})}


class LeadSearchEngine:
    """Core orchestrator for lead searches.

    The search adapter is injected (or built from settings) so tests can
    pass a double; the engine holds no per-request state.

    Attributes:
        settings: Application configuration.
        adapter: Search backend adapter.
        index_resolver: Picks the index to search.
        field_resolver: Discovers sort fields from the index mapping.
    """

    def __init__(self, settings: Settings, adapter: SearchAdapter | None = None) -> None:
        self.settings = settings
        if adapter is None:
            os_settings = settings.opensearch
            adapter = OpenSearchAdapter(
                hosts=os_settings.hosts,
                username=os_settings.username,
                password=os_settings.password,
                verify_certs=os_settings.verify_certs,
                request_timeout=os_settings.request_timeout,
                **os_settings.extra,
            )
        self.adapter = adapter
        self.index_resolver = IndexResolver(adapter, settings.opensearch)
        self.field_resolver = FieldResolver(adapter)

    async def initialize(self) -> None:
        await self.adapter.initialize()
        logger.info("LeadSift engine initialized (adapter: %s)", self.adapter.name)

    async def shutdown(self) -> None:
        await self.adapter.shutdown()
        logger.info("LeadSift engine shut down")

    async def health_check(self) -> AdapterHealth:
        return await self.adapter.health_check()

    # ──────────────────────────────────────────────────────────────────────
    # Planning
    # ──────────────────────────────────────────────────────────────────────

    async def _resolve_index(self) -> str:
        resolution = await self.index_resolver.resolve_index()
        if resolution.index is None:
            raise IndexUnavailableError(resolution.tried)
        return resolution.index

    async def resolve_sort(self, index: str, sort: SortRequest) -> list[SortField]:
        """Choose the sort keys for a search on ``index``.

        A valid caller field is used verbatim.  Otherwise: the newest mapped
        date field (missing values last), then a sortable id field.  An empty
        list means intrinsic document order.
        """
        if sort.is_valid:
            return [SortField(field=sort.field, order=sort.direction)]
        if sort.field is not None:
            logger.warning("Ignoring invalid sort_field from request: %r", sort.field)

        discovery = await self.field_resolver.resolve_schema_fields(index)
        if not discovery.ok:
            logger.info("Sorting %s in document order: %s", index, discovery.error)

        keys: list[SortField] = []
        date_field = choose_date_sort_field(discovery.properties)
        if date_field:
            keys.append(SortField(field=date_field, order="desc", missing_last=True))
        id_sort = choose_id_sort(discovery.properties)
        if id_sort.sortable:
            keys.append(SortField(field=id_sort.field, order="desc"))
        return keys

    async def plan(
        self,
        filters: FilterSet,
        pagination: Pagination | None = None,
        sort: SortRequest | None = None,
    ) -> SearchPlan:
        """Build the search plan without executing it.

        Raises:
            IndexUnavailableError: If no candidate index exists.
        """
        pagination = pagination or Pagination()
        index = await self._resolve_index()
        query = compile_query(filters)
        sort_keys = await self.resolve_sort(index, sort or SortRequest())
        return SearchPlan(
            index=index,
            query=query,
            sort=sort_keys,
            offset=pagination.offset,
            limit=pagination.limit,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Execution
    # ──────────────────────────────────────────────────────────────────────

    async def search(
        self,
        filters: FilterSet,
        pagination: Pagination | None = None,
        sort: SortRequest | None = None,
    ) -> SearchResult:
        """Run a paginated, sorted lead search.

        Raises:
            IndexUnavailableError: If no candidate index exists.
            SearchEngineError: If the engine rejects the query after the retry.
            InternalSearchError: For any other failure after the retry.
        """
        plan = await self.plan(filters, pagination, sort)
        return await self.execute(plan)

    async def execute(self, plan: SearchPlan) -> SearchResult:
        """Execute a plan, reconcile its total, and shape the records."""
        start_time = time.monotonic()
        response = await self._search_with_retry(plan)

        hits = response.get("hits") or {}
        total, estimate = extract_total(hits)
        if estimate:
            total, estimate = await self._reconcile_total(plan, total)

        records = [shape_record(hit) for hit in hits.get("hits") or []]
        logger.info(
            "Lead search on %s: %d of %d records (from=%d) in %d ms",
            plan.index,
            len(records),
            total,
            plan.offset,
            int((time.monotonic() - start_time) * 1000),
        )
        return SearchResult(
            index=plan.index,
            total=total,
            total_is_estimate=estimate,
            offset=plan.offset,
            limit=plan.limit,
            records=records,
        )

    async def _search_with_retry(self, plan: SearchPlan) -> dict[str, Any]:
        try:
            return await self.adapter.search(plan.index, plan.body(), plan.offset, plan.limit)
        except AdapterError as e:
            logger.warning("Search on %s failed, retrying without sort: %s", plan.index, e)

        try:
            return await self.adapter.search(plan.index, plan.body(with_sort=False), plan.offset, plan.limit)
        except AdapterError as e:
            logger.error("Search retry without sort failed on %s: %s", plan.index, e)
            if isinstance(e, QueryError) and e.error_type in STRUCTURAL_ERROR_TYPES:
                raise SearchEngineError("OpenSearch search error", detail=e.detail) from e
            raise InternalSearchError("Server search error") from e

    async def _reconcile_total(self, plan: SearchPlan, estimate: int) -> tuple[int, bool]:
        """Replace a lower-bound total with an exact count; keep the estimate on failure."""
        try:
            exact = await self.adapter.count(plan.index, plan.query)
        except AdapterError as e:
            logger.warning("Exact count failed, keeping estimated total %d: %s", estimate, e)
            return estimate, True
        return exact, False

    # ──────────────────────────────────────────────────────────────────────
    # Single lead
    # ──────────────────────────────────────────────────────────────────────

    async def get_lead(self, lead_id: str) -> dict[str, Any]:
        """Fetch one lead by document id from the resolved index.

        Raises:
            IndexUnavailableError: If no candidate index exists.
            LeadNotFoundError: If the document does not exist.
            InternalSearchError: For any other backend failure.
        """
        index = await self._resolve_index()
        try:
            document = await self.adapter.fetch_document(index, lead_id)
        except DocumentNotFoundError as e:
            raise LeadNotFoundError(f"Lead '{lead_id}' not found") from e
        except AdapterError as e:
            logger.error("Fetching lead %s from %s failed: %s", lead_id, index, e)
            raise InternalSearchError("Server error") from e
        return shape_record(document)
