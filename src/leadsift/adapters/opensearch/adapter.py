"""OpenSearch adapter — Read access to lead indices in OpenSearch (v2+).

Uses the async ``opensearch-py`` client.  Every call carries an explicit
``request_timeout`` so a stalled cluster cannot hold a request forever.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

from opensearchpy import AsyncOpenSearch
from opensearchpy import exceptions as os_exceptions

from leadsift.adapters.base.adapter import AdapterHealth, SearchAdapter
from leadsift.adapters.base.exceptions import (
    ConnectionError,
    DocumentNotFoundError,
    QueryError,
)

logger = logging.getLogger(__name__)


def _to_adapter_error(e: Exception, action: str) -> Exception:
    """Translate an ``opensearchpy`` exception into an adapter exception."""
    if isinstance(e, os_exceptions.ConnectionError):
        return ConnectionError(f"OpenSearch {action} failed: {e}")

    error_type: str | None = None
    detail: Any = None
    if isinstance(e, os_exceptions.TransportError):
        info = e.info
        if isinstance(info, dict) and isinstance(info.get("error"), dict):
            detail = info["error"]
            error_type = detail.get("type")
        elif isinstance(e.error, str):
            error_type = e.error
    return QueryError(f"OpenSearch {action} failed: {e}", error_type=error_type, detail=detail)


class OpenSearchAdapter(SearchAdapter):
    """Search adapter for OpenSearch (v2+).

    Args:
        hosts: List of OpenSearch node URLs.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        request_timeout: Per-call timeout in seconds.
        client: Pre-built ``AsyncOpenSearch`` (or compatible) client; skips
            client construction in ``initialize``.
        **kwargs: Additional keyword arguments forwarded to ``AsyncOpenSearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        request_timeout: float = 30.0,
        client: Any = None,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["http://localhost:9200"]
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._request_timeout = request_timeout
        self._extra_kwargs = kwargs
        self._client: Any = client

    @property
    def name(self) -> str:
        return "opensearch"

    async def initialize(self) -> None:
        """Create the ``AsyncOpenSearch`` client and log the cluster it reaches.

        An unreachable cluster is logged but not fatal: index resolution
        reports it per request.
        """
        if self._client is None:
            client_kwargs: dict[str, Any] = {
                "hosts": self._hosts,
                "verify_certs": self._verify_certs,
                "ssl_show_warn": False,
                "timeout": self._request_timeout,
            }
            if self._username and self._password:
                client_kwargs["http_auth"] = (self._username, self._password)
            client_kwargs.update(self._extra_kwargs)
            self._client = AsyncOpenSearch(**client_kwargs)

        try:
            info = await self._client.info(request_timeout=self._request_timeout)
            version = info.get("version", {}).get("number", "unknown")
            cluster = info.get("cluster_name", "unknown")
            logger.info("Connected to OpenSearch cluster: %s (v%s)", cluster, version)
        except Exception as e:
            logger.warning("OpenSearch is not reachable at startup: %s", e)

    async def shutdown(self) -> None:
        """Close the OpenSearch client."""
        if self._client:
            await self._client.close()
            self._client = None

    def _require_client(self) -> Any:
        if not self._client:
            raise ConnectionError("OpenSearch client not initialized.")
        return self._client

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, index: str, body: dict[str, Any], from_: int, size: int) -> dict[str, Any]:
        """Execute a search request against ``index``."""
        client = self._require_client()
        try:
            start = time.monotonic()
            response = await client.search(
                index=index,
                body=body,
                from_=from_,
                size=size,
                request_timeout=self._request_timeout,
            )
            logger.debug(
                "OpenSearch search on %s took %d ms (engine %s ms)",
                index,
                int((time.monotonic() - start) * 1000),
                response.get("took", "?"),
            )
            return dict(response)
        except Exception as e:
            raise _to_adapter_error(e, "search") from e

    async def count(self, index: str, query: dict[str, Any]) -> int:
        """Return the exact number of documents in ``index`` matching ``query``."""
        client = self._require_client()
        try:
            response = await client.count(
                index=index,
                body={"query": query},
                request_timeout=self._request_timeout,
            )
        except Exception as e:
            raise _to_adapter_error(e, "count") from e

        count = response.get("count") if isinstance(response, dict) else None
        if not isinstance(count, int):
            raise QueryError(f"OpenSearch count returned no count: {response!r}")
        return count

    # ── Index metadata ───────────────────────────────────────────────────

    async def index_exists(self, index: str) -> bool:
        """Return whether ``index`` exists."""
        client = self._require_client()
        try:
            return bool(await client.indices.exists(index=index, request_timeout=self._request_timeout))
        except Exception as e:
            raise _to_adapter_error(e, "index probe") from e

    async def get_mapping(self, index: str) -> dict[str, Any]:
        """Return the raw mapping response for ``index``."""
        client = self._require_client()
        try:
            return dict(await client.indices.get_mapping(index=index, request_timeout=self._request_timeout))
        except Exception as e:
            raise _to_adapter_error(e, "mapping fetch") from e

    async def fetch_document(self, index: str, doc_id: str) -> dict[str, Any]:
        """Retrieve a single document by ID."""
        client = self._require_client()
        try:
            response = await client.get(index=index, id=doc_id, request_timeout=self._request_timeout)
            return dict(response)
        except os_exceptions.NotFoundError as e:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found.") from e
        except Exception as e:
            raise _to_adapter_error(e, "document fetch") from e

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Check OpenSearch cluster health."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = await self._client.cluster.health(request_timeout=self._request_timeout)
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return AdapterHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))
