"""Base search adapter — Abstract interface for the lead document store.

The lead search only reads from the store.  An adapter is responsible for:
  1. Executing paginated searches and exact counts
  2. Probing index existence and fetching index mappings
  3. Fetching individual documents
  4. Reporting health status
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class SearchAdapter(ABC):
    """Abstract base class for lead store adapters.

    Adapters are constructed explicitly and handed to the engine, so tests
    can substitute a double for the real client.  All methods raise
    ``AdapterError`` subclasses on failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'opensearch')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the adapter (connections, pools, etc.)."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Close connections and release resources."""

    @abstractmethod
    async def search(self, index: str, body: dict[str, Any], from_: int, size: int) -> dict[str, Any]:
        """Execute a search request.

        Args:
            index: Index to search.
            body: Request body (``query``, ``sort``, ``track_total_hits``...).
            from_: Offset of the first hit.
            size: Maximum number of hits.

        Returns:
            The raw response body.
        """

    @abstractmethod
    async def count(self, index: str, query: dict[str, Any]) -> int:
        """Return the exact number of documents matching ``query``."""

    @abstractmethod
    async def index_exists(self, index: str) -> bool:
        """Return whether ``index`` exists."""

    @abstractmethod
    async def get_mapping(self, index: str) -> dict[str, Any]:
        """Return the raw mapping response for ``index``."""

    @abstractmethod
    async def fetch_document(self, index: str, doc_id: str) -> dict[str, Any]:
        """Retrieve a single document by its ID.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the search backend."""
