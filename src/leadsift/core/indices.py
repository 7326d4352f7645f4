"""Index resolver — Pick the physical index to search from an ordered candidate list."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from leadsift.adapters.base.adapter import SearchAdapter
from leadsift.config.settings import OpenSearchSettings

logger = logging.getLogger(__name__)


class IndexResolution(BaseModel):
    """Result of index resolution.

    ``index`` is None when no candidate exists; ``tried`` always lists every
    candidate in probe order.
    """

    index: str | None = None
    tried: list[str] = Field(default_factory=list)


class IndexResolver:
    """Probes configured and default index names in order.

    Candidates are the primary index, then the comma-separated fallbacks,
    then the built-in defaults, de-duplicated in first-seen order.
    """

    def __init__(self, adapter: SearchAdapter, settings: OpenSearchSettings) -> None:
        self._adapter = adapter
        self._settings = settings

    def candidates(self) -> list[str]:
        return self._settings.index_candidates()

    async def resolve_index(self) -> IndexResolution:
        """Return the first existing candidate.

        A failed probe counts as "does not exist" and moves on to the next
        candidate.
        """
        tried = self.candidates()
        for name in tried:
            try:
                exists = await self._adapter.index_exists(name)
            except Exception as e:
                logger.warning("Error checking index existence for %s: %s", name, e)
                continue
            if exists:
                return IndexResolution(index=name, tried=tried)
        logger.error("No OpenSearch index found. Tried: %s", tried)
        return IndexResolution(index=None, tried=tried)
