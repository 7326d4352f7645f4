"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from leadsift.adapters.base.adapter import AdapterHealth, SearchAdapter
from leadsift.config.settings import Settings
from leadsift.core.engine import LeadSearchEngine

from factories import make_hit, make_search_response


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with a primary and a fallback index."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        opensearch={
            "hosts": ["http://opensearch.test:9200"],
            "leads_index": "leads_v3",
            "fallback_indexes": "leads_v2, leads",
            "default_indexes": ["leads", "merged_index_v1"],
        },
    )


@pytest.fixture
def mapping_response() -> dict[str, Any]:
    """Mapping of an index that has a date field and a domain id field."""
    return {
        "leads_v3": {
            "mappings": {
                "properties": {
                    "created_at": {"type": "date"},
                    "linked_id": {"type": "keyword"},
                    "linked_Locality": {
                        "type": "text",
                        "fields": {"keyword": {"type": "keyword"}},
                    },
                }
            }
        }
    }


@pytest.fixture
def adapter(mapping_response: dict[str, Any]) -> MagicMock:
    """Search adapter double; async methods become AsyncMocks."""
    mock = MagicMock(spec=SearchAdapter)
    mock.name = "opensearch"
    mock.index_exists.return_value = True
    mock.get_mapping.return_value = mapping_response
    mock.search.return_value = make_search_response(
        [make_hit("doc_1", city="Austin", linked_id="L-1")],
    )
    mock.count.return_value = 1
    mock.fetch_document.return_value = make_hit("doc_1", city="Austin")
    mock.health_check.return_value = AdapterHealth(status="healthy", latency_ms=2)
    return mock


@pytest.fixture
def engine(settings: Settings, adapter: MagicMock) -> LeadSearchEngine:
    return LeadSearchEngine(settings, adapter=adapter)
