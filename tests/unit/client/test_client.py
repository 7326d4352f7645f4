"""Tests for the LeadSift Python SDK, served in-process over ASGI."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi import FastAPI

from leadsift.api.app import create_app
from leadsift.api.deps import set_engine
from leadsift.client import AsyncLeadSiftClient, LeadSiftClient
from leadsift.client.client import _build_params
from leadsift.config.settings import Settings
from leadsift.core.engine import LeadSearchEngine


@pytest.fixture
def app(settings: Settings, adapter: MagicMock) -> Iterator[FastAPI]:
    app = create_app(settings, adapter=adapter)
    set_engine(LeadSearchEngine(settings, adapter=adapter))
    yield app
    set_engine(None)


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncLeadSiftClient]:
    async with AsyncLeadSiftClient("http://leadsift.test", transport=httpx.ASGITransport(app=app)) as c:
        yield c


class TestBuildParams:
    def test_flattening(self) -> None:
        params = _build_params(
            {"city": "Austin", "state_code": ["TX", "CA"], "phone": None},
            exact=True,
            limit=50,
            offset=0,
            sort_field="created_at",
            sort_dir="asc",
        )
        assert params == {
            "city": "Austin",
            "state_code": "TX,CA",
            "exact": "1",
            "limit": "50",
            "offset": "0",
            "sort_field": "created_at",
            "sort_dir": "asc",
        }

    def test_defaults_are_omitted(self) -> None:
        params = _build_params(None, exact=False, limit=None, offset=None, sort_field=None, sort_dir=None)
        assert params == {}


class TestAsyncClient:
    async def test_health(self, client: AsyncLeadSiftClient) -> None:
        data = await client.health()
        assert data["service"] == "leadsift"

    async def test_opensearch_health(self, client: AsyncLeadSiftClient) -> None:
        assert (await client.opensearch_health())["status"] == "healthy"

    async def test_search_leads(self, client: AsyncLeadSiftClient, adapter: MagicMock) -> None:
        page = await client.search_leads({"state_code": ["TX", "CA"]}, exact=True, limit=10, offset=20)
        assert page["meta"] == {"index": "leads_v3", "total": 1, "from": 20, "size": 10}
        assert page["data"][0]["_id"] == "doc_1"

        index, body, from_, size = adapter.search.await_args.args
        assert (from_, size) == (20, 10)
        assert len(body["query"]["bool"]["filter"]) == 2

    async def test_plan(self, client: AsyncLeadSiftClient, adapter: MagicMock) -> None:
        plan = await client.plan({"city": "Austin"})
        assert plan["index"] == "leads_v3"
        assert "bool" in plan["query"]
        adapter.search.assert_not_awaited()

    async def test_get_lead(self, client: AsyncLeadSiftClient) -> None:
        assert await client.get_lead("doc_1") == {"_id": "doc_1", "city": "Austin"}

    async def test_error_status_raises(self, client: AsyncLeadSiftClient) -> None:
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await client.search_leads({"favourite_color": "blue"})
        assert exc_info.value.response.status_code == 422
        assert exc_info.value.response.json()["unknown"] == ["favourite_color"]


class TestSyncClient:
    def test_search_leads(self, app: FastAPI) -> None:
        client = LeadSiftClient("http://leadsift.test", transport=httpx.ASGITransport(app=app))
        page = client.search_leads({"city": "Austin"}, limit=5)
        assert page["meta"]["size"] == 5

    def test_health_and_get_lead(self, app: FastAPI) -> None:
        client = LeadSiftClient("http://leadsift.test", transport=httpx.ASGITransport(app=app))
        assert client.health()["status"] == "healthy"
        assert client.get_lead("doc_1")["_id"] == "doc_1"
