"""Tests for the Supabase row store."""

import json

import httpx
import pytest
import pytest_asyncio

from influencer_trust.domain.errors import StoreError
from influencer_trust.infrastructure.storage.supabase_store import SupabaseConfig, SupabaseRowStore


class FakePostgrest:
    """Records requests and replies with a scripted response."""

    def __init__(self, status_code=200, payload=None, error=None):
        self.requests = []
        self.status_code = status_code
        self.payload = payload if payload is not None else []
        self.error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def config() -> SupabaseConfig:
    return SupabaseConfig(url="https://project.supabase.co/", key="service-key", timeout=5.0)


@pytest.fixture
def postgrest() -> FakePostgrest:
    return FakePostgrest()


@pytest_asyncio.fixture
async def store(config, postgrest):
    store = SupabaseRowStore(config, transport=httpx.MockTransport(postgrest))
    await store.initialize()
    yield store
    await store.shutdown()


@pytest.mark.asyncio
async def test_get_builds_filters_and_order(store, postgrest):
    """Test the query string of a filtered, ordered read."""
    postgrest.payload = [{"id": "1", "claim_text": "a"}]

    rows = await store.get("claims", {"influencer_id": "inf-1"}, order_by="created_at", descending=True)

    assert rows == [{"id": "1", "claim_text": "a"}]
    request = postgrest.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/claims"
    assert request.url.params["select"] == "*"
    assert request.url.params["influencer_id"] == "eq.inf-1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "service-key"
    assert request.headers["Authorization"] == "Bearer service-key"


@pytest.mark.asyncio
async def test_get_one(store, postgrest):
    """Test reading a single row by name."""
    postgrest.payload = [{"id": "1", "canonical_name": "Andrew Huberman"}]

    row = await store.get_one("influencers", {"canonical_name": "Andrew Huberman"})

    assert row["id"] == "1"
    assert postgrest.requests[0].url.params["canonical_name"] == "eq.Andrew Huberman"


@pytest.mark.asyncio
async def test_insert_requests_representation(store, postgrest):
    """Test bulk insert body and Prefer header."""
    postgrest.status_code = 201
    postgrest.payload = [{"id": "1", "claim_text": "a"}, {"id": "2", "claim_text": "b"}]

    rows = await store.insert("claims", [{"claim_text": "a"}, {"claim_text": "b"}])

    assert [row["id"] for row in rows] == ["1", "2"]
    request = postgrest.requests[0]
    assert request.method == "POST"
    assert request.headers["Prefer"] == "return=representation"
    assert json.loads(request.content) == [{"claim_text": "a"}, {"claim_text": "b"}]


@pytest.mark.asyncio
async def test_insert_nothing_skips_request(store, postgrest):
    """Test that an empty insert makes no call."""
    assert await store.insert("claims", []) == []
    assert postgrest.requests == []


@pytest.mark.asyncio
async def test_update_patches_with_filters(store, postgrest):
    """Test PATCH with equality filters."""
    postgrest.payload = [{"id": "inf-1", "trust_score": 66.67}]

    rows = await store.update("influencers", {"id": "inf-1"}, {"trust_score": 66.67})

    assert rows[0]["trust_score"] == 66.67
    request = postgrest.requests[0]
    assert request.method == "PATCH"
    assert request.url.params["id"] == "eq.inf-1"
    assert json.loads(request.content) == {"trust_score": 66.67}


@pytest.mark.asyncio
async def test_error_status_raises_store_error(store, postgrest):
    """Test that PostgREST errors surface as StoreError."""
    postgrest.status_code = 400
    postgrest.payload = {"message": "column does not exist"}

    with pytest.raises(StoreError) as exc_info:
        await store.get("claims", {"bogus": 1})

    assert "400" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_error_raises_store_error(config):
    """Test that connection failures surface as StoreError."""
    postgrest = FakePostgrest(error=httpx.ConnectError("refused"))
    store = SupabaseRowStore(config, transport=httpx.MockTransport(postgrest))
    await store.initialize()

    with pytest.raises(StoreError):
        await store.get("claims")
    await store.shutdown()


@pytest.mark.asyncio
async def test_uninitialized_store(config):
    """Test using the store before initialize."""
    with pytest.raises(StoreError):
        await SupabaseRowStore(config).get("claims")


def test_config_from_env(monkeypatch):
    """Test configuration loading."""
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon")
    monkeypatch.delenv("SUPABASE_TIMEOUT", raising=False)

    config = SupabaseConfig.from_env()

    assert config.url == "https://example.supabase.co"
    assert config.key == "anon"
    assert config.timeout == 30.0
