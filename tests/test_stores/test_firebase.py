"""Tests for FirebaseStore."""

import json

import httpx
import pytest

from settings_provider import DocumentStoreProvider, ProviderConfigError, StoreError
from settings_provider.stores import FirebaseStore

DB_URL = "https://bot.example.firebaseio.com"


class FakeDatabase:
    """Answers REST calls from a canned response and records each request."""

    def __init__(self, status: int = 200, body=None):
        self.status = status
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.status,
            content=json.dumps(self.body).encode(),
            headers={"Content-Type": "application/json"},
        )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
async def store(database):
    client = httpx.AsyncClient(transport=httpx.MockTransport(database))
    s = FirebaseStore(DB_URL, auth_token="secret", client=client)
    yield s
    await client.aclose()


async def test_fetch_collection(store, database):
    database.body = {"0": {"prefix": "!"}, "123": {"cmd-ping": False}}
    assert await store.fetch("settings") == database.body

    request = database.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/settings.json"
    assert request.url.params["auth"] == "secret"


async def test_fetch_missing_returns_none(store, database):
    database.body = None
    assert await store.fetch("settings/123") is None


async def test_fetch_array_collection_becomes_mapping(store, database):
    # The database returns sequential integer keys as an array
    database.body = [{"prefix": "!"}, None, {"prefix": "?"}]
    assert await store.fetch("settings") == {"0": {"prefix": "!"}, "2": {"prefix": "?"}}


async def test_update_patches(store, database):
    await store.update("settings/123", {"prefix": "?"})

    request = database.requests[0]
    assert request.method == "PATCH"
    assert request.url.path == "/settings/123.json"
    assert json.loads(request.content) == {"prefix": "?"}


async def test_remove_deletes(store, database):
    await store.remove("settings/123/prefix")

    request = database.requests[0]
    assert request.method == "DELETE"
    assert request.url.path == "/settings/123/prefix.json"


async def test_provider_remove_rewrites_document(store, database):
    provider = DocumentStoreProvider(store)
    await provider.set("123", "prefix", "?")
    await provider.set("123", "cmd-ping", False)
    database.requests.clear()

    await provider.remove("123", "prefix")

    assert [(r.method, r.url.path) for r in database.requests] == [
        ("DELETE", "/settings/123.json"),
        ("PATCH", "/settings/123.json"),
    ]
    assert json.loads(database.requests[1].content) == {"cmd-ping": False}


async def test_http_error_raises_store_error(store, database):
    database.status = 401
    database.body = {"error": "Permission denied"}
    with pytest.raises(StoreError) as exc_info:
        await store.update("settings/123", {"prefix": "?"})
    assert exc_info.value.operation == "update"
    assert "HTTP 401" in str(exc_info.value)


async def test_transport_error_raises_store_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    store = FirebaseStore(DB_URL, client=client)
    try:
        with pytest.raises(StoreError) as exc_info:
            await store.fetch("settings")
        assert exc_info.value.path == "settings"
    finally:
        await client.aclose()


async def test_no_auth_param_without_token(database, monkeypatch):
    monkeypatch.delenv("FIREBASE_AUTH_TOKEN", raising=False)
    client = httpx.AsyncClient(transport=httpx.MockTransport(database))
    store = FirebaseStore(DB_URL + "/", client=client)
    try:
        await store.fetch("settings")
    finally:
        await client.aclose()

    request = database.requests[0]
    assert "auth" not in request.url.params
    assert str(request.url) == f"{DB_URL}/settings.json"


def test_env_fallback(monkeypatch):
    monkeypatch.setenv("FIREBASE_DATABASE_URL", DB_URL)
    monkeypatch.setenv("FIREBASE_AUTH_TOKEN", "from-env")
    store = FirebaseStore()
    assert store._url == DB_URL
    assert store._auth_token == "from-env"


def test_missing_url_raises(monkeypatch):
    monkeypatch.delenv("FIREBASE_DATABASE_URL", raising=False)
    with pytest.raises(ProviderConfigError):
        FirebaseStore()


async def test_close_leaves_injected_client_open(store):
    await store.close()
    assert store._client is not None
    assert not store._client.is_closed
