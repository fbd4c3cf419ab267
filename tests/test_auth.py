"""
Tests for AuthSession and the token stores.

These tests verify that:
- login() stores the credential only after the server accepts it
- logout() clears the store without a server call
- The persistent store survives a new LocalStorage instance
"""

import httpx
import pytest

from demo_client.api.client import APIClient
from demo_client.auth import AuthSession, MemoryTokenStore, StorageTokenStore, TokenStore
from demo_client.exceptions import ClientError
from demo_client.storage import LocalStorage, StorageKeys
from demo_client.types import Credential

BASE_URL = "http://api.test"


class MockTransport(httpx.AsyncBaseTransport):
    """Routes (method, path) to canned JSON responses and records requests."""

    def __init__(self, responses: dict[tuple[str, str], dict]):
        self._responses = responses
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        resp_data = self._responses.get((request.method, request.url.path))
        if resp_data is None:
            return httpx.Response(status_code=404, request=request)
        return httpx.Response(
            status_code=resp_data.get("status_code", 200),
            json=resp_data.get("json", {}),
            request=request,
        )


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "storage.json")


class TestTokenStores:
    """Tests for MemoryTokenStore and StorageTokenStore."""

    def test_stores_satisfy_protocol(self, storage):
        assert isinstance(MemoryTokenStore(), TokenStore)
        assert isinstance(StorageTokenStore(storage), TokenStore)

    def test_memory_store_round_trip(self):
        store = MemoryTokenStore()
        assert store.get() is None

        store.set(Credential(access_token="a"))
        assert store.get() == Credential(access_token="a")

        store.clear()
        store.clear()
        assert store.get() is None

    def test_storage_store_persists_across_instances(self, tmp_path):
        path = tmp_path / "storage.json"
        StorageTokenStore(LocalStorage(path)).set(
            Credential(access_token="a", refresh_token="r")
        )

        restored = StorageTokenStore(LocalStorage(path)).get()
        assert restored == Credential(access_token="a", refresh_token="r")

    def test_storage_store_uses_fixed_keys(self, storage):
        StorageTokenStore(storage).set(Credential(access_token="a", refresh_token="r"))

        assert storage.get_item(StorageKeys.ACCESS_TOKEN) == "a"
        assert storage.get_item(StorageKeys.REFRESH_TOKEN) == "r"

    def test_storage_store_drops_stale_refresh_token(self, storage):
        store = StorageTokenStore(storage)
        store.set(Credential(access_token="a", refresh_token="r"))
        store.set(Credential(access_token="b"))

        assert store.get() == Credential(access_token="b")

    def test_storage_store_clear_leaves_other_keys(self, storage):
        storage.set_item(StorageKeys.RECENT_QUERIES, ["Teach me Jollof rice"])
        store = StorageTokenStore(storage)
        store.set(Credential(access_token="a", refresh_token="r"))
        store.clear()

        assert store.get() is None
        assert storage.get_item(StorageKeys.REFRESH_TOKEN) is None
        assert storage.get_item(StorageKeys.RECENT_QUERIES) == ["Teach me Jollof rice"]


class TestAuthSession:
    """Tests for register/login/logout/current_user."""

    @pytest.mark.asyncio
    async def test_login_stores_credential(self):
        transport = MockTransport(
            {
                ("POST", "/auth/login"): {
                    "json": {"access_token": "tok", "refresh_token": "ref"}
                },
                ("GET", "/auth/me"): {
                    "json": {"id": 1, "email": "ada@example.com", "name": "Ada"}
                },
            }
        )
        async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http:
            api = APIClient(http=http)
            session = AuthSession(api=api, tokens=api.tokens)
            await session.login("ada@example.com", "secret")
            profile = await session.current_user()

        assert session.is_authenticated
        assert api.tokens.get() == Credential(access_token="tok", refresh_token="ref")
        assert profile.id == "1"
        assert profile.name == "Ada"
        assert transport.requests[1].headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_failed_login_keeps_previous_credential(self):
        transport = MockTransport(
            {("POST", "/auth/login"): {"status_code": 401, "json": {"detail": "Bad credentials"}}}
        )
        previous = Credential(access_token="old")
        async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http:
            api = APIClient(http=http, tokens=MemoryTokenStore(previous))
            session = AuthSession(api=api, tokens=api.tokens)
            with pytest.raises(ClientError):
                await session.login("ada@example.com", "wrong")

        assert api.tokens.get() == previous

    @pytest.mark.asyncio
    async def test_register_does_not_log_in(self):
        transport = MockTransport(
            {
                ("POST", "/auth/register"): {
                    "status_code": 201,
                    "json": {"id": "u-9", "email": "ada@example.com", "name": "Ada"},
                }
            }
        )
        async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http:
            api = APIClient(http=http)
            session = AuthSession(api=api, tokens=api.tokens)
            profile = await session.register("ada@example.com", "secret", "Ada")

        assert profile.email == "ada@example.com"
        assert not session.is_authenticated

    @pytest.mark.asyncio
    async def test_logout_clears_without_request(self):
        transport = MockTransport({})
        async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http:
            api = APIClient(http=http, tokens=MemoryTokenStore(Credential("tok")))
            session = AuthSession(api=api, tokens=api.tokens)
            session.logout()

        assert not session.is_authenticated
        assert transport.requests == []
