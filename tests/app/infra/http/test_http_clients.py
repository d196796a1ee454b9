"""Testes dos clientes HTTP (transporte httpx mockado)."""

from __future__ import annotations

import json

import httpx
import pytest

from app.infra.http import AuthServiceClient, DataServiceClient, HttpConversationStore
from utils.errors import ConversationNotFoundError, UpstreamError

BASE_URL = "https://upstream.test"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpConversationStore:
    @pytest.mark.asyncio
    async def test_create_sends_bearer_and_metadata(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "conv_1", "metadata": {"turn": "0"}})

        async with _client(handler) as http_client:
            store = HttpConversationStore(base_url=BASE_URL + "/", api_key="k", http_client=http_client)
            created = await store.create({"language": "en", "turn": "0"})

        assert created.conversation_id == "conv_1"
        assert created.metadata == {"turn": "0"}
        assert str(seen[0].url) == f"{BASE_URL}/conversations"
        assert seen[0].headers["authorization"] == "Bearer k"
        assert json.loads(seen[0].content) == {"metadata": {"language": "en", "turn": "0"}}

    @pytest.mark.asyncio
    async def test_create_without_id_generates_one(self) -> None:
        async with _client(lambda request: httpx.Response(200, json={})) as http_client:
            store = HttpConversationStore(base_url=BASE_URL, api_key="k", http_client=http_client)
            created = await store.create({"turn": "0"})

        assert created.conversation_id
        assert created.metadata == {"turn": "0"}

    @pytest.mark.asyncio
    async def test_fetch_stringifies_metadata(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"metadata": {"turn": 3, "language": "en"}})

        async with _client(handler) as http_client:
            store = HttpConversationStore(base_url=BASE_URL, api_key="k", http_client=http_client)
            remote = await store.fetch("conv_1")

        assert remote.metadata == {"turn": "3", "language": "en"}
        assert remote.turn == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["fetch", "delete"])
    async def test_404_is_conversation_not_found(self, method: str) -> None:
        async with _client(lambda request: httpx.Response(404)) as http_client:
            store = HttpConversationStore(base_url=BASE_URL, api_key="k", http_client=http_client)
            with pytest.raises(ConversationNotFoundError):
                await getattr(store, method)("conv_x")

    @pytest.mark.asyncio
    async def test_server_error_is_upstream_error(self) -> None:
        async with _client(lambda request: httpx.Response(500, text="oops")) as http_client:
            store = HttpConversationStore(base_url=BASE_URL, api_key="k", http_client=http_client)
            with pytest.raises(UpstreamError) as exc_info:
                await store.update("conv_1", {"turn": "2"})

        assert exc_info.value.status_code == 502
        assert exc_info.value.upstream_status == 500

    @pytest.mark.asyncio
    async def test_transport_failure_is_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as http_client:
            store = HttpConversationStore(base_url=BASE_URL, api_key="k", http_client=http_client)
            with pytest.raises(UpstreamError, match="unreachable"):
                await store.fetch("conv_1")


class TestDataServiceClient:
    @pytest.mark.asyncio
    async def test_forwards_identity_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        async with _client(handler) as http_client:
            client = DataServiceClient(base_url=BASE_URL, http_client=http_client)
            data = await client.request(
                "PATCH", "/lectures/1", user_id="u1", request_id="r1", body={"a": 1}
            )

        assert data == {"ok": True}
        request = seen[0]
        assert request.method == "PATCH"
        assert request.headers["x-user-id"] == "u1"
        assert request.headers["x-request-id"] == "r1"

    @pytest.mark.asyncio
    async def test_client_error_status_is_forwarded(self) -> None:
        async with _client(lambda request: httpx.Response(409, json={"e": 1})) as http_client:
            client = DataServiceClient(base_url=BASE_URL, http_client=http_client)
            with pytest.raises(UpstreamError) as exc_info:
                await client.request("GET", "/lectures", user_id="u", request_id="r")

        assert exc_info.value.status_code == 409
        assert exc_info.value.details == {"upstream": "data_service", "body": {"e": 1}}

    @pytest.mark.asyncio
    async def test_timeout_is_502(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler) as http_client:
            client = DataServiceClient(base_url=BASE_URL, http_client=http_client)
            with pytest.raises(UpstreamError, match="timeout") as exc_info:
                await client.request("GET", "/lectures", user_id="u", request_id="r")

        assert exc_info.value.status_code == 502


class TestAuthServiceClient:
    @pytest.mark.asyncio
    async def test_posts_credentials(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        async with _client(handler) as http_client:
            client = AuthServiceClient(base_url=BASE_URL, http_client=http_client)
            data = await client.post_credentials("/auth/login", "alice", "pw")

        assert data == {}
        assert json.loads(seen[0].content) == {"username": "alice", "password": "pw"}
        assert seen[0].url.path == "/auth/login"
