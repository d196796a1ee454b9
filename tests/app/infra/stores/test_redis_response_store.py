"""Testes do RedisResponseStore (cliente Redis mockado)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from app.infra.stores import RedisResponseStore
from app.protocols import HandlerResult
from utils.errors import RedisConnectionError


@pytest.fixture
def redis_client() -> AsyncMock:
    return AsyncMock()


class TestRedisResponseStore:
    @pytest.mark.asyncio
    async def test_store_uses_prefix_and_ttl(self, redis_client) -> None:
        store = RedisResponseStore(redis_client)

        await store.store("abc", HandlerResult.success({"x": 1}), 60)

        key, value = redis_client.set.await_args.args
        assert key == "idem:abc"
        assert redis_client.set.await_args.kwargs == {"ex": 60}
        assert json.loads(value) == {"status_code": 200, "message": "ok", "data": {"x": 1}}

    @pytest.mark.asyncio
    async def test_lookup_hit(self, redis_client) -> None:
        redis_client.get.return_value = json.dumps({"status_code": 404, "message": "nope"})

        result = await RedisResponseStore(redis_client).lookup("abc")

        redis_client.get.assert_awaited_once_with("idem:abc")
        assert result == HandlerResult(status_code=404, message="nope")

    @pytest.mark.asyncio
    async def test_lookup_miss(self, redis_client) -> None:
        redis_client.get.return_value = None
        assert await RedisResponseStore(redis_client).lookup("abc") is None

    @pytest.mark.asyncio
    async def test_corrupted_entry_is_a_miss(self, redis_client) -> None:
        redis_client.get.return_value = b"{broken"
        assert await RedisResponseStore(redis_client).lookup("abc") is None

    @pytest.mark.asyncio
    async def test_connection_failures_are_wrapped(self, redis_client) -> None:
        redis_client.get.side_effect = ConnectionError("down")
        redis_client.set.side_effect = ConnectionError("down")
        redis_client.ping.side_effect = ConnectionError("down")
        store = RedisResponseStore(redis_client)

        with pytest.raises(RedisConnectionError):
            await store.lookup("abc")
        with pytest.raises(RedisConnectionError):
            await store.store("abc", HandlerResult.success(), 60)
        with pytest.raises(RedisConnectionError):
            await store.ping()
