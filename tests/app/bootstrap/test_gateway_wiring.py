"""Testes do composition root (settings -> Dispatcher)."""

from __future__ import annotations

import logging

import pytest

from app.bootstrap import validate_runtime_settings
from app.bootstrap.dependencies import build_gateway, create_response_store
from app.handlers import build_registry
from app.infra.stores import MemoryResponseStore
from config.settings import (
    BaseSettings,
    IdempotencySettings,
    get_auth_settings,
    get_base_settings,
    get_concurrency_settings,
    get_idempotency_settings,
    get_openai_settings,
    get_upstream_settings,
)

from tests.fakes.fake_dialogue_client import FakeDialogueClient, FlakyConversationStore

_GETTERS = (
    get_auth_settings,
    get_base_settings,
    get_concurrency_settings,
    get_idempotency_settings,
    get_openai_settings,
    get_upstream_settings,
)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    for name in (
        "ENVIRONMENT",
        "OPENAI_API_KEY",
        "DATA_SERVICE_URL",
        "AUTH_SERVICE_URL",
        "IDEMPOTENCY_BACKEND",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AUTH_HMAC_SECRET", "test-secret")
    monkeypatch.setenv("OPENAI_ENABLED", "false")
    for getter in _GETTERS:
        getter.cache_clear()
    yield
    for getter in _GETTERS:
        getter.cache_clear()


class TestBuildRegistry:
    def test_only_echo_without_dependencies(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            registry = build_registry()

        assert registry.names() == ["echo"]
        assert registry.frozen
        disabled = [r for r in caplog.records if r.getMessage() == "handler_disabled"]
        assert len(disabled) == 4


class TestBuildGateway:
    @pytest.mark.asyncio
    async def test_minimal_gateway(self) -> None:
        components = build_gateway()
        try:
            assert components.dispatcher.registry.names() == ["echo"]
            assert components.redis_client is None
            assert components.openai_client is None
        finally:
            await components.aclose()

    @pytest.mark.asyncio
    async def test_upstreams_enable_handlers(self, monkeypatch) -> None:
        monkeypatch.setenv("DATA_SERVICE_URL", "http://data.test")
        monkeypatch.setenv("AUTH_SERVICE_URL", "http://auth.test")
        monkeypatch.setenv("OPENAI_ENABLED", "true")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        get_upstream_settings.cache_clear()
        get_openai_settings.cache_clear()

        components = build_gateway(
            conversation_store=FlakyConversationStore(),
            dialogue_client=FakeDialogueClient(),
        )
        try:
            assert components.dispatcher.registry.names() == [
                "audio.dialogue",
                "auth_password",
                "auth_register",
                "data.proxy",
                "echo",
            ]
            assert components.openai_client is not None
        finally:
            await components.aclose()


class TestCreateResponseStore:
    def test_memory_backend(self) -> None:
        store, redis_client = create_response_store(IdempotencySettings(), BaseSettings())
        assert isinstance(store, MemoryResponseStore)
        assert redis_client is None


class TestValidateRuntimeSettings:
    def test_development_only_warns(self) -> None:
        validate_runtime_settings()

    def test_production_fails_fast(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("AUTH_HMAC_SECRET")
        get_base_settings.cache_clear()
        get_auth_settings.cache_clear()

        with pytest.raises(RuntimeError, match="AUTH_HMAC_SECRET"):
            validate_runtime_settings()
