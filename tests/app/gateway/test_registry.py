"""Testes do Handler Registry."""

from __future__ import annotations

import pytest

from app.gateway.registry import DuplicateHandlerError, HandlerRegistry, RegistryFrozenError
from app.handlers import EchoHandler
from utils.errors import HandlerNotFoundError


class TestHandlerRegistry:
    def test_register_and_get(self) -> None:
        registry = HandlerRegistry()
        handler = EchoHandler()
        registry.register("echo", handler)

        assert registry.get("echo") is handler
        assert "echo" in registry
        assert len(registry) == 1

    def test_unknown_name_raises_not_found(self) -> None:
        registry = HandlerRegistry()
        with pytest.raises(HandlerNotFoundError) as exc_info:
            registry.get("missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "unknown plugin: missing"

    def test_duplicate_name_is_rejected(self) -> None:
        registry = HandlerRegistry()
        registry.register("echo", EchoHandler())
        with pytest.raises(DuplicateHandlerError):
            registry.register("echo", EchoHandler())

    def test_empty_name_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            HandlerRegistry().register("", EchoHandler())

    def test_frozen_registry_is_read_only(self) -> None:
        registry = HandlerRegistry()
        registry.register("b", EchoHandler())
        registry.register("a", EchoHandler())
        registry.freeze()

        assert registry.frozen is True
        assert registry.names() == ["a", "b"]
        with pytest.raises(RegistryFrozenError):
            registry.register("c", EchoHandler())
