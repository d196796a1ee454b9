"""Testes das settings do gateway (carga do ambiente e validação)."""

from __future__ import annotations

import pytest

from config.settings import (
    AuthSettings,
    BaseSettings,
    ConcurrencySettings,
    IdempotencySettings,
    OpenAISettings,
    UpstreamSettings,
)
from config.settings.base.core import _load_base_from_env
from config.settings.gateway import parse_per_handler_limits
from config.settings.gateway.auth import _load_auth_from_env
from config.settings.gateway.concurrency import _load_concurrency_from_env


class TestConcurrencySettings:
    def test_parse_per_handler_limits(self) -> None:
        assert parse_per_handler_limits("audio.dialogue=2, data.proxy=16,") == {
            "audio.dialogue": 2,
            "data.proxy": 16,
        }
        assert parse_per_handler_limits("") == {}

    @pytest.mark.parametrize("raw", ["audio.dialogue", "=3", "echo=x"])
    def test_parse_rejects_malformed_entries(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_per_handler_limits(raw)

    def test_load_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("CONCURRENCY_GLOBAL_LIMIT", "4")
        monkeypatch.setenv("CONCURRENCY_PER_HANDLER", "echo=1")
        monkeypatch.setenv("ADMISSION_MAX_QUEUE", "0")

        settings = _load_concurrency_from_env()

        assert settings.global_limit == 4
        assert settings.limit_for("echo") == 1
        assert settings.limit_for("other") == settings.per_handler_default
        assert settings.max_queue == 0
        assert settings.validate() == []

    def test_validate_reports_invalid_limits(self) -> None:
        errors = ConcurrencySettings(global_limit=0, per_handler={"x": 0}).validate()
        assert len(errors) == 2


class TestAuthSettings:
    def test_missing_secret_is_an_error(self) -> None:
        assert AuthSettings().validate() == ["AUTH_HMAC_SECRET não configurado"]

    def test_load_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("AUTH_HMAC_SECRET", "s")
        monkeypatch.setenv("AUTH_SIGNATURE_MODE", "BODY")

        settings = _load_auth_from_env()

        assert settings.hmac_secret == "s"
        assert settings.signature_mode == "body"
        assert settings.validate() == []


class TestOtherSettings:
    def test_redis_backend_requires_url(self) -> None:
        errors = IdempotencySettings(backend="redis").validate(BaseSettings())
        assert errors == ["IDEMPOTENCY_BACKEND=redis requer REDIS_URL configurado"]
        assert IdempotencySettings(backend="redis").validate(
            BaseSettings(redis_url="redis://localhost:6379/0")
        ) == []

    def test_openai_enabled_requires_key(self) -> None:
        assert OpenAISettings().validate()
        assert OpenAISettings(enabled=False).validate() == []

    def test_upstream_urls(self) -> None:
        errors = UpstreamSettings(data_service_url="ftp://x").validate()
        assert "DATA_SERVICE_URL inválida: ftp://x" in errors
        assert "AUTH_SERVICE_URL não configurado" in errors


class TestBaseSettings:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("prod", "production"), (" Stage ", "staging"), ("local", "development"), ("?", "development")],
    )
    def test_environment_aliases(self, monkeypatch, raw: str, expected: str) -> None:
        monkeypatch.setenv("ENVIRONMENT", raw)
        settings = _load_base_from_env()
        assert settings.environment == expected
        assert settings.strict_validation is (expected != "development")

    def test_redis_url_scheme_is_checked(self) -> None:
        assert BaseSettings(redis_url="redis://localhost:6379/0").validate() == []
        assert BaseSettings(redis_url="http://localhost").validate() == [
            "REDIS_URL com esquema inválido: http"
        ]
