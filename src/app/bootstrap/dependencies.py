"""Factories de componentes — wiring do gateway.

Centraliza a criação de stores, clientes e do Dispatcher a partir das
settings. Usado pelo lifespan da aplicação FastAPI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.bootstrap.clients import (
    create_async_redis_client,
    create_http_client,
    create_openai_client,
)
from app.conversations import ConversationSessionManager
from app.gateway import AdmissionController, Dispatcher, IdempotencyCache, SignatureGate
from app.handlers import build_registry
from app.infra.ai.dialogue_client import OpenAIDialogueClient
from app.infra.http import AuthServiceClient, DataServiceClient, HttpConversationStore
from app.infra.stores import MemoryResponseStore, RedisResponseStore
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_concurrency_settings,
    get_idempotency_settings,
    get_openai_settings,
    get_upstream_settings,
)

if TYPE_CHECKING:
    import httpx
    from openai import AsyncOpenAI
    from redis.asyncio import Redis as AsyncRedis

    from app.protocols import ResponseStoreProtocol
    from config.settings import BaseSettings, IdempotencySettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Response Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_response_store(
    settings: IdempotencySettings,
    base: BaseSettings,
) -> tuple[ResponseStoreProtocol, AsyncRedis | None]:
    """Cria store de respostas conforme IDEMPOTENCY_BACKEND.

    - "memory": MemoryResponseStore (instância única)
    - "redis": RedisResponseStore (múltiplas instâncias)

    Returns:
        (store, cliente Redis ou None)
    """
    if settings.backend == "redis":
        redis_client = create_async_redis_client(base.redis_url)
        logger.info("response_store_created", extra={"backend": "redis"})
        return RedisResponseStore(redis_client), redis_client

    if not base.is_development:
        logger.warning(
            "memory_response_store_in_non_dev",
            extra={"backend": "memory", "environment": base.environment},
        )
    logger.info("response_store_created", extra={"backend": "memory"})
    return MemoryResponseStore(), None


# ──────────────────────────────────────────────────────────────────────────────
# Gateway Factory
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class GatewayComponents:
    """Componentes montados no startup (donos de recursos de rede)."""

    dispatcher: Dispatcher
    http_client: httpx.AsyncClient
    openai_client: AsyncOpenAI | None = None
    redis_client: AsyncRedis | None = None

    async def aclose(self) -> None:
        """Fecha conexões na ordem inversa da criação."""
        if self.redis_client is not None:
            await self.redis_client.aclose()
        if self.openai_client is not None:
            await self.openai_client.close()
        await self.http_client.aclose()
        logger.info("gateway_components_closed")


def build_gateway(**overrides: Any) -> GatewayComponents:
    """Monta Dispatcher e dependências a partir das settings do ambiente.

    Args:
        **overrides: Substitui componentes (ex: response_store, http_client)
            — útil em testes.
    """
    base = get_base_settings()
    concurrency = get_concurrency_settings()
    idempotency = get_idempotency_settings()
    openai_settings = get_openai_settings()
    upstream = get_upstream_settings()

    http_client = overrides.get("http_client") or create_http_client(upstream.timeout_seconds)

    redis_client = None
    response_store = overrides.get("response_store")
    if response_store is None:
        response_store, redis_client = create_response_store(idempotency, base)

    openai_client = overrides.get("openai_client")
    conversations = None
    if openai_settings.enabled and (openai_client is not None or openai_settings.api_key):
        openai_client = openai_client or create_openai_client(openai_settings)
        store = overrides.get("conversation_store") or HttpConversationStore(
            base_url=openai_settings.base_url,
            api_key=openai_settings.api_key,
            http_client=http_client,
        )
        dialogue = overrides.get("dialogue_client") or OpenAIDialogueClient(
            settings=openai_settings,
            client=openai_client,
        )
        conversations = ConversationSessionManager(store, dialogue)

    data_client = None
    if upstream.data_service_url:
        data_client = DataServiceClient(base_url=upstream.data_service_url, http_client=http_client)

    auth_client = None
    if upstream.auth_service_url:
        auth_client = AuthServiceClient(base_url=upstream.auth_service_url, http_client=http_client)

    registry = build_registry(
        conversations=conversations,
        data_client=data_client,
        auth_client=auth_client,
    )
    dispatcher = Dispatcher(
        gate=SignatureGate.from_settings(get_auth_settings()),
        admission=AdmissionController.from_settings(concurrency),
        cache=IdempotencyCache(response_store, ttl_seconds=idempotency.ttl_seconds),
        registry=registry,
        handler_timeout_seconds=concurrency.handler_timeout_seconds,
    )
    logger.info(
        "gateway_built",
        extra={
            "handlers": registry.names(),
            "idempotency_backend": idempotency.backend,
            "global_limit": concurrency.global_limit,
        },
    )
    return GatewayComponents(
        dispatcher=dispatcher,
        http_client=http_client,
        openai_client=openai_client,
        redis_client=redis_client,
    )
