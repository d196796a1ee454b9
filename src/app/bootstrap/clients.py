"""Factories de clientes externos — Redis, httpx e OpenAI."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from openai import AsyncOpenAI
    from redis.asyncio import Redis as AsyncRedis

    from config.settings import OpenAISettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Redis Client Factory
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_async_redis_client(redis_url: str) -> AsyncRedis:
    """Cria cliente Redis assíncrono (singleton por URL).

    Raises:
        ValueError: Se redis_url vazio
    """
    from redis.asyncio import Redis as AsyncRedis

    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    logger.info("async_redis_client_created")
    return client


# ──────────────────────────────────────────────────────────────────────────────
# HTTP / OpenAI Client Factories
# ──────────────────────────────────────────────────────────────────────────────


def create_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    """Cria cliente httpx compartilhado pelos clientes de upstream.

    O ciclo de vida pertence ao lifespan da aplicação (aclose no shutdown).
    """
    client = httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
    )
    logger.info("http_client_created", extra={"timeout_seconds": timeout_seconds})
    return client


def create_openai_client(settings: OpenAISettings) -> AsyncOpenAI:
    """Cria AsyncOpenAI a partir das settings.

    Raises:
        ValueError: Se OPENAI_API_KEY não configurado
    """
    from openai import AsyncOpenAI

    if not settings.api_key:
        msg = "OPENAI_API_KEY não configurado"
        raise ValueError(msg)

    client = AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout_seconds,
        max_retries=settings.max_retries,
    )
    logger.info("openai_client_created", extra={"model": settings.dialogue_model})
    return client
