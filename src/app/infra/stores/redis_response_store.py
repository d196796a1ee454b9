"""Redis Response Store — cache de respostas idempotentes.

Compartilha respostas entre instâncias do gateway.
Usa SET key value EX ttl / GET; o valor é o HandlerResult em JSON.

Contrato de Keys:
    As keys são hashes SHA-256 opacos (nunca dados do usuário).
    Keys são logadas parcialmente em DEBUG.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from app.protocols import HandlerResult, ResponseStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de idempotência
IDEMPOTENCY_PREFIX = "idem:"


class RedisResponseStore(ResponseStoreProtocol):
    """Store de respostas usando Redis (async).

    Args:
        redis_client: Cliente Redis assíncrono
    """

    def __init__(self, redis_client: AsyncRedis) -> None:
        self._redis = redis_client

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{IDEMPOTENCY_PREFIX}{key}"

    async def lookup(self, key: str) -> HandlerResult | None:
        try:
            raw = await self._redis.get(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar resposta no Redis") from exc

        if raw is None:
            return None
        try:
            payload = json.loads(raw)
            return HandlerResult.from_dict(payload)
        except (ValueError, KeyError, TypeError):
            # Entrada corrompida equivale a miss
            logger.warning("idempotency_entry_corrupted", extra={"key": key[:8] + "..."})
            return None

    async def store(self, key: str, result: HandlerResult, ttl: int) -> None:
        value = json.dumps(result.to_dict(), ensure_ascii=False, default=str)
        try:
            await self._redis.set(self._key(key), value, ex=ttl)
        except Exception as exc:
            raise RedisConnectionError("Falha ao armazenar resposta no Redis") from exc
        logger.debug("idempotency_stored", extra={"key": key[:8] + "...", "ttl": ttl})

    async def ping(self) -> bool:
        """Health check do backend."""
        try:
            return bool(await self._redis.ping())
        except Exception as exc:
            raise RedisConnectionError("Redis indisponível") from exc
