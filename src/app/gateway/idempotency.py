"""Idempotency Cache — deduplicação de retentativas.

Chave: SHA-256 de (user_id, handler_name, request_id). Sem request_id,
usa o fingerprint do JSON canônico de {operation, inputs}.

Política single flight:
- Resposta armazenada dentro do TTL -> replay (mesmo resultado).
- Duplicata concorrente enquanto a primeira execução está em voo ->
  aguarda o resultado dessa execução; o handler roda uma única vez.
- A execução líder registra a chave em voo antes do primeiro await, então
  não existe janela entre consulta e reivindicação.
- Se a líder for cancelada antes do handler terminar, os waiters tentam
  de novo (um deles vira líder). Depois que o handler termina, o resultado
  já foi entregue aos waiters e o armazenamento segue mesmo sem a líder.

Falha do backend (ex.: Redis fora) degrada para execução sem cache:
consulta vira miss e armazenamento é ignorado, ambos com log de warning.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from functools import partial
from typing import TYPE_CHECKING, Any

from app.observability import record_idempotency
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols import HandlerResult, ResponseStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60


def input_fingerprint(operation: str, inputs: dict[str, Any]) -> str:
    """Hash estável de {operation, inputs} (ordem de chaves irrelevante)."""
    canonical = json.dumps(
        {"operation": operation, "inputs": inputs},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def idempotency_key(
    user_id: str,
    handler_name: str,
    request_id: str = "",
    *,
    operation: str = "",
    inputs: dict[str, Any] | None = None,
) -> str:
    """Deriva a chave opaca de idempotência.

    Mesmo (user_id, handler_name, request_id) -> mesma chave; qualquer
    componente diferente -> chave diferente.
    """
    discriminator = request_id or input_fingerprint(operation, inputs or {})
    # JSON evita ambiguidade de separador entre componentes
    material = json.dumps([user_id, handler_name, discriminator], ensure_ascii=False)
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


class IdempotencyCache:
    """Cache de respostas com execução única por chave."""

    def __init__(
        self,
        store: ResponseStoreProtocol,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._in_flight: dict[str, asyncio.Future[HandlerResult | None]] = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    async def run(
        self,
        key: str,
        producer: Callable[[], Awaitable[HandlerResult]],
        *,
        plugin: str = "",
    ) -> tuple[HandlerResult, bool]:
        """Devolve a resposta da chave, executando `producer` no máximo uma vez.

        Args:
            key: Chave de idempotência
            producer: Executa o handler (não deve levantar para falhas esperadas)
            plugin: Nome do handler (apenas para métricas)

        Returns:
            (resultado, replayed) — replayed=True quando o resultado veio do
            cache ou de uma execução em voo de outra requisição.
        """
        while True:
            pending = self._in_flight.get(key)
            if pending is not None:
                # shield: cancelar este waiter não cancela a execução líder
                shared = await asyncio.shield(pending)
                if shared is None:
                    continue
                record_idempotency(plugin, "joined")
                return shared, True

            leader: asyncio.Future[HandlerResult | None] = (
                asyncio.get_running_loop().create_future()
            )
            self._in_flight[key] = leader
            persist: asyncio.Task[None] | None = None
            try:
                cached = await self._lookup(key)
                if cached is not None:
                    leader.set_result(cached)
                    record_idempotency(plugin, "replayed")
                    return cached, True

                result = await producer()
                # Publicado antes de persistir: cancelar a líder daqui em diante
                # não faz os waiters executarem de novo.
                leader.set_result(result)
                record_idempotency(plugin, "executed")
                persist = asyncio.ensure_future(self._store_result(key, result))
                await asyncio.shield(persist)
                return result, False
            finally:
                if not leader.done():
                    leader.set_result(None)
                if persist is not None and not persist.done():
                    # Chave segue em voo até o armazenamento terminar
                    persist.add_done_callback(partial(self._finish_persist, key, leader))
                else:
                    self._release(key, leader)

    def _release(self, key: str, leader: asyncio.Future[HandlerResult | None]) -> None:
        if self._in_flight.get(key) is leader:
            del self._in_flight[key]

    def _finish_persist(
        self,
        key: str,
        leader: asyncio.Future[HandlerResult | None],
        task: asyncio.Task[None],
    ) -> None:
        self._release(key, leader)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(
                "idempotency_store_failed",
                extra={"key": key[:12], "error_type": type(task.exception()).__name__},
            )

    async def _lookup(self, key: str) -> HandlerResult | None:
        try:
            return await self._store.lookup(key)
        except InfrastructureError as exc:
            logger.warning(
                "idempotency_lookup_failed",
                extra={"key": key[:12], "error_type": type(exc).__name__},
            )
            return None

    async def _store_result(self, key: str, result: HandlerResult) -> None:
        try:
            await self._store.store(key, result, self._ttl_seconds)
        except InfrastructureError as exc:
            logger.warning(
                "idempotency_store_failed",
                extra={"key": key[:12], "error_type": type(exc).__name__},
            )
