"""Protocolos de domínio para stores de respostas idempotentes.

Interfaces leves (ABCs) dependidas pelo IdempotencyCache.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.protocols.handler import HandlerResult


class ResponseStoreProtocol(ABC):
    """Contrato mínimo assíncrono para cache de respostas com TTL.

    Métodos canônicos:
    - lookup(key) -> HandlerResult | None
      Retorna a resposta armazenada ou None (miss ou expirada).
    - store(key, result, ttl) -> None
      Armazena a resposta com TTL em segundos.
    """

    @abstractmethod
    async def lookup(self, key: str) -> HandlerResult | None:
        """Busca resposta armazenada.

        Args:
            key: Chave de idempotência (hash opaco)

        Returns:
            HandlerResult armazenado ou None se ausente/expirado.
        """

    @abstractmethod
    async def store(self, key: str, result: HandlerResult, ttl: int) -> None:
        """Armazena resposta.

        Args:
            key: Chave de idempotência (hash opaco)
            result: Resposta produzida pelo handler
            ttl: TTL em segundos
        """
