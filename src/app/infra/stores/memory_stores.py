"""Stores em memória — desenvolvimento, testes e instância única.

ATENÇÃO: Sem persistência entre reinícios e sem compartilhamento entre
processos. Para múltiplas instâncias use o backend Redis.
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

from app.protocols import (
    ConversationStoreProtocol,
    HandlerResult,
    RemoteConversation,
    ResponseStoreProtocol,
)
from utils.errors import ConversationNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable


class MemoryResponseStore(ResponseStoreProtocol):
    """Cache de respostas com TTL em memória.

    Entradas expiradas são removidas na consulta (lazy) ou por
    `purge_expired()`.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[HandlerResult, float]] = {}  # key -> (result, expires_at)

    async def lookup(self, key: str) -> HandlerResult | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        result, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return result

    async def store(self, key: str, result: HandlerResult, ttl: int) -> None:
        self._entries[key] = (result, self._clock() + ttl)

    def purge_expired(self) -> int:
        """Remove entradas expiradas; retorna quantas foram removidas."""
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class MemoryConversationStore(ConversationStoreProtocol):
    """Store de conversas em memória — apenas para dev/test.

    IDs removidos continuam conhecidos: referências posteriores são NotFound.
    """

    def __init__(self) -> None:
        self._conversations: dict[str, dict[str, str]] = {}
        self._deleted: set[str] = set()

    async def create(self, metadata: dict[str, str]) -> RemoteConversation:
        conversation_id = f"conv_{uuid.uuid4().hex}"
        self._conversations[conversation_id] = dict(metadata)
        return RemoteConversation(conversation_id=conversation_id, metadata=dict(metadata))

    async def fetch(self, conversation_id: str) -> RemoteConversation:
        metadata = self._require(conversation_id)
        return RemoteConversation(conversation_id=conversation_id, metadata=dict(metadata))

    async def update(self, conversation_id: str, metadata: dict[str, str]) -> None:
        self._require(conversation_id)
        self._conversations[conversation_id] = dict(metadata)

    async def delete(self, conversation_id: str) -> None:
        self._require(conversation_id)
        del self._conversations[conversation_id]
        self._deleted.add(conversation_id)

    def exists(self, conversation_id: str) -> bool:
        return conversation_id in self._conversations

    def was_deleted(self, conversation_id: str) -> bool:
        return conversation_id in self._deleted

    def _require(self, conversation_id: str) -> dict[str, str]:
        metadata = self._conversations.get(conversation_id)
        if metadata is None:
            raise ConversationNotFoundError(conversation_id)
        return metadata

    def __len__(self) -> int:
        return len(self._conversations)
