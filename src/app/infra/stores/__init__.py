"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: cache de respostas e conversas em memória (dev/test)
    - redis_response_store: cache de respostas idempotentes em Redis
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryConversationStore, MemoryResponseStore
from app.infra.stores.redis_response_store import RedisResponseStore

__all__ = [
    # Memory (dev/test)
    "MemoryConversationStore",
    "MemoryResponseStore",
    # Redis
    "RedisResponseStore",
]
