"""Sessões de conversa multi-turno (store remoto + modelo de linguagem)."""

from app.conversations.locks import SessionLockPool
from app.conversations.manager import (
    DEFAULT_LANGUAGE,
    ConversationExchange,
    ConversationSessionManager,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "ConversationExchange",
    "ConversationSessionManager",
    "SessionLockPool",
]
