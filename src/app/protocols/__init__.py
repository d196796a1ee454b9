"""Protocolos e contratos do core da aplicação."""

from .conversation_store import (
    ConversationStoreProtocol,
    DialogueClientProtocol,
    DialogueTurn,
    RemoteConversation,
)
from .handler import Handler, HandlerContext, HandlerResult
from .http_client import AuthServiceClientProtocol, DataServiceClientProtocol
from .idempotency import ResponseStoreProtocol

__all__ = [
    "AuthServiceClientProtocol",
    "ConversationStoreProtocol",
    "DataServiceClientProtocol",
    "DialogueClientProtocol",
    "DialogueTurn",
    "Handler",
    "HandlerContext",
    "HandlerResult",
    "RemoteConversation",
    "ResponseStoreProtocol",
]
