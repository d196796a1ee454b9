"""Handlers de plugin registrados no gateway."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.gateway import HandlerRegistry
from app.handlers.auth import (
    AUTH_PASSWORD_HANDLER_NAME,
    AUTH_REGISTER_HANDLER_NAME,
    AuthCredentialsHandler,
    login_handler,
    register_handler,
)
from app.handlers.data_proxy import DATA_PROXY_HANDLER_NAME, DataProxyHandler
from app.handlers.dialogue import DIALOGUE_HANDLER_NAME, DialogueHandler
from app.handlers.echo import ECHO_HANDLER_NAME, EchoHandler

if TYPE_CHECKING:
    from app.conversations import ConversationSessionManager
    from app.protocols import AuthServiceClientProtocol, DataServiceClientProtocol

logger = logging.getLogger(__name__)


def build_registry(
    *,
    conversations: ConversationSessionManager | None = None,
    data_client: DataServiceClientProtocol | None = None,
    auth_client: AuthServiceClientProtocol | None = None,
) -> HandlerRegistry:
    """Registra os handlers disponíveis e congela o registry.

    Handler sem dependência configurada não é registrado; chamadas a ele
    recebem 404 (plugin desconhecido).
    """
    registry = HandlerRegistry()
    registry.register(ECHO_HANDLER_NAME, EchoHandler())

    if conversations is not None:
        registry.register(DIALOGUE_HANDLER_NAME, DialogueHandler(conversations))
    else:
        logger.warning("handler_disabled", extra={"handler": DIALOGUE_HANDLER_NAME})

    if data_client is not None:
        registry.register(DATA_PROXY_HANDLER_NAME, DataProxyHandler(data_client))
    else:
        logger.warning("handler_disabled", extra={"handler": DATA_PROXY_HANDLER_NAME})

    if auth_client is not None:
        registry.register(AUTH_PASSWORD_HANDLER_NAME, login_handler(auth_client))
        registry.register(AUTH_REGISTER_HANDLER_NAME, register_handler(auth_client))
    else:
        for name in (AUTH_PASSWORD_HANDLER_NAME, AUTH_REGISTER_HANDLER_NAME):
            logger.warning("handler_disabled", extra={"handler": name})

    registry.freeze()
    return registry


__all__ = [
    "AUTH_PASSWORD_HANDLER_NAME",
    "AUTH_REGISTER_HANDLER_NAME",
    "DATA_PROXY_HANDLER_NAME",
    "DIALOGUE_HANDLER_NAME",
    "ECHO_HANDLER_NAME",
    "AuthCredentialsHandler",
    "DataProxyHandler",
    "DialogueHandler",
    "EchoHandler",
    "build_registry",
]
