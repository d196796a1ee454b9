"""Exceções de domínio do gateway e de infraestrutura.

Taxonomia (status HTTP equivalente):
- AuthError (401): assinatura ausente, inválida ou expirada
- AdmissionRejectedError (429): capacidade esgotada, retentável com backoff
- ValidationError (400): entrada malformada (culpa do cliente)
- NotFoundError (404): handler ou conversa desconhecidos
- UpstreamError (502 ou status do upstream quando < 500)
- InternalError (500): qualquer falha não prevista
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base da taxonomia de erros do gateway."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str = "", *, details: Any = None) -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind
        self.details = details


class AuthError(GatewayError):
    """Assinatura inválida, expirada ou headers obrigatórios ausentes."""

    kind = "auth_error"
    status_code = 401


class AdmissionRejectedError(GatewayError):
    """Capacidade esgotada (fila cheia ou timeout na fila)."""

    kind = "admission_rejected"
    status_code = 429

    def __init__(
        self,
        message: str = "",
        *,
        handler_name: str = "",
        retry_after_seconds: int = 1,
    ) -> None:
        super().__init__(message or "capacity exhausted")
        self.handler_name = handler_name
        self.retry_after_seconds = retry_after_seconds


class ValidationError(GatewayError):
    """Entrada malformada."""

    kind = "validation_error"
    status_code = 400


class NotFoundError(GatewayError):
    """Recurso desconhecido."""

    kind = "not_found"
    status_code = 404


class HandlerNotFoundError(NotFoundError):
    """Nenhum handler registrado com o nome informado."""

    def __init__(self, handler_name: str) -> None:
        super().__init__(f"unknown plugin: {handler_name}")
        self.handler_name = handler_name


class ConversationNotFoundError(NotFoundError):
    """Conversa inexistente (ou já removida) no store remoto."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"unknown conversation: {conversation_id}")
        self.conversation_id = conversation_id


class UpstreamError(GatewayError):
    """Falha de serviço externo.

    Status < 500 reportado pelo upstream é repassado ao cliente;
    demais casos viram 502.
    """

    kind = "upstream_error"
    status_code = 502

    def __init__(
        self,
        message: str = "",
        *,
        upstream_status: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message or "upstream failure", details=details)
        self.upstream_status = upstream_status
        if upstream_status is not None and 400 <= upstream_status < 500:
            self.status_code = upstream_status


class InternalError(GatewayError):
    """Falha interna não prevista."""

    kind = "internal_error"
    status_code = 500


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""
