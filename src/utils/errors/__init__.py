"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AdmissionRejectedError,
    AuthError,
    ConversationNotFoundError,
    GatewayError,
    HandlerNotFoundError,
    InfrastructureError,
    InternalError,
    NotFoundError,
    RedisConnectionError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "AdmissionRejectedError",
    "AuthError",
    "ConversationNotFoundError",
    "GatewayError",
    "HandlerNotFoundError",
    "InfrastructureError",
    "InternalError",
    "NotFoundError",
    "RedisConnectionError",
    "UpstreamError",
    "ValidationError",
]
