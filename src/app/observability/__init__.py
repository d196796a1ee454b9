"""Observabilidade — logs estruturados e métricas.

Re-exporta contexto de requisição e métricas para uso em toda a aplicação.

Uso:
    from app.observability import request_context, get_correlation_id
    from app.observability import record_latency, record_admission
"""

from app.observability.correlation import (
    generate_correlation_id,
    get_correlation_id,
    get_log_context,
    get_plugin,
    plugin_context,
    request_context,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_admission,
    record_idempotency,
    record_latency,
)

__all__ = [
    "generate_correlation_id",
    "get_correlation_id",
    "get_log_context",
    "get_plugin",
    "plugin_context",
    "record_admission",
    "record_idempotency",
    "record_latency",
    "request_context",
    "reset_correlation_id",
    "set_correlation_id",
]
