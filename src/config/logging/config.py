"""Configuração centralizada de logging.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app.bootstrap)
    configure_logging(level="INFO", service_name="intent_gateway")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("dispatch_completed", extra={"latency_ms": 42})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import RequestContextFilter
from config.logging.formatters import create_json_formatter, create_plain_formatter

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "intent_gateway"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    context_getter: Callable[[], Mapping[str, str]] | None = None,
    *,
    json_output: bool = True,
) -> None:
    """Configura logging estruturado para o serviço.

    Deve ser chamada uma vez na inicialização do serviço.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        context_getter: Função que retorna correlation_id/plugin do
            contexto atual (ex: app.observability.get_log_context).
        json_output: False usa formato texto (desenvolvimento/testes).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter() if json_output else create_plain_formatter())
    handler.addFilter(RequestContextFilter(service_name, context_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado (geralmente __name__)."""
    return logging.getLogger(name)


def log_recovered_failure(
    logger: logging.Logger,
    component: str,
    reason: str,
    status_code: int,
    elapsed_ms: float | None = None,
) -> None:
    """Log observável de falha convertida em resultado uniforme.

    Args:
        logger: Logger instance.
        component: Plugin ou componente (ex: "audio.dialogue").
        reason: Razão curta, sem PII (ex: "handler_timeout").
        status_code: Status do resultado devolvido ao cliente.
        elapsed_ms: Tempo decorrido em ms (quando aplicável).
    """
    extra: dict[str, object] = {
        "recovered": True,
        "component": component,
        "reason": reason,
        "status_code": status_code,
    }
    if elapsed_ms is not None:
        extra["elapsed_ms"] = round(elapsed_ms, 2)

    logger.warning("Failure recovered for %s", component, extra=extra)
