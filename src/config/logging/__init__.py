"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="intent_gateway")
    logger = get_logger(__name__)
    logger.info("dispatch_completed", extra={"latency_ms": 42})

Campos obrigatórios em todo log:
- asctime, level, logger, message
- correlation_id, plugin, service
"""

from config.logging.config import configure_logging, get_logger, log_recovered_failure
from config.logging.filters import CONTEXT_FIELDS, RequestContextFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
    create_plain_formatter,
)

__all__ = [
    "CONTEXT_FIELDS",
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "RequestContextFilter",
    "configure_logging",
    "create_json_formatter",
    "create_plain_formatter",
    "get_logger",
    "log_recovered_failure",
]
