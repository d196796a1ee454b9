"""Formatters de logging estruturado.

Logs JSON com campos obrigatórios em ordem fixa; campos de `extra`
são anexados ao objeto pelo JsonFormatter.
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado (ordem de saída)
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "plugin",
    "service",
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-02-02 10:30:00,123",
            "level": "INFO",
            "logger": "app.gateway.dispatcher",
            "message": "dispatch_completed",
            "correlation_id": "req-123",
            "plugin": "echo",
            "service": "intent_gateway",
            "status_code": 200
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)


def create_plain_formatter() -> logging.Formatter:
    """Formatter texto para desenvolvimento local e testes."""
    return logging.Formatter(PLAIN_FORMAT)
