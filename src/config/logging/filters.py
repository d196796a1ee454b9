"""Filters de logging para injeção de contexto de requisição.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- plugin: nome do handler em execução ("" fora do dispatch)
- service: nome do serviço (ex: intent_gateway)

Nunca adicionar payloads brutos, segredos ou conteúdo do usuário aos logs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

CONTEXT_FIELDS = ("correlation_id", "plugin")


class RequestContextFilter(logging.Filter):
    """Injeta service e campos de contexto em cada record de log.

    Valores passados explicitamente via `extra` têm precedência.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        context_getter: Função que retorna os campos de contexto atuais
            (ex: app.observability.get_log_context).
    """

    def __init__(
        self,
        service_name: str,
        context_getter: Callable[[], Mapping[str, str]] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_context = context_getter or dict

    def filter(self, record: logging.LogRecord) -> bool:
        context = self._get_context()
        for field_name in CONTEXT_FIELDS:
            if not getattr(record, field_name, None):
                setattr(record, field_name, context.get(field_name, ""))
        record.service = self._service_name
        return True
