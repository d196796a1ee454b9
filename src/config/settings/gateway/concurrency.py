"""Settings de admissão/concorrência.

Limites global e por handler usados pelo AdmissionController.

Formato de CONCURRENCY_PER_HANDLER:
    "audio.dialogue=2,data.proxy=16"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

DEFAULT_GLOBAL_LIMIT = 64
DEFAULT_PER_HANDLER_LIMIT = 8
DEFAULT_MAX_QUEUE = 128
DEFAULT_QUEUE_TIMEOUT_SECONDS = 10.0
DEFAULT_HANDLER_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class ConcurrencySettings:
    """Configurações de concorrência.

    Attributes:
        global_limit: Máximo de execuções simultâneas no processo
        per_handler: Limites explícitos por nome de handler
        per_handler_default: Limite para handlers sem entrada explícita
        max_queue: Tamanho máximo da fila FIFO (0 = rejeita sem enfileirar)
        queue_timeout_seconds: Espera máxima na fila antes de rejeitar
        handler_timeout_seconds: Tempo máximo de execução de um handler
    """

    global_limit: int = DEFAULT_GLOBAL_LIMIT
    per_handler: dict[str, int] = field(default_factory=dict)
    per_handler_default: int = DEFAULT_PER_HANDLER_LIMIT
    max_queue: int = DEFAULT_MAX_QUEUE
    queue_timeout_seconds: float = DEFAULT_QUEUE_TIMEOUT_SECONDS
    handler_timeout_seconds: float = DEFAULT_HANDLER_TIMEOUT_SECONDS

    def limit_for(self, handler_name: str) -> int:
        """Limite efetivo para um handler."""
        return self.per_handler.get(handler_name, self.per_handler_default)

    def validate(self) -> list[str]:
        """Valida configurações de concorrência.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.global_limit < 1:
            errors.append("CONCURRENCY_GLOBAL_LIMIT deve ser >= 1")

        if self.per_handler_default < 1:
            errors.append("CONCURRENCY_PER_HANDLER_DEFAULT deve ser >= 1")

        for name, limit in self.per_handler.items():
            if limit < 1:
                errors.append(f"CONCURRENCY_PER_HANDLER[{name}] deve ser >= 1")

        if self.max_queue < 0:
            errors.append("ADMISSION_MAX_QUEUE deve ser >= 0")

        if self.queue_timeout_seconds <= 0:
            errors.append("ADMISSION_QUEUE_TIMEOUT_SECONDS deve ser > 0")

        if self.handler_timeout_seconds <= 0:
            errors.append("HANDLER_TIMEOUT_SECONDS deve ser > 0")

        return errors


def parse_per_handler_limits(raw: str) -> dict[str, int]:
    """Converte "nome=limite,nome=limite" em dict.

    Entradas vazias são ignoradas; limite não numérico levanta ValueError.
    """
    limits: dict[str, int] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, value = item.rpartition("=")
        if not sep or not name.strip():
            raise ValueError(f"Entrada inválida em CONCURRENCY_PER_HANDLER: {item!r}")
        limits[name.strip()] = int(value)
    return limits


def _load_concurrency_from_env() -> ConcurrencySettings:
    """Carrega ConcurrencySettings de variáveis de ambiente."""
    return ConcurrencySettings(
        global_limit=int(os.getenv("CONCURRENCY_GLOBAL_LIMIT", str(DEFAULT_GLOBAL_LIMIT))),
        per_handler=parse_per_handler_limits(os.getenv("CONCURRENCY_PER_HANDLER", "")),
        per_handler_default=int(
            os.getenv("CONCURRENCY_PER_HANDLER_DEFAULT", str(DEFAULT_PER_HANDLER_LIMIT))
        ),
        max_queue=int(os.getenv("ADMISSION_MAX_QUEUE", str(DEFAULT_MAX_QUEUE))),
        queue_timeout_seconds=float(
            os.getenv("ADMISSION_QUEUE_TIMEOUT_SECONDS", str(DEFAULT_QUEUE_TIMEOUT_SECONDS))
        ),
        handler_timeout_seconds=float(
            os.getenv("HANDLER_TIMEOUT_SECONDS", str(DEFAULT_HANDLER_TIMEOUT_SECONDS))
        ),
    )


@lru_cache(maxsize=1)
def get_concurrency_settings() -> ConcurrencySettings:
    """Retorna instância cacheada de ConcurrencySettings."""
    return _load_concurrency_from_env()
