"""Settings de idempotência.

Configurações do cache de respostas usado para deduplicar retries.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

IdempotencyBackend = Literal["memory", "redis"]

DEFAULT_IDEMPOTENCY_TTL_SECONDS = 60


@dataclass(frozen=True)
class IdempotencySettings:
    """Configurações de idempotência.

    Attributes:
        backend: Backend para respostas cacheadas (memory|redis)
        ttl_seconds: Janela em que um retry recebe a resposta cacheada
    """

    backend: IdempotencyBackend = "memory"
    ttl_seconds: int = DEFAULT_IDEMPOTENCY_TTL_SECONDS

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de idempotência.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"IDEMPOTENCY_BACKEND inválido: {self.backend}")

        if self.backend == "redis" and not base.redis_url:
            errors.append("IDEMPOTENCY_BACKEND=redis requer REDIS_URL configurado")

        if self.ttl_seconds <= 0:
            errors.append("IDEMPOTENCY_TTL_SECONDS deve ser > 0")

        return errors


def _load_idempotency_from_env() -> IdempotencySettings:
    """Carrega IdempotencySettings de variáveis de ambiente."""
    backend_str = os.getenv("IDEMPOTENCY_BACKEND", "memory").lower()
    backend: IdempotencyBackend = "redis" if backend_str == "redis" else "memory"
    return IdempotencySettings(
        backend=backend,
        ttl_seconds=int(
            os.getenv("IDEMPOTENCY_TTL_SECONDS", str(DEFAULT_IDEMPOTENCY_TTL_SECONDS))
        ),
    )


@lru_cache(maxsize=1)
def get_idempotency_settings() -> IdempotencySettings:
    """Retorna instância cacheada de IdempotencySettings."""
    return _load_idempotency_from_env()
