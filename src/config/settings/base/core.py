"""Settings base do Intent Gateway.

Ambiente de execução e conexão Redis compartilhada pelo cache de
idempotência e pelo readiness.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "development": "development",
    "dev": "development",
    "local": "development",
    "staging": "staging",
    "stage": "staging",
    "production": "production",
    "prod": "production",
}


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do gateway.

    Attributes:
        environment: development|staging|production
        service_name: Identificação do serviço nos logs
        redis_url: URL do Redis (vazia = sem Redis)
    """

    environment: Environment = "development"
    service_name: str = "intent-gateway"
    redis_url: str = ""

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def strict_validation(self) -> bool:
        """Settings inválidas bloqueiam o boot fora de development."""
        return not self.is_development

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.redis_url and not self.redis_url.startswith(("redis://", "rediss://", "unix://")):
            errors.append(f"REDIS_URL com esquema inválido: {self.redis_url.split(':', 1)[0]}")
        return errors


def _parse_environment(raw: str) -> Environment:
    """Aceita aliases curtos; valor desconhecido cai em development."""
    return _ENVIRONMENT_ALIASES.get(raw.strip().lower(), "development")


def _load_base_from_env() -> BaseSettings:
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "intent-gateway"),
        redis_url=os.getenv("REDIS_URL", "").strip(),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
