"""Settings dos serviços upstream (dados e autenticação)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class UpstreamSettings:
    """Configurações dos serviços HTTP consumidos pelos handlers.

    Attributes:
        data_service_url: URL base do serviço de dados (lectures)
        auth_service_url: URL base do serviço de autenticação
        timeout_seconds: Timeout das chamadas HTTP
    """

    data_service_url: str = ""
    auth_service_url: str = ""
    timeout_seconds: float = 15.0

    def validate(self) -> list[str]:
        """Valida configurações de upstream.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        for env_name, url in (
            ("DATA_SERVICE_URL", self.data_service_url),
            ("AUTH_SERVICE_URL", self.auth_service_url),
        ):
            if not url:
                errors.append(f"{env_name} não configurado")
            elif not url.startswith(("http://", "https://")):
                errors.append(f"{env_name} inválida: {url}")

        if self.timeout_seconds <= 0:
            errors.append("UPSTREAM_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_upstream_from_env() -> UpstreamSettings:
    """Carrega UpstreamSettings de variáveis de ambiente."""
    return UpstreamSettings(
        data_service_url=os.getenv("DATA_SERVICE_URL", ""),
        auth_service_url=os.getenv("AUTH_SERVICE_URL", ""),
        timeout_seconds=float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "15")),
    )


@lru_cache(maxsize=1)
def get_upstream_settings() -> UpstreamSettings:
    """Retorna instância cacheada de UpstreamSettings."""
    return _load_upstream_from_env()
