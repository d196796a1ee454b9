"""Settings de OpenAI.

Configurações para o cliente de diálogo (Responses API).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


@dataclass(frozen=True)
class OpenAISettings:
    """Configurações do OpenAI.

    Attributes:
        api_key: Chave da API OpenAI (também usada no store de conversas)
        base_url: URL base da API (também base do store de conversas)
        dialogue_model: Modelo usado no handler de diálogo
        timeout_seconds: Timeout para chamadas à API
        max_retries: Máximo de tentativas em caso de erro
        enabled: Se integração OpenAI está habilitada
    """

    api_key: str = ""
    base_url: str = DEFAULT_OPENAI_BASE_URL
    dialogue_model: str = "gpt-4o-mini"
    timeout_seconds: float = 30.0
    max_retries: int = 2
    enabled: bool = True

    def validate(self) -> list[str]:
        """Valida configurações do OpenAI.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.enabled and not self.api_key:
            errors.append("OPENAI_API_KEY não configurado mas OPENAI_ENABLED=true")

        if not self.base_url.startswith(("http://", "https://")):
            errors.append(f"OPENAI_BASE_URL inválida: {self.base_url}")

        if self.timeout_seconds <= 0:
            errors.append("OPENAI_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("OPENAI_MAX_RETRIES deve ser >= 0")

        return errors


def _load_openai_from_env() -> OpenAISettings:
    """Carrega OpenAISettings de variáveis de ambiente."""
    return OpenAISettings(
        api_key=os.getenv("OPENAI_API_KEY", ""),
        base_url=os.getenv("OPENAI_BASE_URL", DEFAULT_OPENAI_BASE_URL),
        dialogue_model=os.getenv("OPENAI_DIALOGUE_MODEL", "gpt-4o-mini"),
        timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
        enabled=os.getenv("OPENAI_ENABLED", "true").lower() in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_openai_settings() -> OpenAISettings:
    """Retorna instância cacheada de OpenAISettings."""
    return _load_openai_from_env()
