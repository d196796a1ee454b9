"""Settings de autenticação por assinatura HMAC."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

SignatureMode = Literal["identity", "body"]

DEFAULT_FRESHNESS_WINDOW_SECONDS = 300


@dataclass(frozen=True)
class AuthSettings:
    """Configurações do Signature Gate.

    Attributes:
        hmac_secret: Segredo compartilhado para HMAC-SHA256
        freshness_window_seconds: Tolerância de relógio (anti-replay)
        signature_mode: "identity" assina user_id:timestamp,
            "body" assina timestamp.corpo_bruto
    """

    hmac_secret: str = ""
    freshness_window_seconds: int = DEFAULT_FRESHNESS_WINDOW_SECONDS
    signature_mode: SignatureMode = "identity"

    def validate(self) -> list[str]:
        """Valida configurações de autenticação.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.hmac_secret:
            errors.append("AUTH_HMAC_SECRET não configurado")

        if self.freshness_window_seconds <= 0:
            errors.append("AUTH_FRESHNESS_WINDOW_SECONDS deve ser > 0")

        if self.signature_mode not in ("identity", "body"):
            errors.append(f"AUTH_SIGNATURE_MODE inválido: {self.signature_mode}")

        return errors


def _load_auth_from_env() -> AuthSettings:
    """Carrega AuthSettings de variáveis de ambiente."""
    mode_str = os.getenv("AUTH_SIGNATURE_MODE", "identity").lower()
    mode: SignatureMode = "body" if mode_str == "body" else "identity"
    return AuthSettings(
        hmac_secret=os.getenv("AUTH_HMAC_SECRET", ""),
        freshness_window_seconds=int(
            os.getenv(
                "AUTH_FRESHNESS_WINDOW_SECONDS",
                str(DEFAULT_FRESHNESS_WINDOW_SECONDS),
            )
        ),
        signature_mode=mode,
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Retorna instância cacheada de AuthSettings."""
    return _load_auth_from_env()
