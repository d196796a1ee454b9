"""Signature Gate — autenticidade e frescor de cada requisição.

Executa antes de qualquer outro processamento: nenhuma admissão,
consulta de cache ou handler acontece para requisição rejeitada.

Mensagem canônica (HMAC-SHA256, hex):
- modo "identity": "{x-user-id}:{x-timestamp}"
- modo "body":     "{x-timestamp}." + corpo bruto

O timestamp é o valor literal do header (segundos Unix; valores em
milissegundos são aceitos e convertidos).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.infra.crypto import validate_signature
from utils.errors import AuthError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from config.settings import AuthSettings, SignatureMode

logger = logging.getLogger(__name__)

HEADER_USER_ID = "x-user-id"
HEADER_REQUEST_ID = "x-request-id"
HEADER_SIGNATURE = "x-signature"
HEADER_TIMESTAMP = "x-timestamp"

REQUIRED_AUTH_HEADERS = (HEADER_USER_ID, HEADER_SIGNATURE, HEADER_TIMESTAMP)

# Acima disso o timestamp está em milissegundos
_MILLISECONDS_THRESHOLD = 10**11


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado puro da verificação (sem efeitos colaterais)."""

    valid: bool
    error: str | None = None
    user_id: str = ""
    timestamp: float | None = None


@dataclass(frozen=True, slots=True)
class VerifiedCaller:
    """Identidade autenticada de quem chama."""

    user_id: str
    timestamp: float


def normalize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Headers com chaves em minúsculas (HTTP é case-insensitive)."""
    return {key.lower(): value for key, value in headers.items()}


def canonical_message(
    mode: SignatureMode,
    user_id: str,
    raw_timestamp: str,
    raw_body: bytes,
) -> bytes:
    """Monta a mensagem canônica assinada pelo cliente."""
    if mode == "body":
        return raw_timestamp.encode("utf-8") + b"." + raw_body
    return f"{user_id}:{raw_timestamp}".encode()


def _parse_timestamp(raw: str) -> float | None:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    if value != value or value <= 0:  # NaN ou não positivo
        return None
    if value > _MILLISECONDS_THRESHOLD:
        value /= 1000
    return value


def verify_request_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    *,
    secret: str,
    mode: SignatureMode = "identity",
    freshness_window_seconds: int = 300,
    now: float | None = None,
) -> SignatureResult:
    """Verifica assinatura e frescor de uma requisição.

    Args:
        raw_body: Corpo bruto da requisição
        headers: Headers recebidos
        secret: Segredo compartilhado
        mode: Forma da mensagem canônica
        freshness_window_seconds: Tolerância |agora - timestamp|
        now: Instante atual (injetável para testes)

    Returns:
        SignatureResult (valid=False traz error com o motivo)
    """
    if not secret:
        return SignatureResult(valid=False, error="auth_not_configured")

    normalized = normalize_headers(headers)
    missing = [name for name in REQUIRED_AUTH_HEADERS if not normalized.get(name, "").strip()]
    if missing:
        return SignatureResult(valid=False, error=f"missing_headers:{','.join(missing)}")

    user_id = normalized[HEADER_USER_ID].strip()
    raw_timestamp = normalized[HEADER_TIMESTAMP].strip()
    timestamp = _parse_timestamp(raw_timestamp)
    if timestamp is None:
        return SignatureResult(valid=False, error="invalid_timestamp", user_id=user_id)

    current = time.time() if now is None else now
    if abs(current - timestamp) > freshness_window_seconds:
        return SignatureResult(
            valid=False, error="stale_timestamp", user_id=user_id, timestamp=timestamp
        )

    message = canonical_message(mode, user_id, raw_timestamp, raw_body)
    if not validate_signature(message, normalized[HEADER_SIGNATURE], secret.encode("utf-8")):
        return SignatureResult(
            valid=False, error="signature_mismatch", user_id=user_id, timestamp=timestamp
        )

    return SignatureResult(valid=True, user_id=user_id, timestamp=timestamp)


class SignatureGate:
    """Gate de autenticação por HMAC com janela de frescor."""

    __slots__ = ("_clock", "_freshness_window_seconds", "_mode", "_secret")

    def __init__(
        self,
        secret: str,
        *,
        freshness_window_seconds: int = 300,
        mode: SignatureMode = "identity",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._freshness_window_seconds = freshness_window_seconds
        self._mode = mode
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> SignatureGate:
        return cls(
            settings.hmac_secret,
            freshness_window_seconds=settings.freshness_window_seconds,
            mode=settings.signature_mode,
        )

    def verify(self, raw_body: bytes, headers: Mapping[str, str]) -> VerifiedCaller:
        """Autentica a requisição.

        Raises:
            AuthError: assinatura ausente, inválida ou fora da janela.
        """
        result = verify_request_signature(
            raw_body,
            headers,
            secret=self._secret,
            mode=self._mode,
            freshness_window_seconds=self._freshness_window_seconds,
            now=self._clock(),
        )
        if not result.valid or result.timestamp is None:
            reason = result.error or "invalid_signature"
            logger.warning("signature_rejected", extra={"reason": reason})
            raise AuthError(reason)
        return VerifiedCaller(user_id=result.user_id, timestamp=result.timestamp)
