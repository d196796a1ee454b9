"""Assinatura HMAC-SHA256 de requisições."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(message: bytes, secret: bytes) -> str:
    """Calcula HMAC-SHA256 (hex) de uma mensagem canônica."""
    return hmac.new(secret, message, hashlib.sha256).hexdigest()


def validate_signature(message: bytes, signature: str, secret: bytes) -> bool:
    """Valida assinatura HMAC-SHA256 em tempo constante.

    Args:
        message: Mensagem canônica assinada pelo cliente
        signature: Header x-signature (hex, prefixo "sha256=" opcional)
        secret: Segredo compartilhado em bytes

    Returns:
        True se assinatura válida
    """
    provided = signature.strip()
    if provided.startswith(SIGNATURE_PREFIX):
        provided = provided[len(SIGNATURE_PREFIX):]
    if not provided:
        return False
    computed = compute_signature(message, secret)
    # bytes: compare_digest rejeita str não-ASCII com TypeError
    candidate = provided.lower().encode("utf-8", "replace")
    return hmac.compare_digest(computed.encode("ascii"), candidate)
