"""Primitivas criptográficas (HMAC) usadas pelo Signature Gate."""

from .signature import SIGNATURE_PREFIX, compute_signature, validate_signature

__all__ = [
    "SIGNATURE_PREFIX",
    "compute_signature",
    "validate_signature",
]
