"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.idempotency import (
    DEFAULT_IDEMPOTENCY_TTL_SECONDS,
    IdempotencyBackend,
    IdempotencySettings,
    get_idempotency_settings,
)

__all__ = [
    "DEFAULT_IDEMPOTENCY_TTL_SECONDS",
    # Core
    "BaseSettings",
    # Types
    "Environment",
    "IdempotencyBackend",
    # Idempotency
    "IdempotencySettings",
    "get_base_settings",
    "get_idempotency_settings",
]
