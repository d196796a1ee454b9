"""Agregador de settings do Intent Gateway.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# AI/LLM settings
from config.settings.ai import (
    OpenAISettings,
    get_openai_settings,
)

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    IdempotencyBackend,
    IdempotencySettings,
    get_base_settings,
    get_idempotency_settings,
)

# Gateway settings
from config.settings.gateway import (
    AuthSettings,
    ConcurrencySettings,
    SignatureMode,
    get_auth_settings,
    get_concurrency_settings,
)

# Upstream services
from config.settings.services import (
    UpstreamSettings,
    get_upstream_settings,
)

__all__ = [
    # Gateway
    "AuthSettings",
    # Base
    "BaseSettings",
    "ConcurrencySettings",
    "Environment",
    "IdempotencyBackend",
    "IdempotencySettings",
    # AI
    "OpenAISettings",
    "SignatureMode",
    # Upstream
    "UpstreamSettings",
    "get_auth_settings",
    "get_base_settings",
    "get_concurrency_settings",
    "get_idempotency_settings",
    "get_openai_settings",
    "get_upstream_settings",
]
