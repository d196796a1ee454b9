"""Agregador de settings do gateway (admissão e autenticação)."""

from __future__ import annotations

from config.settings.gateway.auth import (
    DEFAULT_FRESHNESS_WINDOW_SECONDS,
    AuthSettings,
    SignatureMode,
    get_auth_settings,
)
from config.settings.gateway.concurrency import (
    ConcurrencySettings,
    get_concurrency_settings,
    parse_per_handler_limits,
)

__all__ = [
    "DEFAULT_FRESHNESS_WINDOW_SECONDS",
    "AuthSettings",
    "ConcurrencySettings",
    "SignatureMode",
    "get_auth_settings",
    "get_concurrency_settings",
    "parse_per_handler_limits",
]
