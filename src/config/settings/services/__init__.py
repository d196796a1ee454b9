"""Agregador de settings dos serviços upstream."""

from __future__ import annotations

from config.settings.services.upstream import (
    UpstreamSettings,
    get_upstream_settings,
)

__all__ = [
    "UpstreamSettings",
    "get_upstream_settings",
]
