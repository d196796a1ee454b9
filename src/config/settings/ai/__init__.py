"""Agregador de settings de AI/LLM.

Re-exporta todas as settings de IA para uso externo.
"""

from __future__ import annotations

from config.settings.ai.openai import (
    DEFAULT_OPENAI_BASE_URL,
    OpenAISettings,
    get_openai_settings,
)

__all__ = [
    "DEFAULT_OPENAI_BASE_URL",
    # OpenAI
    "OpenAISettings",
    "get_openai_settings",
]
