"""Implementações concretas de IO para IA (modelo de diálogo)."""

from app.infra.ai.dialogue_client import (
    OpenAIDialogueClient,
    build_additional_summary,
    build_initial_prompt,
    extract_answer,
)

__all__ = [
    "OpenAIDialogueClient",
    "build_additional_summary",
    "build_initial_prompt",
    "extract_answer",
]
