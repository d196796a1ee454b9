"""Cliente de diálogo OpenAI (Responses API com conversation_id).

O histórico da conversa fica do lado do provedor; cada chamada envia
apenas as mensagens novas da troca.
"""

from __future__ import annotations

import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from app.protocols import DialogueClientProtocol, DialogueTurn
from config.settings.ai.openai import OpenAISettings, get_openai_settings
from utils.errors import UpstreamError

logger = logging.getLogger(__name__)

_UPSTREAM = "openai"


def build_initial_prompt(language: str, summaries: str) -> str:
    """Prompt de sistema da primeira troca (resumos obrigatórios)."""
    return "\n\n".join(
        [
            f"You are a lecture assistant. Always answer in the language '{language}'.",
            "Use the lecture stage summaries below to answer the question. "
            "If the answer is not in them, say that no related information was found.",
            "Stage summaries:",
            summaries.strip(),
        ]
    )


def build_additional_summary(summaries: str) -> str:
    """Mensagem developer com resumos adicionais em trocas seguintes."""
    return "\n".join(["Additional stage information:", summaries.strip()])


def _message(role: str, text: str) -> dict[str, Any]:
    return {"role": role, "content": [{"type": "input_text", "text": text}]}


def extract_answer(response: Any) -> str:
    """Texto da resposta: output_text ou concatenação das partes de output."""
    output_text = getattr(response, "output_text", None)
    if isinstance(output_text, str) and output_text.strip():
        return output_text.strip()

    parts: list[str] = []
    for item in getattr(response, "output", None) or []:
        for part in getattr(item, "content", None) or []:
            text = getattr(part, "text", None)
            if isinstance(text, str):
                parts.append(text)
    return "\n".join(parts).strip()


class OpenAIDialogueClient(DialogueClientProtocol):
    """Implementa DialogueClientProtocol com o SDK oficial (AsyncOpenAI)."""

    __slots__ = ("_client", "_model")

    def __init__(
        self,
        *,
        settings: OpenAISettings | None = None,
        model: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        cfg = settings or get_openai_settings()
        self._model = model or cfg.dialogue_model
        if client is not None:
            self._client = client
        else:
            self._client = AsyncOpenAI(
                api_key=cfg.api_key,
                base_url=cfg.base_url,
                timeout=cfg.timeout_seconds,
                max_retries=cfg.max_retries,
            )

    @property
    def client(self) -> AsyncOpenAI:
        return self._client

    async def start(self, conversation_id: str, turn: DialogueTurn) -> str:
        messages = [
            _message("system", build_initial_prompt(turn.language, turn.summaries or "")),
            _message("user", turn.question),
        ]
        return await self._create(conversation_id, messages)

    async def reply(self, conversation_id: str, turn: DialogueTurn) -> str:
        messages: list[dict[str, Any]] = []
        if turn.summaries:
            messages.append(_message("developer", build_additional_summary(turn.summaries)))
        messages.append(_message("user", turn.question))
        return await self._create(conversation_id, messages)

    async def _create(self, conversation_id: str, messages: list[dict[str, Any]]) -> str:
        try:
            response = await self._client.responses.create(
                model=self._model,
                conversation=conversation_id,
                input=messages,
            )
        except openai.APIStatusError as exc:
            logger.warning(
                "openai_dialogue_http_error",
                extra={"status_code": exc.status_code, "error_type": type(exc).__name__},
            )
            raise UpstreamError(
                "dialogue failed",
                upstream_status=exc.status_code,
                details={"upstream": _UPSTREAM},
            ) from exc
        except openai.OpenAIError as exc:
            logger.warning("openai_dialogue_failed", extra={"error_type": type(exc).__name__})
            raise UpstreamError("dialogue failed", details={"upstream": _UPSTREAM}) from exc

        answer = extract_answer(response)
        if not answer:
            logger.warning("openai_dialogue_empty_response")
        return answer
