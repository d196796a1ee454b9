"""Handler de diálogo multi-turno sobre resumos de aula.

Operações:
- chat: inicia conversa (sem conversation_id; summaries obrigatório)
  ou continua uma existente.
- close: encerra a conversa (remove a sessão remota).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from app.handlers._validation import require_user, validate_inputs
from app.protocols import HandlerContext, HandlerResult
from utils.errors import GatewayError, ValidationError

if TYPE_CHECKING:
    from app.conversations import ConversationSessionManager

logger = logging.getLogger(__name__)

DIALOGUE_HANDLER_NAME = "audio.dialogue"


class ChatInputs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    language: str = Field(min_length=2)
    question: str = Field(min_length=1, max_length=4000)
    summaries: str | None = Field(default=None, min_length=1)
    conversation_id: str | None = Field(default=None, min_length=1)


class CloseInputs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    conversation_id: str = Field(min_length=1)


class DialogueHandler:
    """Traduz o intent em chamadas ao ConversationSessionManager."""

    __slots__ = ("_conversations",)

    def __init__(self, conversations: ConversationSessionManager) -> None:
        self._conversations = conversations

    async def execute(self, context: HandlerContext) -> HandlerResult:
        try:
            require_user(context.user_id)
            if context.operation == "chat":
                return await self._chat(validate_inputs(ChatInputs, context.inputs))
            if context.operation == "close":
                return await self._close(validate_inputs(CloseInputs, context.inputs))
            raise ValidationError("unsupported operation")
        except GatewayError as exc:
            logger.info(
                "dialogue_request_failed",
                extra={
                    "operation": context.operation,
                    "kind": exc.kind,
                    "status_code": exc.status_code,
                },
            )
            return HandlerResult.from_error(exc)

    async def _chat(self, inputs: ChatInputs) -> HandlerResult:
        if inputs.conversation_id:
            exchange = await self._conversations.continue_conversation(
                inputs.conversation_id,
                inputs.question,
                language=inputs.language,
                summaries=inputs.summaries,
            )
        else:
            if not inputs.summaries:
                raise ValidationError("summaries is required for a new conversation")
            exchange = await self._conversations.start_conversation(
                inputs.language,
                inputs.summaries,
                inputs.question,
            )
        return HandlerResult.success(exchange.to_dict())

    async def _close(self, inputs: CloseInputs) -> HandlerResult:
        turn = await self._conversations.close_conversation(inputs.conversation_id)
        return HandlerResult.success(
            {"conversation_id": inputs.conversation_id, "turn": turn, "deleted": True}
        )
