"""Gerenciador de sessões de conversa multi-turno.

O store remoto é dono da sessão (metadados `language` e `turn`); o modelo
de linguagem mantém o histórico pela mesma conversation_id.

Garantias:
- start: qualquer falha depois da criação remota apaga a sessão antes de
  propagar o erro (limpeza compensatória). Falha na limpeza é logada e o
  erro original prevalece.
- continue/close: serializados por conversation_id dentro do processo.
  Duas continuações concorrentes terminam em turn inicial + 2. Entre
  processos a garantia é best-effort.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.conversations.locks import SessionLockPool
from app.protocols import DialogueTurn
from fsm import ConversationState, ConversationStateMachine, create_fsm
from utils.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from app.protocols import ConversationStoreProtocol, DialogueClientProtocol

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "zh-CN"


@dataclass(frozen=True, slots=True)
class ConversationExchange:
    """Resultado de uma troca concluída."""

    answer: str
    conversation_id: str
    turn: int
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "answer": self.answer,
            "conversation_id": self.conversation_id,
            "turn": self.turn,
            "created_at": self.created_at,
        }


class ConversationSessionManager:
    """Ciclo de vida de conversas: início, continuação e encerramento."""

    __slots__ = ("_default_language", "_dialogue", "_locks", "_store")

    def __init__(
        self,
        store: ConversationStoreProtocol,
        dialogue: DialogueClientProtocol,
        *,
        default_language: str = DEFAULT_LANGUAGE,
        locks: SessionLockPool | None = None,
    ) -> None:
        """Inicializa gerenciador.

        Args:
            store: Store remoto de conversas
            dialogue: Cliente do modelo de linguagem
            default_language: Idioma quando nem a requisição nem a sessão informam
            locks: Pool de locks por sessão (compartilhável entre managers)
        """
        self._store = store
        self._dialogue = dialogue
        self._default_language = default_language
        self._locks = locks or SessionLockPool()

    @property
    def locks(self) -> SessionLockPool:
        return self._locks

    async def start_conversation(
        self,
        language: str,
        summaries: str,
        question: str,
    ) -> ConversationExchange:
        """Cria a sessão remota e executa a primeira troca.

        Raises:
            UpstreamError: falha do store ou do modelo (sessão já limpa)
        """
        machine = create_fsm()
        conversation = await self._store.create({"language": language, "turn": "0"})
        machine.bind(conversation.conversation_id)
        machine.advance(ConversationState.CREATED, "remote_created")

        async with self._delete_on_failure(machine):
            answer = await self._dialogue.start(
                conversation.conversation_id,
                DialogueTurn(language=language, question=question, summaries=summaries),
            )
            await self._store.update(
                conversation.conversation_id,
                {**conversation.metadata, "language": language, "turn": "1"},
            )

        machine.advance(ConversationState.ACTIVE, "exchange_completed", turn=1)
        logger.info("conversation_started", extra=machine.get_state_summary())
        return ConversationExchange(
            answer=answer,
            conversation_id=conversation.conversation_id,
            turn=1,
            created_at=_now_iso(),
        )

    async def continue_conversation(
        self,
        conversation_id: str,
        question: str,
        *,
        language: str | None = None,
        summaries: str | None = None,
    ) -> ConversationExchange:
        """Executa uma nova troca em sessão existente.

        Raises:
            ConversationNotFoundError: sessão inexistente ou removida
            UpstreamError: falha do store ou do modelo (sessão mantida)
        """
        async with self._locks.hold(conversation_id):
            conversation = await self._store.fetch(conversation_id)
            current_turn = conversation.turn
            machine = create_fsm(
                conversation_id,
                ConversationState.ACTIVE if current_turn >= 1 else ConversationState.CREATED,
                turn=current_turn,
            )
            effective_language = language or conversation.language or self._default_language

            answer = await self._dialogue.reply(
                conversation_id,
                DialogueTurn(language=effective_language, question=question, summaries=summaries),
            )
            next_turn = current_turn + 1
            await self._store.update(
                conversation_id,
                {
                    **conversation.metadata,
                    "language": effective_language,
                    "turn": str(next_turn),
                },
            )
            machine.advance(ConversationState.ACTIVE, "exchange_completed", turn=next_turn)

        logger.info("conversation_continued", extra=machine.get_state_summary())
        return ConversationExchange(
            answer=answer,
            conversation_id=conversation_id,
            turn=next_turn,
            created_at=_now_iso(),
        )

    async def close_conversation(self, conversation_id: str) -> int:
        """Remove a sessão remota; referências futuras viram NotFound.

        Returns:
            Último turno registrado na sessão.

        Raises:
            ConversationNotFoundError: sessão inexistente ou já removida
        """
        async with self._locks.hold(conversation_id):
            conversation = await self._store.fetch(conversation_id)
            machine = create_fsm(
                conversation_id,
                ConversationState.ACTIVE if conversation.turn >= 1 else ConversationState.CREATED,
                turn=conversation.turn,
            )
            await self._store.delete(conversation_id)
            machine.advance(ConversationState.DELETED, "closed_by_client")

        logger.info("conversation_closed", extra=machine.get_state_summary())
        return conversation.turn

    @asynccontextmanager
    async def _delete_on_failure(self, machine: ConversationStateMachine) -> AsyncIterator[None]:
        """Apaga a sessão recém-criada se o bloco falhar (inclui cancelamento)."""
        try:
            yield
        except BaseException as exc:
            await self._compensate(machine, exc)
            raise

    async def _compensate(self, machine: ConversationStateMachine, cause: BaseException) -> None:
        conversation_id = machine.conversation_id
        try:
            await self._store.delete(conversation_id)
        except NotFoundError:
            # Já removida por outro caminho
            pass
        except Exception as cleanup_exc:
            logger.error(
                "conversation_cleanup_failed",
                extra={
                    "conversation_id": conversation_id,
                    "cause_type": type(cause).__name__,
                    "error_type": type(cleanup_exc).__name__,
                },
            )
            return
        machine.advance(ConversationState.DELETED, "compensating_delete")
        logger.warning(
            "conversation_cleanup_completed",
            extra={"conversation_id": conversation_id, "cause_type": type(cause).__name__},
        )


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()
