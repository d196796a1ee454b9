"""
Máquina de estados de uma sessão de conversa.

Usada pelo ConversationSessionManager para garantir que cada passo
(criação, troca, limpeza, encerramento) respeita o grafo de transições.
"""

from typing import Any

from fsm.states.conversation import (
    DEFAULT_INITIAL_STATE,
    ConversationState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class InvalidTransitionError(RuntimeError):
    """Transição fora do grafo solicitada via `advance`."""


class ConversationStateMachine:
    """
    Máquina de estados de uma conversa, com histórico rastreável.

    Attributes:
        current_state: Estado atual
        turn: Turno atual (0 até a primeira troca)
        history: Transições realizadas
    """

    __slots__ = ("_conversation_id", "_current_state", "_history", "_turn")

    def __init__(
        self,
        initial_state: ConversationState | None = None,
        conversation_id: str = "",
        turn: int = 0,
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._conversation_id = conversation_id
        self._turn = turn
        self._history: list[StateTransition] = []

    @property
    def current_state(self) -> ConversationState:
        return self._current_state

    @property
    def conversation_id(self) -> str:
        return self._conversation_id

    @property
    def turn(self) -> int:
        return self._turn

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def bind(self, conversation_id: str) -> None:
        """Associa o ID remoto (conhecido só após a criação)."""
        self._conversation_id = conversation_id

    def can_transition_to(self, target: ConversationState) -> bool:
        return is_transition_valid(self._current_state, target)

    def get_valid_targets(self) -> frozenset[ConversationState]:
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: ConversationState,
        trigger: str,
        *,
        turn: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho
            turn: Novo turno (mantém o atual se None)
            metadata: Dados adicionais para auditoria

        Returns:
            TransitionResult com sucesso/falha
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        new_turn = self._turn if turn is None else turn
        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            turn=new_turn,
            metadata=metadata or {},
        )
        self._current_state = target
        self._turn = new_turn
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)

    def advance(
        self,
        target: ConversationState,
        trigger: str,
        *,
        turn: int | None = None,
    ) -> StateTransition:
        """Como `transition`, mas levanta InvalidTransitionError na recusa."""
        result = self.transition(target, trigger, turn=turn)
        if not result.success or result.transition is None:
            raise InvalidTransitionError(result.error_reason or "transição recusada")
        return result.transition

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo do estado atual para logs."""
        return {
            "conversation_id": self._conversation_id,
            "current_state": self._current_state.name,
            "turn": self._turn,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [t.to_log_dict() for t in self._history]


def create_fsm(
    conversation_id: str = "",
    initial_state: ConversationState | None = None,
    turn: int = 0,
) -> ConversationStateMachine:
    """Factory para a máquina de uma conversa."""
    return ConversationStateMachine(
        initial_state=initial_state,
        conversation_id=conversation_id,
        turn=turn,
    )


INITIAL_STATES = frozenset({DEFAULT_INITIAL_STATE})
