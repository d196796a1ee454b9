"""
Estados do ciclo de vida de uma sessão de conversa remota.

Referência: o store remoto é a fonte da verdade; estes estados descrevem
a visão do gateway durante uma requisição.
"""

from enum import StrEnum


class ConversationState(StrEnum):
    """
    Estados de uma sessão de conversa.

    Estados não-terminais:
        - ABSENT: Nenhuma sessão remota existe ainda
        - CREATED: Sessão criada no store, primeira troca pendente
        - ACTIVE: Pelo menos uma troca concluída (turn >= 1)

    Estado terminal:
        - DELETED: Sessão removida (encerramento ou limpeza compensatória)
    """

    ABSENT = "ABSENT"
    CREATED = "CREATED"
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"

    def __str__(self) -> str:
        return self.value


# Uma vez removida, qualquer referência à sessão é NotFound
TERMINAL_STATES: frozenset[ConversationState] = frozenset({ConversationState.DELETED})

DEFAULT_INITIAL_STATE: ConversationState = ConversationState.ABSENT


def is_terminal(state: ConversationState) -> bool:
    """Verifica se o estado é terminal."""
    return state in TERMINAL_STATES


def is_valid_state(state: ConversationState) -> bool:
    return isinstance(state, ConversationState)
