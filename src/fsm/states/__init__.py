"""
Exports públicos do módulo fsm/states.

Estados do ciclo de vida de conversas remotas.
"""

from fsm.states.conversation import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    ConversationState,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "ConversationState",
    "is_terminal",
    "is_valid_state",
]
