"""
Módulo FSM — ciclo de vida das sessões de conversa.

Estrutura:
    - states/: Estados (ConversationState enum)
    - transitions/: Grafo de transições (VALID_TRANSITIONS)
    - manager/: Máquina de estados (ConversationStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import (
    INITIAL_STATES,
    ConversationStateMachine,
    InvalidTransitionError,
    create_fsm,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    ConversationState,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "INITIAL_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "ConversationState",
    "ConversationStateMachine",
    "InvalidTransitionError",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
