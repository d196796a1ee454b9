"""
Exports públicos do módulo fsm/manager.

Máquina de estados (ConversationStateMachine) das sessões de conversa.
"""

from fsm.manager.machine import (
    INITIAL_STATES,
    ConversationStateMachine,
    InvalidTransitionError,
    create_fsm,
)

__all__ = [
    "INITIAL_STATES",
    "ConversationStateMachine",
    "InvalidTransitionError",
    "create_fsm",
]
