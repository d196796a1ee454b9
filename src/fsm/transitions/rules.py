"""
Regras de transição válidas entre estados de conversa.

Grafo:
    ABSENT  -> CREATED
    CREATED -> ACTIVE | DELETED   (primeira troca ok | limpeza compensatória)
    ACTIVE  -> ACTIVE | DELETED   (nova troca | encerramento)
    DELETED -> (terminal)
"""

from fsm.states.conversation import TERMINAL_STATES, ConversationState

TransitionMap = dict[ConversationState, frozenset[ConversationState]]

VALID_TRANSITIONS: TransitionMap = {
    ConversationState.ABSENT: frozenset({ConversationState.CREATED}),
    ConversationState.CREATED: frozenset({
        ConversationState.ACTIVE,
        ConversationState.DELETED,
    }),
    # ACTIVE -> ACTIVE a cada turno adicional
    ConversationState.ACTIVE: frozenset({
        ConversationState.ACTIVE,
        ConversationState.DELETED,
    }),
    ConversationState.DELETED: frozenset(),
}


def get_valid_targets(state: ConversationState) -> frozenset[ConversationState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos (vazio se terminal)
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: ConversationState, to_state: ConversationState) -> bool:
    """Verifica se uma transição é permitida pelo grafo."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in ConversationState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, ConversationState):
                errors.append(f"Transição {from_state.name} → {target}: destino inválido")

    return errors
