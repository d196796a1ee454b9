"""
Testes abrangentes para o módulo FSM de conversas.

- Testamos comportamento e contrato público
- Foco em cenários válidos + inválidos + bordas
"""

from datetime import datetime

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    INITIAL_STATES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ConversationState,
    ConversationStateMachine,
    InvalidTransitionError,
    StateTransition,
    TransitionResult,
    create_fsm,
    get_valid_targets,
    is_terminal,
    is_transition_valid,
    is_valid_state,
    validate_transition_map,
)


class TestStatesAndGraph:
    """Estados e grafo de transições."""

    def test_every_state_is_mapped(self) -> None:
        assert set(VALID_TRANSITIONS) == set(ConversationState)
        assert validate_transition_map() == []

    def test_initial_and_terminal_states(self) -> None:
        assert DEFAULT_INITIAL_STATE == ConversationState.ABSENT
        assert INITIAL_STATES == frozenset({ConversationState.ABSENT})
        assert TERMINAL_STATES == frozenset({ConversationState.DELETED})
        assert is_terminal(ConversationState.DELETED)
        assert not is_terminal(ConversationState.ACTIVE)
        assert is_valid_state(ConversationState.CREATED)
        assert not is_valid_state("CREATED_X")  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("source", "target", "expected"),
        [
            (ConversationState.ABSENT, ConversationState.CREATED, True),
            (ConversationState.ABSENT, ConversationState.ACTIVE, False),
            (ConversationState.CREATED, ConversationState.ACTIVE, True),
            (ConversationState.CREATED, ConversationState.DELETED, True),
            (ConversationState.ACTIVE, ConversationState.ACTIVE, True),
            (ConversationState.ACTIVE, ConversationState.CREATED, False),
            (ConversationState.DELETED, ConversationState.ACTIVE, False),
        ],
    )
    def test_transition_validity(
        self, source: ConversationState, target: ConversationState, expected: bool
    ) -> None:
        assert is_transition_valid(source, target) is expected

    def test_terminal_has_no_targets(self) -> None:
        assert get_valid_targets(ConversationState.DELETED) == frozenset()


class TestTypes:
    """StateTransition e TransitionResult."""

    def test_transition_requires_trigger(self) -> None:
        with pytest.raises(ValueError):
            StateTransition(ConversationState.ABSENT, ConversationState.CREATED, trigger=" ")

    def test_transition_rejects_negative_turn(self) -> None:
        with pytest.raises(ValueError):
            StateTransition(
                ConversationState.CREATED, ConversationState.ACTIVE, trigger="x", turn=-1
            )

    def test_log_dict(self) -> None:
        transition = StateTransition(
            ConversationState.CREATED, ConversationState.ACTIVE, trigger="exchange", turn=1
        )
        payload = transition.to_log_dict()
        assert payload["from_state"] == "CREATED"
        assert payload["to_state"] == "ACTIVE"
        assert payload["turn"] == 1
        assert datetime.fromisoformat(payload["timestamp"]).tzinfo is not None

    def test_result_invariants(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)


class TestConversationStateMachine:
    """Ciclo de vida completo."""

    def test_full_lifecycle(self) -> None:
        machine = create_fsm()
        machine.bind("conv_1")
        machine.advance(ConversationState.CREATED, "remote_created")
        machine.advance(ConversationState.ACTIVE, "exchange_completed", turn=1)
        machine.advance(ConversationState.ACTIVE, "exchange_completed", turn=2)
        machine.advance(ConversationState.DELETED, "closed_by_client")

        assert machine.is_terminal
        assert machine.turn == 2
        assert [t["trigger"] for t in machine.get_history_summary()] == [
            "remote_created",
            "exchange_completed",
            "exchange_completed",
            "closed_by_client",
        ]
        summary = machine.get_state_summary()
        assert summary["conversation_id"] == "conv_1"
        assert summary["current_state"] == "DELETED"
        assert summary["transition_count"] == 4

    def test_invalid_transition_returns_failure(self) -> None:
        machine = ConversationStateMachine()
        result = machine.transition(ConversationState.ACTIVE, "skip")

        assert result.success is False
        assert "ABSENT" in (result.error_reason or "")
        assert machine.current_state == ConversationState.ABSENT
        assert machine.history == []

    def test_advance_raises_on_invalid_transition(self) -> None:
        machine = create_fsm("conv_1", ConversationState.DELETED)
        with pytest.raises(InvalidTransitionError):
            machine.advance(ConversationState.ACTIVE, "revive")

    def test_history_is_a_copy(self) -> None:
        machine = create_fsm()
        machine.advance(ConversationState.CREATED, "remote_created")
        machine.history.clear()
        assert len(machine.history) == 1

    def test_can_transition_to(self) -> None:
        machine = create_fsm("c", ConversationState.CREATED)
        assert machine.can_transition_to(ConversationState.DELETED)
        assert machine.get_valid_targets() == frozenset(
            {ConversationState.ACTIVE, ConversationState.DELETED}
        )
