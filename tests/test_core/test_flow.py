"""
Tests for the pure command interface: apply_command, replay and the board gate.
"""

from dataclasses import FrozenInstanceError

import pytest
from sixmax.core.flow import (
    PreflopAction, PostflopAction, ConfirmBoard, RecordResult,
    apply_command, replay, first_postflop_actor,
)
from sixmax.core.game import HandEngine
from sixmax.core.rules import Seat, Phase, ActionType, HandStatus
from sixmax.core.state import HandResult, new_hand
from sixmax.core.exceptions import IllegalActionError, PhaseMismatchError, StateError


OPEN_AND_CALL = [
    PreflopAction(Seat.BTN, ActionType.RAISE, 300, timestamp=1.0),
    PreflopAction(Seat.SB, ActionType.FOLD, timestamp=2.0),
    PreflopAction(Seat.BB, ActionType.CALL, timestamp=3.0),
]


class TestApplyCommand:
    """Tests for applying single commands to snapshots."""

    def test_returns_new_state_and_records(self, fresh_state):
        """Test that a command returns a new snapshot and its records."""
        step = apply_command(fresh_state, OPEN_AND_CALL[0])

        assert step.state is not fresh_state
        assert [r.position for r in step.emitted] == [Seat.UTG, Seat.HJ, Seat.CO, Seat.BTN]
        assert all(r.timestamp == 1.0 for r in step.emitted)
        assert step.state.actions == step.emitted

    def test_input_snapshot_unchanged(self, fresh_state):
        """Test that the input snapshot is left as it was."""
        apply_command(fresh_state, OPEN_AND_CALL[0])

        assert fresh_state.current_actor == Seat.UTG
        assert fresh_state.actions == ()
        assert fresh_state.pot == 150

    def test_snapshots_are_frozen(self, fresh_state):
        """Test that snapshots cannot be assigned to."""
        with pytest.raises(FrozenInstanceError):
            fresh_state.current_actor = Seat.BTN
        with pytest.raises(FrozenInstanceError):
            fresh_state.players[0].stack = 0

    def test_unknown_command(self, fresh_state):
        """Test that a non-command is a TypeError."""
        with pytest.raises(TypeError):
            apply_command(fresh_state, "Fold")

    def test_board_confirm_emits_nothing(self, fresh_state):
        """Test that confirming the board opens betting without records."""
        state = replay(fresh_state, OPEN_AND_CALL)
        step = apply_command(state, ConfirmBoard(("Ah", "Kd", "7c")))

        assert step.emitted == ()
        assert step.state.status is HandStatus.BETTING
        assert step.state.current_actor == Seat.BB


class TestReplay:

    def test_matches_engine(self):
        """Replaying commands gives the same snapshot as driving the engine."""
        engine = HandEngine(hero_seat="BTN")
        state = replay(engine.state, OPEN_AND_CALL)

        for command in OPEN_AND_CALL:
            engine._apply(command)

        assert engine.state == state

    def test_replay_is_repeatable(self, fresh_state):
        """Test that replaying the same commands gives equal snapshots."""
        commands = OPEN_AND_CALL + [
            ConfirmBoard(("Ah", "Kd", "7c")),
            PostflopAction(Seat.BB, ActionType.BET, 400, timestamp=4.0),
            PostflopAction(Seat.BTN, ActionType.CALL, timestamp=5.0),
        ]
        assert replay(fresh_state, commands) == replay(fresh_state, commands)

    def test_failure_keeps_earlier_snapshot(self, fresh_state):
        """Test that a failed command leaves the snapshot usable."""
        state = replay(fresh_state, OPEN_AND_CALL)
        with pytest.raises(IllegalActionError):
            apply_command(state, PostflopAction(Seat.BTN, ActionType.CHECK))
        assert state.waiting_for_board


class TestPhaseGuards:

    def test_postflop_command_preflop(self, fresh_state):
        """Test that a postflop command preflop is rejected."""
        with pytest.raises(PhaseMismatchError):
            apply_command(fresh_state, PostflopAction(Seat.UTG, ActionType.CALL))

    def test_preflop_command_postflop(self, fresh_state):
        """Test that a preflop command postflop is rejected."""
        state = replay(fresh_state, OPEN_AND_CALL + [ConfirmBoard()])
        with pytest.raises(PhaseMismatchError):
            apply_command(state, PreflopAction(Seat.BB, ActionType.CHECK))


class TestBoardGate:
    """Tests for the street transition gate."""

    def test_confirm_when_betting_is_noop(self, fresh_state):
        """Test that confirming the board mid-street returns the same snapshot."""
        assert apply_command(fresh_state, ConfirmBoard(("Ah",))).state is fresh_state

    def test_staged_street(self, fresh_state):
        """Test the fresh street state once preflop closes."""
        state = replay(fresh_state, OPEN_AND_CALL)

        assert state.status is HandStatus.AWAITING_BOARD
        assert state.phase is Phase.FLOP
        assert state.street.starting_pot == 650
        assert state.street.pot == 650
        assert state.street.current_bet == 0
        assert state.street.raise_count == 0
        assert state.street.actions == ()

    def test_first_postflop_actor(self, fresh_state):
        """Test that the first live seat from SB leads postflop."""
        assert first_postflop_actor(fresh_state) == Seat.SB

        state = replay(fresh_state, OPEN_AND_CALL)
        assert first_postflop_actor(state) == Seat.BB

    def test_river_close_ends_hand(self, fresh_state):
        """Test that closing the river ends the hand."""
        commands = list(OPEN_AND_CALL)
        for _ in range(3):
            commands += [
                ConfirmBoard(),
                PostflopAction(Seat.BB, ActionType.CHECK),
                PostflopAction(Seat.BTN, ActionType.CHECK),
            ]
        state = replay(fresh_state, commands)

        assert state.status is HandStatus.TERMINAL
        assert state.phase is Phase.RIVER
        assert state.current_actor is None


class TestRecordResult:

    def test_rejected_while_running(self, fresh_state):
        """Test that a result mid-hand is rejected."""
        result = HandResult(winner="BTN", hero_won=True, pot_awarded=1.5)
        with pytest.raises(StateError, match="incomplete hand"):
            apply_command(fresh_state, RecordResult(result))

    def test_accepted_after_fold_out(self):
        """Test that a result is accepted once and only once."""
        state = replay(new_hand(hero_seat=Seat.BTN), [
            PreflopAction(Seat.BTN, ActionType.RAISE, 300),
            PreflopAction(Seat.SB, ActionType.FOLD),
            PreflopAction(Seat.BB, ActionType.FOLD),
        ])
        result = HandResult(winner="BTN", hero_won=True, pot_awarded=4.5)
        state = apply_command(state, RecordResult(result)).state

        assert state.result == result
        with pytest.raises(StateError, match="already recorded"):
            apply_command(state, RecordResult(result))
