"""
Pytest configuration and shared fixtures for sixmax tests.
"""

import pytest
from sixmax.core.game import HandEngine
from sixmax.core.state import new_hand
from sixmax.core.rules import Seat


@pytest.fixture
def engine():
    """A fresh hand with hero on the button, 100bb deep."""
    return HandEngine(hero_seat=Seat.BTN, starting_stack=100)


@pytest.fixture
def fresh_state():
    """A fresh immutable hand snapshot."""
    return new_hand(hero_seat=Seat.BTN, starting_stack=100)


@pytest.fixture
def heads_up_flop():
    """BTN opens to 3, SB folds, BB calls, flop confirmed. BB to act."""
    engine = HandEngine(hero_seat="BTN", starting_stack=100)
    engine.add_preflop_action("BTN", "Raise", 3)
    engine.add_preflop_action("SB", "Fold")
    engine.add_preflop_action("BB", "Call")
    engine.confirm_board(["Ah", "Kd", "7c"])
    return engine


@pytest.fixture
def short_stack_engine():
    """A hand where every seat starts with 10bb."""
    return HandEngine(hero_seat="CO", starting_stack=10)
