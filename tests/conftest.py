import pytest

from case_data import MAIN_SCENARIO
from game_engine import DeductionGame


@pytest.fixture
def scenario():
    return MAIN_SCENARIO


@pytest.fixture
def game() -> DeductionGame:
    """A game with a session started and attempt 1 in progress."""
    g = DeductionGame()
    g.start_session()
    g.start_attempt()
    return g


def investigate(game: DeductionGame, *action_ids: str) -> None:
    for action_id in action_ids:
        assert game.perform_action(action_id).success
