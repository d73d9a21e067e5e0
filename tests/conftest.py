"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import pytest

from src.mancala.game import GameState
from src.services.game_session import GameSession

PLAYER_ONE = "don't hate the player"
PLAYER_TWO = "hate the game"


@pytest.fixture
def new_game() -> GameState:
    """Fresh game in the starting position, player one to move."""
    return GameState.new(PLAYER_ONE, PLAYER_TWO)


@pytest.fixture
def session() -> GameSession:
    return GameSession(PLAYER_ONE, PLAYER_TWO)
