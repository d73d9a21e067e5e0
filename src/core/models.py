"""
Boundary layer data model(s).

The engine hands a GameSnapshot to whoever needs to look at a game (the protocol layer, the session, tests),
so that nothing outside the engine can change a board it does not own.
"""

from dataclasses import dataclass

# Type alias to make GameSnapshot easier to read
PlayerName = str


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of a game. Goal indices are not included: both ends know them from the board size."""

    player_one: PlayerName
    player_two: PlayerName
    board: tuple[int, ...]
    player_one_turn: bool
    active: bool
