"""The Game board implements all rules that only touch the pits: sowing, capturing and the final sweep."""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import GameStateError
from src.core.shared_types import Player

# 6 playable pits and one goal per side. Kept adjustable for other Kalah sizes.
SLOTS = 7
STARTING_STONES = 4
BOARD_SIZE = 2 * SLOTS

# The goals sit at the two seams of the circular layout
PLAYER_ONE_GOAL = SLOTS
PLAYER_TWO_GOAL = 0

GOAL_SLOTS: dict[Player, int] = {
    Player.PLAYER_ONE: PLAYER_ONE_GOAL,
    Player.PLAYER_TWO: PLAYER_TWO_GOAL,
}

PLAYABLE_PITS: dict[Player, range] = {
    Player.PLAYER_ONE: range(1, SLOTS),
    Player.PLAYER_TWO: range(SLOTS + 1, BOARD_SIZE),
}


def goal_slot(player: Player) -> int:
    return GOAL_SLOTS[player]


def playable_pits(player: Player) -> range:
    return PLAYABLE_PITS[player]


def is_goal(index: int) -> bool:
    return index in (PLAYER_ONE_GOAL, PLAYER_TWO_GOAL)


def is_playable(index: int) -> bool:
    """A pit that can ever be sown from: on the board and not a goal."""
    return 0 < index < BOARD_SIZE and not is_goal(index)


def opposite_pit(index: int) -> int:
    """Pit directly across the board. 1 <--> 13, 6 <--> 8 etc. (both goals map outside the playable range)"""
    return BOARD_SIZE - index


@dataclass
class Board:
    pits: list[int]

    @classmethod
    def starting_position(cls) -> Self:
        pits = [STARTING_STONES] * BOARD_SIZE
        pits[PLAYER_ONE_GOAL] = 0
        pits[PLAYER_TWO_GOAL] = 0
        return cls(pits)

    @classmethod
    def from_counts(cls, counts: list[int] | tuple[int, ...]) -> Self:
        """Rebuild a board from a snapshot, e.g. one received over the wire."""
        if len(counts) != BOARD_SIZE:
            raise GameStateError(
                f"A board holds {BOARD_SIZE} pits, got {len(counts)} counters."
            )
        if any(count < 0 for count in counts):
            raise GameStateError(f"Pits cannot hold a negative number of stones: {counts}")
        return cls(list(counts))

    def counts(self) -> tuple[int, ...]:
        """Copy of the counters. Changing it does not change the board."""
        return tuple(self.pits)

    def stones(self, index: int) -> int:
        return self.pits[index]

    def total_stones(self) -> int:
        return sum(self.pits)

    def side_stones(self, player: Player) -> int:
        """Stones still in play on one side (goal excluded)"""
        return sum(self.pits[index] for index in playable_pits(player))

    def is_side_empty(self, player: Player) -> bool:
        return self.side_stones(player) == 0

    def sow(self, start: int, skip: int) -> int:
        """
        Pick up all stones in `start` and drop them one by one in the following pits.
        ----

        The pit `skip` (the opponent's goal) is passed over without receiving a stone and without using one up.
        Returns the index of the pit that received the last stone.
        """
        in_hand = self.pits[start]
        self.pits[start] = 0
        current = start
        while in_hand > 0:
            current = (current + 1) % BOARD_SIZE
            if current == skip:
                continue
            self.pits[current] += 1
            in_hand -= 1
        return current

    def capture(self, last: int, player: Player) -> bool:
        """
        If the last stone landed in an empty pit on your own side, and the pit across holds stones,
        both the last stone and everything across go to your goal.
        Returns True if the capture happened.
        """
        if last not in playable_pits(player):
            return False
        if self.pits[last] != 1:
            return False

        across = opposite_pit(last)
        if across == PLAYER_TWO_GOAL or self.pits[across] == 0:
            return False

        self.pits[goal_slot(player)] += self.pits[across] + 1
        self.pits[last] = 0
        self.pits[across] = 0
        return True

    def sweep(self) -> None:
        """End of game: whatever is left on a side goes into that side's own goal."""
        for player in Player:
            self.pits[goal_slot(player)] += self.side_stones(player)
            for index in playable_pits(player):
                self.pits[index] = 0

    def score(self, player: Player) -> int:
        return self.pits[goal_slot(player)]
