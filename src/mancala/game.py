"""
The GameState class is the entrypoint into the domain layer for the session layer.
It owns one board and is responsible for applying a single move: sowing, scoring, capturing, passing the turn and ending the game.

NOTE the engine holds no lock. Whoever owns a GameState must make sure only one thread at a time calls make_move.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Self

from src.core.config import DEFAULT_SETTINGS, GameSettings
from src.core.exceptions import (
    IllegalMoveError,
    InactiveGameError,
    NotYourTurnError,
)
from src.core.models import GameSnapshot
from src.core.shared_types import Player
from src.mancala.board import (
    BOARD_SIZE,
    PLAYER_ONE_GOAL,
    PLAYER_TWO_GOAL,
    Board,
    goal_slot,
    playable_pits,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class GameState:
    # --- DOMAIN LAYER API CALLED BY SESSION ---

    players: Mapping[Player, str]
    board: Board
    turn: Player
    active: bool
    settings: GameSettings = field(default=DEFAULT_SETTINGS, repr=False)

    def __post_init__(self) -> None:
        # names are fixed once the game is created
        self.players = MappingProxyType(dict(self.players))

    @classmethod
    def new(
        cls,
        player_one: str,
        player_two: str,
        settings: GameSettings = DEFAULT_SETTINGS,
    ) -> Self:
        """Fresh game: 4 stones in every playable pit, empty goals, player one to move."""
        return cls(
            players={Player.PLAYER_ONE: player_one, Player.PLAYER_TWO: player_two},
            board=Board.starting_position(),
            turn=Player.PLAYER_ONE,
            active=True,
            settings=settings,
        )

    @classmethod
    def from_snapshot(
        cls, snapshot: GameSnapshot, settings: GameSettings = DEFAULT_SETTINGS
    ) -> Self:
        """Define how to construct a game from the information a peer actually has"""
        return cls(
            players={
                Player.PLAYER_ONE: snapshot.player_one,
                Player.PLAYER_TWO: snapshot.player_two,
            },
            board=Board.from_counts(snapshot.board),
            turn=Player.PLAYER_ONE if snapshot.player_one_turn else Player.PLAYER_TWO,
            active=snapshot.active,
            settings=settings,
        )

    def to_snapshot(self) -> GameSnapshot:
        """Encode into the read-only format the other layers use"""
        return GameSnapshot(
            player_one=self.player_one,
            player_two=self.player_two,
            board=self.get_board(),
            player_one_turn=self.player_one_turn,
            active=self.active,
        )

    @property
    def player_one(self) -> str:
        return self.players[Player.PLAYER_ONE]

    @property
    def player_two(self) -> str:
        return self.players[Player.PLAYER_TWO]

    @property
    def player_one_goal_slot(self) -> int:
        return PLAYER_ONE_GOAL

    @property
    def player_two_goal_slot(self) -> int:
        return PLAYER_TWO_GOAL

    @property
    def player_one_turn(self) -> bool:
        return self.turn == Player.PLAYER_ONE

    @property
    def scores(self) -> dict[Player, int]:
        return {player: self.board.score(player) for player in Player}

    @property
    def winner(self) -> Optional[str]:
        """Name of the player with the most stones in their goal. None while the game runs, or on a draw."""
        if self.active:
            return None
        one, two = self.scores[Player.PLAYER_ONE], self.scores[Player.PLAYER_TWO]
        if one == two:
            return None
        return self.player_one if one > two else self.player_two

    def get_board(self) -> tuple[int, ...]:
        return self.board.counts()

    def legal_moves(self) -> list[int]:
        """Non-empty pits on the side of the player to move. Empty once the game is over."""
        if not self.active:
            return []
        return [pit for pit in playable_pits(self.turn) if self.board.stones(pit) > 0]

    def validate_move(self, player: Player, pit_index: int) -> None:
        """
        Checks the session layer performs before calling make_move.
        ----

        1. The game is still running
        2. It is your turn
        3. The pit is on your side of the board
        4. The pit holds at least one stone
        """
        if not self.active:
            raise InactiveGameError("The game is over. No more moves are accepted.")

        if player != self.turn:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.players[self.turn]} to make a move first."
            )

        if pit_index not in playable_pits(player):
            raise IllegalMoveError(f"Pit {pit_index} is not one of your pits.")

        if self.board.stones(pit_index) == 0:
            raise IllegalMoveError(f"Pit {pit_index} is empty.")

    def make_move(self, pit_index: int) -> None:
        """
        Sow the stones of `pit_index` for the player to move.
        -----

        1. pick up the stones and sow them, skipping the opponent's goal
        2. last stone in your own goal? --> play again
        3. last stone in an empty pit of your own --> capture
        4. otherwise the turn passes
        5. if the player to move next has no stones left, sweep the board and end the game

        NOTE ownership and turn are NOT checked here (see validate_move). The engine only refuses what it cannot do.
        """
        if not self.active:
            raise InactiveGameError("The game is over. No more moves are accepted.")

        if not (0 <= pit_index < BOARD_SIZE):
            raise IllegalMoveError(
                f"Pit {pit_index} is not on the board (0 - {BOARD_SIZE - 1})."
            )

        if self.board.stones(pit_index) == 0:
            raise IllegalMoveError(f"Pit {pit_index} is empty.")

        mover = self.turn
        last = self.board.sow(pit_index, skip=goal_slot(mover.opponent))

        if last == goal_slot(mover):
            LOGGER.debug("%s ends in own goal and plays again", mover)
        elif self.board.capture(last, mover):
            LOGGER.debug("%s captures from pit %d", mover, last)
            if not self.settings.capture_grants_extra_turn:
                self._pass_turn()
        else:
            self._pass_turn()

        self._update_game_status()

    # -- PRIVATE HELPERS ---
    def _pass_turn(self) -> None:
        self.turn = self.turn.opponent

    def _update_game_status(self) -> None:
        """NOTE the turn has already been resolved: we look at the side of the player who moves next."""
        if not self.board.is_side_empty(self.turn):
            return

        self.board.sweep()
        self.active = False
        LOGGER.info(
            "Game over. %s: %d, %s: %d",
            self.player_one,
            self.scores[Player.PLAYER_ONE],
            self.player_two,
            self.scores[Player.PLAYER_TWO],
        )
