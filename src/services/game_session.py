"""Orchestration of one game between two connections: decoded requests in, state reports out."""

import logging
import threading

from src.api.models import Message
from src.api.protocol import (
    build_error_report,
    build_state_report,
    decode_message,
    encode_message,
)
from src.core.config import DEFAULT_SETTINGS, GameSettings
from src.core.exceptions import GameError, MessageDecodeError
from src.core.shared_types import MessageType, Phase, Player
from src.mancala.game import GameState

LOGGER = logging.getLogger(__name__)


class GameSession:
    """
    Owns the GameState of a single game.

    Both connection workers (one per player) may call into the same session, so every access to the game goes through one lock.
    The session never touches a socket: the transport hands it frames and sends back whatever it returns.
    """

    def __init__(
        self,
        player_one: str,
        player_two: str,
        settings: GameSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.game = GameState.new(player_one, player_two, settings=settings)
        self.moves_played = 0
        self._lock = threading.Lock()

    @property
    def phase(self) -> Phase:
        return Phase.PREGAME if self.moves_played == 0 else Phase.INGAME

    def opening_report(self) -> Message:
        """Sent to both players once they are connected, before anyone has moved."""
        with self._lock:
            return build_state_report(self.game, phase=self.phase)

    def handle_request(self, player: Player, message: Message) -> Message:
        """
        Attempt the move requested by `player`.
        ----

        1. Only move requests are accepted
        2. Check turn, ownership and stones (the engine trusts us on these)
        3. Make the move
        4. Report the new state, or the reason for refusing
        """
        with self._lock:
            if message.message_type != MessageType.REQUEST_MOVE or message.pit is None:
                return self._refuse(
                    player, f"Expected a {MessageType.REQUEST_MOVE} message, got {message.message_type}."
                )

            pit = message.pit
            try:
                self.game.validate_move(player, pit)
                self.game.make_move(pit)
            except GameError as exc:
                return self._refuse(player, str(exc))

            self.moves_played += 1
            LOGGER.info("%s played pit %d", self.game.players[player], pit)
            return build_state_report(self.game, phase=self.phase)

    def handle_frame(self, player: Player, frame: bytes) -> bytes:
        """Decode a frame received from `player`, act on it and encode the answer."""
        try:
            message = decode_message(frame)
        except MessageDecodeError as exc:
            LOGGER.warning("Undecodable frame from %s: %s", player, exc)
            with self._lock:
                return encode_message(self._refuse(player, str(exc)))
        except GameError as exc:
            # well-formed, but naming a pit that can never be played
            with self._lock:
                return encode_message(self._refuse(player, str(exc)))

        return encode_message(self.handle_request(player, message))

    # -- Internal helpers --
    def _refuse(self, player: Player, reason: str) -> Message:
        """NOTE caller holds the lock"""
        LOGGER.warning("Refused request from %s: %s", player, reason)
        return build_error_report(self.game, [reason], phase=self.phase)
