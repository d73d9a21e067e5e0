"""
Type definitions used across layers
"""

from enum import StrEnum


class Player(StrEnum):
    PLAYER_ONE = "player one"
    PLAYER_TWO = "player two"

    @property
    def opponent(self) -> "Player":
        return Player.PLAYER_TWO if self == Player.PLAYER_ONE else Player.PLAYER_ONE


# --- Message envelope tags. The string values are what travels on the wire.


class MessageType(StrEnum):
    REQUEST_MOVE = "request move"
    STATE_REPORT = "state report"


class Phase(StrEnum):
    PREGAME = "pregame"
    INGAME = "ingame"


class MessageStatus(StrEnum):
    OK = "ok"
    ERROR = "error"
