"""
Exceptions raised by the domain and protocol layers.

Game errors and protocol errors have separate roots: a frame that cannot be decoded is not the same thing as a move the rules refuse.
NOTE none of these derive from ValueError, so raising one inside a pydantic validator propagates it unchanged.
"""


class GameError(Exception):
    """Base class for everything the rules of the game can refuse."""


class GameStateError(GameError):
    """The game cannot be built from (or put into) the requested state."""


class InactiveGameError(GameStateError):
    """A move was attempted on a game that has already finished."""


class IllegalMoveError(GameError):
    """The pit cannot be played: off the board, empty, or owned by the other player."""


class NotYourTurnError(GameError):
    pass


class InvalidMoveError(GameError):
    """A move request names a pit that can never be played (a goal or an index off the board)."""


class ProtocolError(Exception):
    """Base class for errors on the wire."""


class MessageDecodeError(ProtocolError):
    """Bytes received could not be turned into a Message."""


class FrameTooLargeError(MessageDecodeError):
    pass
