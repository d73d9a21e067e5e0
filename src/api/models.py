"""Message envelope and payload models"""

from typing import Annotated, Literal, Optional, Self, Union

from pydantic import BaseModel, Field, StrictInt, field_validator, model_validator

from src.core.exceptions import InvalidMoveError
from src.core.models import GameSnapshot
from src.core.shared_types import MessageStatus, MessageType, Phase
from src.mancala.board import BOARD_SIZE, is_playable

# a pit never holds more than the 48 stones of the starting position, one byte per counter is plenty
StoneCount = Annotated[int, Field(ge=0, le=255)]


# --- PAYLOADS ---
class MovePayload(BaseModel):
    kind: Literal["move"] = "move"
    pit: StrictInt

    @field_validator("pit")
    @classmethod
    def validate_pit(cls, value: int) -> int:
        if not is_playable(value):
            raise InvalidMoveError(
                f"Pit {value} cannot be played. Pick a pit between 1 and {BOARD_SIZE - 1} that is not a goal."
            )
        return value


class StatePayload(BaseModel):
    kind: Literal["state"] = "state"
    player_one: str
    player_two: str
    board: list[StoneCount]
    player_one_turn: bool
    active: bool

    @field_validator("board")
    @classmethod
    def validate_board_size(cls, value: list[int]) -> list[int]:
        if len(value) != BOARD_SIZE:
            raise ValueError(f"Board must hold {BOARD_SIZE} counters, got {len(value)}.")
        return value

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> Self:
        return cls(
            player_one=snapshot.player_one,
            player_two=snapshot.player_two,
            board=list(snapshot.board),
            player_one_turn=snapshot.player_one_turn,
            active=snapshot.active,
        )

    def to_snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            player_one=self.player_one,
            player_two=self.player_two,
            board=tuple(self.board),
            player_one_turn=self.player_one_turn,
            active=self.active,
        )


Payload = Annotated[Union[MovePayload, StatePayload], Field(discriminator="kind")]

PAYLOAD_FOR_TYPE: dict[MessageType, type[BaseModel]] = {
    MessageType.REQUEST_MOVE: MovePayload,
    MessageType.STATE_REPORT: StatePayload,
}


# --- ENVELOPE ---
class Message(BaseModel):
    message_type: MessageType
    phase: Phase
    status: MessageStatus
    errors: list[str] = Field(default_factory=list)
    payload: Payload

    @model_validator(mode="after")
    def validate_envelope(self) -> Self:
        expected_payload = PAYLOAD_FOR_TYPE[self.message_type]
        if not isinstance(self.payload, expected_payload):
            raise ValueError(
                f"A {self.message_type} message cannot carry a {self.payload.kind!r} payload."
            )

        if self.status == MessageStatus.OK and self.errors:
            raise ValueError("A message with status 'ok' cannot list errors.")

        if self.status == MessageStatus.ERROR and not self.errors:
            raise ValueError("A message with status 'error' must list at least one error.")
        return self

    @property
    def pit(self) -> Optional[int]:
        """Convenience accessor for move requests"""
        if isinstance(self.payload, MovePayload):
            return self.payload.pit
        return None

    @property
    def snapshot(self) -> Optional[GameSnapshot]:
        """Convenience accessor for state reports"""
        if isinstance(self.payload, StatePayload):
            return self.payload.to_snapshot()
        return None
