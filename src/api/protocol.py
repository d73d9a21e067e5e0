"""
Building, encoding and decoding messages.
----

Every message travels as one line of JSON terminated by a single newline byte.
The transport delivers an undifferentiated byte stream, so the FrameReader cuts that stream back into frames.
NOTE JSON escapes newlines inside strings, so an encoded message never contains a raw newline of its own.

Everything in here is stateless apart from a FrameReader's buffer, and safe to call from several threads at once.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from src.api.models import Message, MovePayload, StatePayload
from src.core.config import DEFAULT_SETTINGS
from src.core.exceptions import FrameTooLargeError, InvalidMoveError, MessageDecodeError
from src.core.shared_types import MessageStatus, MessageType, Phase
from src.mancala.game import GameState

LOGGER = logging.getLogger(__name__)

DELIMITER = b"\n"


# --- BUILDING MESSAGES ---
def build_move_request(pit_index: int) -> Optional[Message]:
    """
    Move request for the given pit, or None if the pit can never be played (a goal or off the board).

    Only bounds are checked: whether it is your turn or your pit is decided by whoever receives the request.
    """
    try:
        payload = MovePayload(pit=pit_index)
    except (InvalidMoveError, ValidationError) as exc:
        LOGGER.debug("Not sending move request for %r: %s", pit_index, exc)
        return None
    return Message(
        message_type=MessageType.REQUEST_MOVE,
        phase=Phase.INGAME,
        status=MessageStatus.OK,
        payload=payload,
    )


def build_state_report(state: GameState, phase: Phase = Phase.INGAME) -> Message:
    return Message(
        message_type=MessageType.STATE_REPORT,
        phase=phase,
        status=MessageStatus.OK,
        payload=StatePayload.from_snapshot(state.to_snapshot()),
    )


def build_error_report(
    state: GameState, errors: list[str], phase: Phase = Phase.INGAME
) -> Message:
    """State report telling the peer why its request was refused. The board is included so it can resync."""
    return Message(
        message_type=MessageType.STATE_REPORT,
        phase=phase,
        status=MessageStatus.ERROR,
        errors=errors,
        payload=StatePayload.from_snapshot(state.to_snapshot()),
    )


# --- WIRE FORMAT ---
def encode_message(message: Message) -> bytes:
    return message.model_dump_json().encode("utf-8") + DELIMITER


def decode_message(frame: bytes) -> Message:
    """
    Reverse operation: turn a single newline-terminated frame into a Message.

    Raises MessageDecodeError for anything that is not a well-formed message.
    NOTE a well-formed move request for a goal pit raises InvalidMoveError instead: that is a game error, not a wire error.
    """
    if not frame.endswith(DELIMITER):
        raise MessageDecodeError("Frame is not terminated by a newline (truncated?).")

    body = frame[: -len(DELIMITER)]
    if DELIMITER in body:
        raise MessageDecodeError("Frame contains more than one message.")

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MessageDecodeError(f"Frame is not valid UTF-8: {exc}") from exc

    try:
        return Message.model_validate_json(text)
    except ValidationError as exc:
        raise MessageDecodeError(
            f"Cannot interpret frame as a message: {exc.error_count()} error(s). {exc.errors()[0]['msg']}"
        ) from exc


class FrameReader:
    """
    Accumulates chunks read from a stream and hands out complete frames (delimiter included).

    Sizes are measured without the delimiter. A frame longer than `max_frame_bytes` is dropped on its own,
    the frames around it are still handed out. FrameTooLargeError is only raised when a call has nothing else to return.
    """

    def __init__(self, max_frame_bytes: int = DEFAULT_SETTINGS.max_frame_bytes) -> None:
        self.max_frame_bytes = max_frame_bytes
        self.dropped_frames = 0
        self._buffer = bytearray()
        # True while skipping the tail of an oversized frame whose start was already thrown away
        self._discarding = False

    def feed(self, chunk: bytes) -> list[bytes]:
        """Add the newly received bytes, return every frame that is now complete (possibly none)."""
        self._buffer.extend(chunk)
        frames: list[bytes] = []
        dropped = 0
        while True:
            end = self._buffer.find(DELIMITER)
            if end == -1:
                break
            frame = bytes(self._buffer[: end + 1])
            del self._buffer[: end + 1]

            if self._discarding:
                self._discarding = False
                continue

            if end > self.max_frame_bytes:
                dropped += 1
                self._log_dropped(end)
                continue
            frames.append(frame)

        # the remainder is an unfinished frame. Stop buffering it once it can never become a valid one.
        if len(self._buffer) > self.max_frame_bytes:
            if not self._discarding:
                dropped += 1
                self._log_dropped(len(self._buffer))
            self._buffer.clear()
            self._discarding = True

        self.dropped_frames += dropped
        if dropped and not frames:
            raise FrameTooLargeError(
                f"Dropped {dropped} frame(s) exceeding the limit of {self.max_frame_bytes} bytes."
            )
        return frames

    @property
    def pending(self) -> bytes:
        """Bytes of an incomplete frame still waiting for their delimiter"""
        return bytes(self._buffer)

    def _log_dropped(self, size: int) -> None:
        LOGGER.warning(
            "Dropping frame of %d+ bytes, the limit is %d bytes.", size, self.max_frame_bytes
        )
