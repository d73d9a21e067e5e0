"""Runtime settings shared by the engine, the protocol and the session layer."""

import logging
from dataclasses import dataclass


@dataclass(frozen=True)
class GameSettings:
    # NOTE: capturing keeps the turn with the mover. Flip this to make a capture end the turn like any other move.
    capture_grants_extra_turn: bool = True
    # a full state report is well under 512 bytes, anything far above that is not a message
    max_frame_bytes: int = 4096
    log_level: str = "INFO"


DEFAULT_SETTINGS = GameSettings()


def configure_logging(settings: GameSettings = DEFAULT_SETTINGS) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
