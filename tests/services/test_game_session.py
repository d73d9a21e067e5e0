"""Unit tests for src/services/game_session.py"""

import logging
import threading

import pytest

from src.api.protocol import build_move_request, build_state_report, decode_message, encode_message
from src.core.models import GameSnapshot
from src.core.shared_types import MessageStatus, Phase, Player
from src.mancala.game import GameState
from src.services.game_session import GameSession

STARTING_BOARD = (0, 4, 4, 4, 4, 4, 4, 0, 4, 4, 4, 4, 4, 4)


def move_frame(pit: int) -> bytes:
    message = build_move_request(pit)
    assert message is not None
    return encode_message(message)


# --- OPENING ---
def test_opening_report(session: GameSession) -> None:
    report = session.opening_report()
    assert report.phase == Phase.PREGAME
    assert report.status == MessageStatus.OK
    assert report.snapshot is not None
    assert report.snapshot.board == STARTING_BOARD
    assert report.snapshot.player_one_turn


# --- HANDLING REQUESTS ---
def test_legal_move(session: GameSession) -> None:
    message = build_move_request(1)
    assert message is not None
    report = session.handle_request(Player.PLAYER_ONE, message)

    assert report.status == MessageStatus.OK
    assert report.phase == Phase.INGAME
    assert report.snapshot is not None
    assert report.snapshot.board == (0, 0, 5, 5, 5, 5, 4, 0, 4, 4, 4, 4, 4, 4)
    assert not report.snapshot.player_one_turn
    assert session.moves_played == 1


@pytest.mark.parametrize(
    "player, pit",
    [
        (Player.PLAYER_TWO, 9),  # not your turn
        (Player.PLAYER_ONE, 9),  # not your pit
    ],
)
def test_refused_move_leaves_board_untouched(session: GameSession, player: Player, pit: int) -> None:
    message = build_move_request(pit)
    assert message is not None
    report = session.handle_request(player, message)

    assert report.status == MessageStatus.ERROR
    assert len(report.errors) == 1
    assert report.phase == Phase.PREGAME
    assert report.snapshot is not None
    assert report.snapshot.board == STARTING_BOARD
    assert session.moves_played == 0


def test_empty_pit_is_refused(session: GameSession) -> None:
    session.handle_frame(Player.PLAYER_ONE, move_frame(3))  # into the goal, player one again
    report = decode_message(session.handle_frame(Player.PLAYER_ONE, move_frame(3)))
    assert report.status == MessageStatus.ERROR
    assert "empty" in report.errors[0]


def test_state_report_is_not_a_request(session: GameSession) -> None:
    report = session.handle_request(Player.PLAYER_ONE, build_state_report(session.game))
    assert report.status == MessageStatus.ERROR
    assert session.game.get_board() == STARTING_BOARD


def test_finished_game_refuses_moves(session: GameSession) -> None:
    session.game = GameState.from_snapshot(
        GameSnapshot(
            player_one="a",
            player_two="b",
            board=(24, 0, 0, 0, 0, 0, 0, 24, 0, 0, 0, 0, 0, 0),
            player_one_turn=True,
            active=False,
        )
    )
    report = decode_message(session.handle_frame(Player.PLAYER_ONE, move_frame(1)))
    assert report.status == MessageStatus.ERROR
    assert "over" in report.errors[0]


# --- HANDLING FRAMES ---
def test_capture_sequence_over_the_wire(session: GameSession) -> None:
    for player, pit in [(Player.PLAYER_ONE, 6), (Player.PLAYER_TWO, 11), (Player.PLAYER_ONE, 2)]:
        report = decode_message(session.handle_frame(player, move_frame(pit)))
        assert report.status == MessageStatus.OK

    assert report.snapshot is not None
    assert report.snapshot.board[7] == 7
    assert report.snapshot.board[0] == 1
    assert report.snapshot.player_one_turn


@pytest.mark.parametrize(
    "frame",
    [
        b"garbage\n",
        b'{"message_type": "request move"',  # no delimiter
        b'{"message_type": "request move", "phase": "ingame", "status": "ok", "errors": [], "payload": {"kind": "move", "pit": 7}}\n',  # goal pit
    ],
)
def test_bad_frame_gets_error_report(session: GameSession, frame: bytes) -> None:
    answer = session.handle_frame(Player.PLAYER_ONE, frame)
    assert answer.endswith(b"\n")

    report = decode_message(answer)
    assert report.status == MessageStatus.ERROR
    assert report.errors
    assert report.snapshot is not None
    assert report.snapshot.board == STARTING_BOARD


def test_concurrent_players_keep_board_consistent(session: GameSession) -> None:
    """Both connection workers hammer the same session: whatever gets accepted, no stones get lost."""

    def play(player: Player, pits: list[int]) -> None:
        for _ in range(20):
            for pit in pits:
                session.handle_frame(player, move_frame(pit))

    workers = [
        threading.Thread(target=play, args=(Player.PLAYER_ONE, [1, 2, 3, 4, 5, 6])),
        threading.Thread(target=play, args=(Player.PLAYER_TWO, [8, 9, 10, 11, 12, 13])),
    ]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert sum(session.game.get_board()) == 48


def test_refusal_is_logged(session: GameSession, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="src.services.game_session"):
        session.handle_frame(Player.PLAYER_TWO, move_frame(9))
    assert "Refused request" in caplog.text
