"""Unit tests for /src/checkers/session.py"""

from datetime import datetime, timedelta, timezone
from random import Random

import pytest

from src.checkers.position import Position
from src.checkers.session import GameSession, JoinResult
from src.core.exceptions import (
    GameNotActiveError,
    GameStateError,
    PermissionDeniedError,
    PlayerNotFoundError,
    SessionFullError,
)
from src.core.shared_types import Color, Outcome, Status

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def session() -> GameSession:
    return GameSession.new_session("alice", rng=Random(7), now=NOW)


@pytest.fixture
def started_session(session: GameSession) -> GameSession:
    session.join("bob")
    session.set_ready("alice")
    session.set_ready("bob")
    return session


# -- CREATION LOGIC --
def test_new_session(session: GameSession) -> None:
    assert list(session.players.values()) == ["alice"]
    assert session.creator == "alice"
    assert session.status == Status.WAITING
    assert session.created_at == NOW
    assert session.last_activity_at == NOW
    assert not session.both_joined


def test_creator_color_is_random() -> None:
    colors = {
        GameSession.new_session("alice", rng=Random(seed)).color_of("alice")
        for seed in range(20)
    }
    assert colors == {Color.WHITE, Color.BLACK}


def test_model_round_trip(started_session: GameSession) -> None:
    started_session.make_move(Position(5, 0), Position(4, 1), now=NOW)
    model = started_session.to_model()
    rebuilt = GameSession.from_model(model)

    assert rebuilt == started_session
    assert rebuilt.to_model() == model


def test_from_model_with_unknown_status(session: GameSession) -> None:
    model = session.to_model()
    model.status = "paused"
    with pytest.raises(GameStateError):
        GameSession.from_model(model)


# -- SEATS --
def test_join(session: GameSession) -> None:
    creator_color = session.color_of("alice")
    result = session.join("bob", now=NOW + timedelta(minutes=1))

    assert result == JoinResult(creator_color.opponent, both_joined=True)
    assert session.opponent_of("alice") == "bob"
    assert session.opponent_of("bob") == "alice"
    assert session.last_activity_at == NOW + timedelta(minutes=1)


def test_join_is_idempotent(session: GameSession) -> None:
    session.join("bob")
    again = session.join("bob")
    assert again.already_joined
    assert again.color == session.color_of("bob")
    assert len(session.players) == 2


def test_third_player_cannot_join(session: GameSession) -> None:
    session.join("bob")
    with pytest.raises(SessionFullError):
        session.join("carol")


def test_unknown_player(session: GameSession) -> None:
    assert session.find_color("mallory") is None
    assert session.opponent_of("mallory") is None
    with pytest.raises(PlayerNotFoundError):
        session.color_of("mallory")


# -- READINESS --
def test_game_starts_when_both_are_ready(session: GameSession) -> None:
    assert not session.set_ready("alice")
    session.join("bob")
    assert session.status == Status.WAITING
    assert session.set_ready("bob")
    assert session.status == Status.ACTIVE


def test_game_decided_at_the_start() -> None:
    session = GameSession.new_session("alice", starting_fen="B:W21:B")
    session.join("bob")
    session.set_ready("alice")

    assert session.set_ready("bob")
    assert session.status == Status.FINISHED
    assert session.game.winner == Outcome.WHITE


def test_ready_requires_a_seat(session: GameSession) -> None:
    with pytest.raises(PlayerNotFoundError):
        session.set_ready("mallory")


def test_ready_after_the_game_ended(started_session: GameSession) -> None:
    started_session.surrender("alice")
    with pytest.raises(GameNotActiveError):
        started_session.set_ready("bob")


# -- FUKI TOGGLE --
def test_toggle_fuki_mode(session: GameSession) -> None:
    assert session.toggle_fuki_mode("alice")
    assert not session.toggle_fuki_mode("alice")


def test_only_the_creator_toggles_fuki(session: GameSession) -> None:
    session.join("bob")
    with pytest.raises(PermissionDeniedError):
        session.toggle_fuki_mode("bob")


def test_fuki_is_locked_after_start(started_session: GameSession) -> None:
    with pytest.raises(GameStateError):
        started_session.toggle_fuki_mode("alice")


# -- PLAY --
def test_players_move_with_their_own_color(started_session: GameSession) -> None:
    white = started_session.players[Color.WHITE]
    black = started_session.players[Color.BLACK]

    result = started_session.make_move(Position(5, 0), Position(4, 1), white)
    assert result.move is not None
    assert started_session.game.current_player == Color.BLACK

    started_session.make_move(Position(2, 1), Position(3, 0), black)
    assert started_session.game.current_player == Color.WHITE


def test_surrender_by_player(started_session: GameSession) -> None:
    black = started_session.players[Color.BLACK]
    started_session.surrender(black)
    assert started_session.game.winner == Outcome.WHITE


def test_draw_by_agreement(started_session: GameSession) -> None:
    started_session.offer_draw("alice")
    started_session.accept_draw("bob")
    assert started_session.status == Status.FINISHED
    assert started_session.game.winner == Outcome.DRAW


def test_reject_draw(started_session: GameSession) -> None:
    started_session.offer_draw("bob")
    started_session.reject_draw("alice")
    assert started_session.game.draw_offered_by is None


# -- ACTIVITY --
def test_is_inactive(session: GameSession) -> None:
    timeout = timedelta(minutes=30)
    assert not session.is_inactive(NOW + timedelta(minutes=30), timeout)
    assert session.is_inactive(NOW + timedelta(minutes=31), timeout)

    session.touch(NOW + timedelta(minutes=31))
    assert not session.is_inactive(NOW + timedelta(minutes=31), timeout)
