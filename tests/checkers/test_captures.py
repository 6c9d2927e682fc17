"""Unit tests for src/checkers/captures.py"""

import pytest

from src.checkers.board import Board
from src.checkers.captures import (
    all_valid_moves,
    available_captures,
    continuing_captures,
    has_legal_move,
    resolve_fuki_penalty,
)
from src.checkers.moves import Move
from src.checkers.pieces import Piece
from src.checkers.position import Position
from src.core.shared_types import Color


def board_with(pieces: dict[tuple[int, int], str]) -> Board:
    """Build a board from grid codes: 'w'/'b' for men, 'W'/'B' for kings."""
    board = Board.empty()
    for counter, ((row, col), code) in enumerate(sorted(pieces.items())):
        color = Color.WHITE if code.lower() == "w" else Color.BLACK
        board.place_piece(
            Piece(f"{code.lower()}-{counter}", color, Position(row, col), code.isupper())
        )
    return board


@pytest.fixture
def two_capturers() -> Board:
    """White men on (5,2) and (5,6) can both capture; the man on (7,0) cannot."""
    return board_with(
        {(5, 2): "w", (4, 3): "b", (5, 6): "w", (4, 5): "b", (7, 0): "w"}
    )


# -- ALL VALID MOVES --
@pytest.mark.parametrize("color", [Color.WHITE, Color.BLACK])
def test_opening_moves(color: Color) -> None:
    """Only the front row can move at the start: 7 moves for each side, no captures."""
    board = Board.initial()
    moves = all_valid_moves(board, color)
    assert len(moves) == 7
    assert not any(move.is_capture for move in moves)
    assert available_captures(board, color) == []


def test_moves_are_listed_in_square_order(two_capturers: Board) -> None:
    moves = all_valid_moves(two_capturers, Color.WHITE)
    starting_squares = [move.from_position for move in moves]
    assert starting_squares == sorted(starting_squares)


def test_capture_chain_restricts_the_move_set(two_capturers: Board) -> None:
    moves = all_valid_moves(two_capturers, Color.WHITE, Position(5, 6))
    assert moves
    assert all(move.from_position == Position(5, 6) and move.is_capture for move in moves)


def test_available_captures(two_capturers: Board) -> None:
    captures = available_captures(two_capturers, Color.WHITE)
    assert [capture.from_position for capture in captures] == [
        Position(5, 2),
        Position(5, 6),
    ]


def test_continuing_captures() -> None:
    board = board_with({(3, 2): "w", (2, 3): "b", (7, 6): "b"})
    assert [move.to_position for move in continuing_captures(board, Position(3, 2))] == [
        Position(1, 4)
    ]
    assert continuing_captures(board, Position(4, 3)) == []


def test_has_legal_move() -> None:
    # black man boxed in: both forward squares taken and nothing to capture
    board = board_with({(0, 1): "b", (1, 0): "w", (1, 2): "w", (2, 3): "w"})
    assert not has_legal_move(board, Color.BLACK)
    assert has_legal_move(board, Color.WHITE)


# -- FUKI --
def test_no_penalty_for_a_capture(two_capturers: Board) -> None:
    capture = available_captures(two_capturers, Color.WHITE)[0]
    captures = available_captures(two_capturers, Color.WHITE)
    assert resolve_fuki_penalty(two_capturers, capture, captures) is None


def test_no_penalty_without_captures() -> None:
    board = Board.initial()
    move = Move(Position(5, 0), Position(4, 1))
    assert resolve_fuki_penalty(board, move, []) is None


def test_moved_piece_burns_when_it_could_capture(two_capturers: Board) -> None:
    quiet_move = Move(Position(5, 6), Position(4, 7))
    captures = available_captures(two_capturers, Color.WHITE)
    penalty = resolve_fuki_penalty(two_capturers, quiet_move, captures)

    assert penalty is not None
    assert penalty.burned_piece.position == Position(5, 6)
    assert penalty.nullifies_move


def test_first_capturer_burns_otherwise(two_capturers: Board) -> None:
    """The moved piece could not capture: the first capturer (in square order) burns and the move stands."""
    quiet_move = Move(Position(7, 0), Position(6, 1))
    captures = available_captures(two_capturers, Color.WHITE)
    penalty = resolve_fuki_penalty(two_capturers, quiet_move, captures)

    assert penalty is not None
    assert penalty.burned_piece.position == Position(5, 2)
    assert not penalty.nullifies_move
