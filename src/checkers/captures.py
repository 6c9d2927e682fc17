"""
Capture-chain resolver: all legal moves of a player, mandatory captures, and the fuki penalty.

Fuki ("huffing")
---
In the fuki variant a player may ignore an available capture. The move is accepted, but a piece that could have
captured is burned (removed from the board):

* if the piece that moved could itself have captured, that piece burns. Its move is cancelled and the turn passes.
* otherwise the piece of the first capture found (enumeration order: row-major square order) burns and the
  submitted move is played as normal.

NOTE: "first capture found" is an arbitrary tie-break. It is not the nearest or the most valuable piece.
"""

from dataclasses import dataclass
from typing import Optional

from src.checkers.board import Board
from src.checkers.moves import Move, moves_for_piece
from src.checkers.pieces import Piece
from src.checkers.position import Position
from src.core.shared_types import Color


def all_valid_moves(
    board: Board, color: Color, must_capture_from: Optional[Position] = None
) -> list[Move]:
    """
    Union of the moves of every piece of the given color.

    A piece in the middle of a capture chain cannot switch to a quiet move, so only captures remain in that case.
    """
    moves: list[Move] = []
    for piece in board.pieces_of(color):
        moves.extend(moves_for_piece(piece, board, must_capture_from))

    if must_capture_from is not None:
        return [move for move in moves if move.is_capture]
    return moves


def available_captures(board: Board, color: Color) -> list[Move]:
    """Every capture the player could make right now (used to decide if the player could have captured)"""
    return [move for move in all_valid_moves(board, color) if move.is_capture]


def continuing_captures(board: Board, square: Position) -> list[Move]:
    """Captures available to the piece on the given square, i.e. the ways to continue a chain from there."""
    piece = board.piece(square)
    if piece is None:
        return []
    return [
        move for move in moves_for_piece(piece, board, square) if move.is_capture
    ]


def has_legal_move(
    board: Board, color: Color, must_capture_from: Optional[Position] = None
) -> bool:
    return len(all_valid_moves(board, color, must_capture_from)) > 0


@dataclass(frozen=True)
class FukiPenalty:
    burned_piece: Piece
    # The moved piece itself burned: the submitted move is not played
    nullifies_move: bool


def resolve_fuki_penalty(
    board: Board, move: Move, captures: list[Move]
) -> Optional[FukiPenalty]:
    """
    Decide which piece burns when a quiet move is played while captures were available.

    Returns None when no penalty applies (the move is a capture, or there was nothing to capture).
    """
    if move.is_capture or not captures:
        return None

    capturing_squares = [capture.from_position for capture in captures]
    moved_piece_could_capture = move.from_position in capturing_squares
    guilty_square = (
        move.from_position if moved_piece_could_capture else capturing_squares[0]
    )
    guilty_piece = board.piece(guilty_square)

    # for the typechecker: every capture starts from an occupied square
    assert guilty_piece is not None
    return FukiPenalty(
        burned_piece=guilty_piece, nullifies_move=moved_piece_could_capture
    )
