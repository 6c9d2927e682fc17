"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the move sets of men and (flying) kings.


Whether a capture is obligatory (and what happens if one is ignored) is decided later by the capture resolver and the Game
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.checkers.pieces import FORWARD, Piece, PieceKind
from src.checkers.position import Position, Vector
from src.core.shared_types import Color


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Position) -> Optional[Piece]: ...


DIAGONALS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]

STEP_SEPARATOR = "-"
CAPTURE_SEPARATOR = "x"


@dataclass(frozen=True)
class Move:
    """A single atomic step or jump. A multi-jump is a sequence of these."""

    from_position: Position
    to_position: Position
    is_capture: bool = False
    captured_piece_id: Optional[str] = None
    captured_position: Optional[Position] = None

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """
        Standard draughts move notation
        ---
        ---
        Square numbers (1-32) separated by '-' for a step or by 'x' for a capture

        examples:
        * "22-18": the piece on square 22 steps to square 18
        * "22x15": the piece on square 22 jumps to square 15

        NOTE: The jumped piece is not part of the notation.
        """
        is_capture = CAPTURE_SEPARATOR in notation
        separator = CAPTURE_SEPARATOR if is_capture else STEP_SEPARATOR
        start, end = notation.split(separator)
        return cls(
            from_position=Position.from_square_number(int(start)),
            to_position=Position.from_square_number(int(end)),
            is_capture=is_capture,
        )

    def to_notation(self) -> str:
        separator = CAPTURE_SEPARATOR if self.is_capture else STEP_SEPARATOR
        return f"{self.from_position.to_square_number()}{separator}{self.to_position.to_square_number()}"

    def connects(self, from_position: Position, to_position: Position) -> bool:
        return self.from_position == from_position and self.to_position == to_position


def forward_diagonals(color: Color) -> list[Vector]:
    """White moves UP the board (decreasing row), black moves DOWN"""
    forward = FORWARD[color]
    return [(forward, -1), (forward, 1)]


def _capture(piece: Piece, jumped: Piece, landing: Position) -> Move:
    return Move(
        from_position=piece.position,
        to_position=landing,
        is_capture=True,
        captured_piece_id=jumped.id,
        captured_position=jumped.position,
    )


# --- QUIET MOVES ---
def single_step_moves(piece: Piece, board: Board, directions: list[Vector]) -> list[Move]:
    """A man steps onto the adjacent (empty) square along one of the given directions"""
    moves: list[Move] = []
    for direction in directions:
        target_square = piece.position.step(direction)
        if target_square.is_on_board() and board.piece(target_square) is None:
            moves.append(Move(piece.position, target_square))
    return moves


def raycasting_moves(piece: Piece, board: Board, directions: list[Vector]) -> list[Move]:
    """
    Raycasting algorithm
    -----

    A flying king slides along a diagonal until it hits another piece or the edge of the board.
    Every empty square on the way is a move.
    """
    moves: list[Move] = []
    for direction in directions:
        target_square = piece.position.step(direction)
        while target_square.is_on_board() and board.piece(target_square) is None:
            moves.append(Move(piece.position, target_square))
            target_square = target_square.step(direction)
    return moves


# --- CAPTURES ---
def short_captures(piece: Piece, board: Board, directions: list[Vector]) -> list[Move]:
    """
    A man jumps over an adjacent enemy piece and lands on the square directly behind it.

    NOTE: Men capture backwards as well, so this is called with all four diagonals.
    """
    moves: list[Move] = []
    for direction in directions:
        jumped_square = piece.position.step(direction)
        landing_square = jumped_square.step(direction)
        if not landing_square.is_on_board():
            continue

        jumped = board.piece(jumped_square)
        if jumped is None or jumped.color == piece.color:
            continue

        if board.piece(landing_square) is None:
            moves.append(_capture(piece, jumped, landing_square))
    return moves


def flying_captures(piece: Piece, board: Board, directions: list[Vector]) -> list[Move]:
    """
    Raycasting algorithm for the captures of a flying king
    ---

    Walk along each diagonal:
    * an own piece blocks the diagonal
    * the first enemy piece found can be jumped ...
    * ... unless another piece follows before an empty landing square
    * every empty square behind the jumped piece (up to the next obstruction) is a landing square
    """
    moves: list[Move] = []
    for direction in directions:
        jumped: Optional[Piece] = None
        target_square = piece.position.step(direction)
        while target_square.is_on_board():
            occupant = board.piece(target_square)
            if occupant is None:
                if jumped is not None:
                    moves.append(_capture(piece, jumped, target_square))
            elif occupant.color == piece.color or jumped is not None:
                break
            else:
                jumped = occupant
            target_square = target_square.step(direction)
    return moves


# --- MOVEMENT RULES ---
def candidate_man_moves(piece: Piece, board: Board, mid_chain: bool) -> list[Move]:
    """A man captures in all four directions, but only steps forward. No quiet moves while a capture chain is running."""
    moves = short_captures(piece, board, DIAGONALS)
    if not mid_chain:
        moves.extend(single_step_moves(piece, board, forward_diagonals(piece.color)))
    return moves


def candidate_king_moves(piece: Piece, board: Board, mid_chain: bool) -> list[Move]:
    """The flying king moves and captures along all four diagonals, over any distance."""
    moves = flying_captures(piece, board, DIAGONALS)
    if not mid_chain:
        moves.extend(raycasting_moves(piece, board, DIAGONALS))
    return moves


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board, bool], list[Move]]
MOVEMENT_RULES: dict[PieceKind, CandidateMovesFn] = {
    PieceKind.MAN: candidate_man_moves,
    PieceKind.KING: candidate_king_moves,
}


def moves_for_piece(
    piece: Piece, board: Board, must_capture_from: Optional[Position] = None
) -> list[Move]:
    """
    All moves of a single piece.

    While a capture chain is running (must_capture_from is set), only the piece standing on that square may move.
    """
    if must_capture_from is not None and piece.position != must_capture_from:
        return []

    movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.kind]
    return movement_rule(piece, board, must_capture_from is not None)
