"""
Draughts FEN: a single-line encoding of a position (pieces + side to move).
"""

from dataclasses import dataclass
from typing import Self

from src.checkers.position import NUM_PLAYABLE_SQUARES
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color

STARTING_FEN = (
    "W:W21,22,23,24,25,26,27,28,29,30,31,32:B1,2,3,4,5,6,7,8,9,10,11,12"
)
KING_MARKER = "K"
# A color never has more pieces than it starts with
MAX_PIECES_PER_COLOR = 12

COLOR_TO_FEN: dict[Color, str] = {
    Color.WHITE: "W",
    Color.BLACK: "B",
}
FEN_TO_COLOR: dict[str, Color] = {value: key for key, value in COLOR_TO_FEN.items()}

# (color, is_king) of the piece standing on a square
Placement = tuple[Color, bool]


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows the draughts FEN notation.

    <side to move>:<W or B><pieces>:<W or B><pieces>
    """
    parts = fen.strip().split(":")
    if len(parts) != 3:
        return False

    if not is_valid_color_code(parts[0]):
        return False

    # each color must be listed exactly once
    piece_segments = parts[1:]
    if sorted(segment[:1] for segment in piece_segments) != ["B", "W"]:
        return False

    # a square can hold at most one piece, regardless of its color
    squares_seen: set[int] = set()
    for segment in piece_segments:
        if not is_valid_piece_list(segment[1:]):
            return False
        squares = [_square_number(entry) for entry in _entries(segment[1:])]
        if len(squares) > MAX_PIECES_PER_COLOR:
            return False
        if squares_seen.intersection(squares) or len(set(squares)) != len(squares):
            return False
        squares_seen.update(squares)
    return True


def is_valid_color_code(color: str) -> bool:
    return color in FEN_TO_COLOR


def is_valid_piece_list(pieces: str) -> bool:
    """Comma separated square numbers. A leading K marks a king. The list can be empty."""
    for entry in _entries(pieces):
        number = entry.removeprefix(KING_MARKER)
        if not number.isdigit():
            return False
        if not (1 <= int(number) <= NUM_PLAYABLE_SQUARES):
            return False
    return True


def _entries(pieces: str) -> list[str]:
    return [entry.strip() for entry in pieces.split(",") if entry.strip()]


def _square_number(entry: str) -> int:
    return int(entry.removeprefix(KING_MARKER))


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    The side to move, followed by the white and the black pieces listed by square number (1-32).
    Kings get a 'K' prefix.

    ex) The standard starting position:
    W:W21,22,23,24,25,26,27,28,29,30,31,32:B1,2,3,4,5,6,7,8,9,10,11,12
    i.e. white to move, white men on squares 21-32 and black men on squares 1-12.
    """

    color_to_move: Color
    placements: dict[int, Placement]

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        active_color, *piece_segments = fen.strip().split(":")
        placements: dict[int, Placement] = {}
        for segment in piece_segments:
            color = FEN_TO_COLOR[segment[0]]
            for entry in _entries(segment[1:]):
                is_king = entry.startswith(KING_MARKER)
                placements[_square_number(entry)] = (color, is_king)
        return cls(FEN_TO_COLOR[active_color], placements)

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data (squares in ascending order)"""
        segments = [COLOR_TO_FEN[self.color_to_move]]
        for color in (Color.WHITE, Color.BLACK):
            entries = [
                f"{KING_MARKER if is_king else ''}{number}"
                for number, (piece_color, is_king) in sorted(self.placements.items())
                if piece_color == color
            ]
            segments.append(f"{COLOR_TO_FEN[color]}{','.join(entries)}")
        return ":".join(segments)
