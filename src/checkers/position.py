"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Russian draughts is played on the 8x8 board. Only the dark squares are used.
BOARD_SIZE = 8
SQUARES_PER_ROW = BOARD_SIZE // 2
NUM_PLAYABLE_SQUARES = BOARD_SIZE * SQUARES_PER_ROW

Vector = tuple[int, int]


def is_on_board(row: int, col: int) -> bool:
    return (0 <= row < BOARD_SIZE) and (0 <= col < BOARD_SIZE)


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"

    @classmethod
    def from_square_number(cls, number: int) -> Position:
        """Standard draughts numbering: the 32 dark squares are numbered 1-32, row by row, starting at row 0.

        Row 0 holds squares 1-4 on columns 1, 3, 5, 7; row 1 holds squares 5-8 on columns 0, 2, 4, 6; etc.
        """
        row, offset = divmod(number - 1, SQUARES_PER_ROW)
        col = 2 * offset + (1 if row % 2 == 0 else 0)
        return cls(row, col)

    def to_square_number(self) -> int:
        return self.row * SQUARES_PER_ROW + self.col // 2 + 1

    def is_on_board(self) -> bool:
        return is_on_board(self.row, self.col)

    def is_dark(self) -> bool:
        """Only squares where row + col is odd are playable."""
        return (self.row + self.col) % 2 == 1

    def step(self, direction: Vector) -> Position:
        dr, dc = direction
        return Position(self.row + dr, self.col + dc)
