"""The Game board stores and queries the placement of pieces. It knows nothing about the rules."""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.checkers.fen import FENState
from src.checkers.moves import Move
from src.checkers.pieces import ID_PREFIX, Piece
from src.checkers.position import BOARD_SIZE, Position, is_on_board
from src.core.models import PieceRecord
from src.core.shared_types import Color

# Rows occupied by each color at the start of a game. Rows 3 and 4 are no-man's land.
STARTING_ROWS: dict[Color, range] = {
    Color.BLACK: range(0, 3),
    Color.WHITE: range(5, 8),
}

Grid = list[list[Optional[str]]]


@dataclass
class Board:
    position: dict[Position, Piece] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> Self:
        return cls({})

    @classmethod
    def initial(cls) -> Self:
        """12 men per color on the dark squares of their three home rows. Ids follow creation order: b-0 ... w-23."""
        board = cls.empty()
        counter = 0
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                square = Position(row, col)
                color = _home_color(row)
                if color is None or not square.is_dark():
                    continue
                board.place_piece(
                    Piece(f"{ID_PREFIX[color]}-{counter}", color, square)
                )
                counter += 1
        return board

    @classmethod
    def from_state(cls, state: FENState) -> Self:
        board = cls.empty()
        for counter, (number, (color, is_king)) in enumerate(
            sorted(state.placements.items())
        ):
            square = Position.from_square_number(number)
            board.place_piece(
                Piece(f"{ID_PREFIX[color]}-{counter}", color, square, is_king)
            )
        return board

    def to_state(self, color_to_move: Color) -> FENState:
        placements = {
            square.to_square_number(): (piece.color, piece.is_king)
            for square, piece in self.position.items()
        }
        return FENState(color_to_move, placements)

    def to_fen(self, color_to_move: Color) -> str:
        return self.to_state(color_to_move).to_fen()

    @classmethod
    def from_records(cls, records: list[PieceRecord]) -> Self:
        """Rebuild a board with the exact piece identities it was stored with."""
        board = cls.empty()
        for record in records:
            square = Position(int(record["row"]), int(record["col"]))
            board.place_piece(
                Piece(
                    id=str(record["id"]),
                    color=Color(record["color"]),
                    position=square,
                    is_king=bool(record["is_king"]),
                )
            )
        return board

    def to_records(self) -> list[PieceRecord]:
        return [
            {
                "id": piece.id,
                "color": piece.color.value,
                "row": piece.position.row,
                "col": piece.position.col,
                "is_king": piece.is_king,
            }
            for piece in self.pieces()
        ]

    # --- QUERIES ---
    def piece(self, square: Position) -> Optional[Piece]:
        return self.position.get(square)

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        return self.piece(Position(row, col))

    def is_empty(self, square: Position) -> bool:
        return square not in self.position

    @staticmethod
    def is_on_board(row: int, col: int) -> bool:
        return is_on_board(row, col)

    def pieces(self) -> list[Piece]:
        """All pieces, in row-major square order (the enumeration order used by the rules)"""
        return [self.position[square] for square in sorted(self.position)]

    def locate_color(self, color: Color) -> list[Position]:
        return [
            square
            for square in sorted(self.position)
            if self.position[square].color == color
        ]

    def pieces_of(self, color: Color) -> list[Piece]:
        return [self.position[square] for square in self.locate_color(color)]

    def count(self, color: Color) -> int:
        return len(self.locate_color(color))

    def count_pieces(self) -> dict[Color, int]:
        """Tally the pieces each player has on the board"""
        return {color: self.count(color) for color in Color}

    # --- UPDATES ---
    def place_piece(self, piece: Piece) -> None:
        square = piece.position
        if not (square.is_on_board() and square.is_dark()):
            raise ValueError(f"Pieces can only be placed on dark squares: {square}")
        if not self.is_empty(square):
            raise ValueError(f"Square {square} is already occupied")
        self.position[square] = piece

    def remove_piece(self, square: Position) -> Piece:
        if self.is_empty(square):
            raise ValueError(f"No piece to remove on {square}")
        return self.position.pop(square)

    def move_piece(self, move: Move) -> Piece:
        """
        Update the position on the board: relocate the moving piece (same object, so its identity persists)
        and remove the piece it jumped over, if any.
        """
        if move.captured_position is not None:
            self.remove_piece(move.captured_position)
        piece = self.remove_piece(move.from_position)
        piece.position = move.to_position
        self.place_piece(piece)
        return piece


def _home_color(row: int) -> Optional[Color]:
    return next((color for color, rows in STARTING_ROWS.items() if row in rows), None)


def board_to_grid(board: Board) -> Grid:
    """
    Stateless adapter for consumers that expect a row/col grid instead of a list of pieces.

    grid[row][col] is None for an empty square, 'w'/'b' for a man and 'W'/'B' for a king.
    """
    grid: Grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    for piece in board.pieces():
        grid[piece.position.row][piece.position.col] = piece.to_grid_code()
    return grid
