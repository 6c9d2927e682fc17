"""Defines the checkers pieces: men and (flying) kings"""

from dataclasses import dataclass
from enum import Enum, auto

from src.checkers.position import BOARD_SIZE, Position
from src.core.shared_types import Color


class PieceKind(Enum):
    MAN = auto()
    KING = auto()


# White starts at the bottom (rows 5-7) and moves up the board, black the other way round
FORWARD: dict[Color, int] = {
    Color.WHITE: -1,
    Color.BLACK: 1,
}

PROMOTION_ROW: dict[Color, int] = {
    Color.WHITE: 0,
    Color.BLACK: BOARD_SIZE - 1,
}

ID_PREFIX: dict[Color, str] = {
    Color.WHITE: "w",
    Color.BLACK: "b",
}


@dataclass
class Piece:
    id: str
    color: Color
    position: Position
    is_king: bool = False

    @property
    def kind(self) -> PieceKind:
        return PieceKind.KING if self.is_king else PieceKind.MAN

    @property
    def forward(self) -> int:
        """Row direction of a man's quiet move"""
        return FORWARD[self.color]

    def reaches_promotion_row(self) -> bool:
        return self.position.row == PROMOTION_ROW[self.color]

    def promote(self) -> None:
        """Promotion is permanent: a king never becomes a man again."""
        self.is_king = True

    def to_grid_code(self) -> str:
        # lower case: men, upper case: kings
        code = ID_PREFIX[self.color]
        return code.upper() if self.is_king else code
