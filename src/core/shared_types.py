"""
Type definitions used across layers
"""

from enum import StrEnum

# Player identifiers are normalized to strings once, when a request enters the API layer.
PlayerId = str


class Status(StrEnum):
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class Outcome(StrEnum):
    """How a finished game ended. A win is reported by the color of the winner."""

    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"

    @classmethod
    def win_for(cls, color: Color) -> "Outcome":
        return cls(color.value)


class ErrorCode(StrEnum):
    """Every rejection that crosses the service boundary is reported with one of these codes."""

    INVALID_MOVE = "invalid_move"
    MANDATORY_CAPTURE = "mandatory_capture"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_NOT_ACTIVE = "game_not_active"
    INVALID_STATE = "invalid_state"
    SESSION_FULL = "session_full"
    SESSION_NOT_FOUND = "session_not_found"
    NOT_A_PLAYER = "not_a_player"
    NOT_ALLOWED = "not_allowed"
    NO_DRAW_OFFER = "no_draw_offer"
    INVALID_REQUEST = "invalid_request"
    INVALID_FEN = "invalid_fen"
