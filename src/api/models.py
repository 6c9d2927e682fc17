"""Requests and Response models"""

from typing import Any, Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.checkers.fen import is_valid_fen
from src.checkers.position import BOARD_SIZE
from src.core.exceptions import GameError, InvalidRequestError
from src.core.shared_types import Color, ErrorCode, Outcome, Status

PieceColor = str
PlayerName = str
# 8x8 cell codes: "w", "W", "b", "B" or None
GridModel = list[list[Optional[str]]]


def normalize_player_id(value: Any) -> Any:
    """Player ids may arrive as numbers (e.g. chat user ids). Internally they are always strings."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a player id.")
    return str(value)


# --- SHARED MODELS ---
class PositionModel(BaseModel):
    row: int
    col: int

    @field_validator(*["row", "col"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value < BOARD_SIZE:
            raise InvalidRequestError(
                f"Coordinate {value} is off the board. Use 0 to {BOARD_SIZE - 1}."
            )
        return value


class PieceModel(BaseModel):
    id: str
    color: Color
    row: int
    col: int
    is_king: bool


class MoveModel(BaseModel):
    from_position: PositionModel
    to_position: PositionModel
    is_capture: bool
    captured_piece_id: Optional[str] = None
    captured_position: Optional[PositionModel] = None
    notation: str


# --- REQUEST MODELS ---
class CreateSessionRequest(BaseModel):
    creator_id: PlayerName
    # None: use the configured default
    fuki_mode: Optional[bool] = None
    starting_fen: Optional[str] = None

    @field_validator("creator_id", mode="before")
    @classmethod
    def validate_creator_id(cls, value: Any) -> Any:
        return normalize_player_id(value)

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        if not is_valid_fen(value):
            raise InvalidRequestError(
                f"Cannot interpret starting_fen: {value!r} as a draughts FEN string."
            )
        return value.strip()


class JoinSessionRequest(BaseModel):
    session_id: UUID
    player_id: PlayerName

    @field_validator("player_id", mode="before")
    @classmethod
    def validate_player_id(cls, value: Any) -> Any:
        return normalize_player_id(value)


class PlayerActionRequest(BaseModel):
    """Used for every action that only needs to know who is asking: ready, surrender, draw offers."""

    session_id: UUID
    player_id: PlayerName

    @field_validator("player_id", mode="before")
    @classmethod
    def validate_player_id(cls, value: Any) -> Any:
        return normalize_player_id(value)


class GetStateRequest(BaseModel):
    session_id: UUID
    viewer_id: Optional[PlayerName] = None

    @field_validator("viewer_id", mode="before")
    @classmethod
    def validate_viewer_id(cls, value: Any) -> Any:
        return normalize_player_id(value)


class SurrenderRequest(BaseModel):
    session_id: UUID
    # None: the player to move gives up
    player_id: Optional[PlayerName] = None

    @field_validator("player_id", mode="before")
    @classmethod
    def validate_player_id(cls, value: Any) -> Any:
        return normalize_player_id(value)


class PossibleMovesRequest(BaseModel):
    session_id: UUID
    position: PositionModel


class MoveRequest(BaseModel):
    session_id: UUID
    from_position: PositionModel
    to_position: PositionModel
    # None: move on behalf of the player to move
    player_id: Optional[PlayerName] = None

    @field_validator("player_id", mode="before")
    @classmethod
    def validate_player_id(cls, value: Any) -> Any:
        return normalize_player_id(value)


class PassTurnRequest(BaseModel):
    session_id: UUID
    color: Color


class ToggleFukiRequest(BaseModel):
    session_id: UUID
    requester_id: PlayerName

    @field_validator("requester_id", mode="before")
    @classmethod
    def validate_requester_id(cls, value: Any) -> Any:
        return normalize_player_id(value)


# --- RESPONSE MODELS ---
class ActionResponse(BaseModel):
    """Every response tells whether the request succeeded. On failure, error and message say why."""

    success: bool = True
    error: Optional[ErrorCode] = None
    message: Optional[str] = None

    @classmethod
    def from_error(cls, error: GameError) -> Self:
        return cls(success=False, error=error.code, message=str(error))


class CreateSessionResponse(ActionResponse):
    session_id: Optional[UUID] = None
    color: Optional[Color] = None
    fuki_mode: Optional[bool] = None


class JoinSessionResponse(ActionResponse):
    color: Optional[Color] = None
    both_joined: bool = False
    already_joined: bool = False


class ReadyResponse(ActionResponse):
    started: bool = False
    ready: list[PlayerName] = []


class StateResponse(ActionResponse):
    session_id: Optional[UUID] = None
    pieces: list[PieceModel] = []
    grid: GridModel = []
    fen: Optional[str] = None
    current_player: Optional[Color] = None
    status: Optional[Status] = None
    winner: Optional[Outcome] = None
    # viewer relative, only filled in for a seated viewer
    my_color: Optional[Color] = None
    opponent: Optional[PlayerName] = None
    must_capture_from: Optional[PositionModel] = None
    fuki_mode: Optional[bool] = None
    players: dict[PieceColor, PlayerName] = {}
    ready: list[PlayerName] = []
    draw_offered_by: Optional[Color] = None
    piece_counts: dict[PieceColor, int] = {}
    move_history: list[str] = []


class PossibleMovesResponse(ActionResponse):
    moves: list[MoveModel] = []


class MoveResponse(ActionResponse):
    move: Optional[MoveModel] = None
    became_king: bool = False
    must_continue_capture: bool = False
    game_over: bool = False
    winner: Optional[Outcome] = None
    fuki_burned: bool = False
    burned_position: Optional[PositionModel] = None
    state: Optional[StateResponse] = None


class ToggleFukiResponse(ActionResponse):
    fuki_mode: Optional[bool] = None
