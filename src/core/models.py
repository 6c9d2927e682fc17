"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str
# {"id": "w-12", "color": "white", "row": 5, "col": 0, "is_king": False}
PieceRecord = dict[str, str | int | bool]
# [row, col] (lists survive a JSON round trip, tuples do not)
SquareRecord = list[int]


@dataclass
class GameModel:
    """Transport-safe representation of a checkers session used between API, Service, DB, and Game layers."""

    pieces: list[PieceRecord]
    current_player: PieceColor
    status: str
    registered_players: dict[PieceColor, PlayerName]
    creator: PlayerName
    created_at: datetime
    last_activity_at: datetime
    winner: Optional[str] = None
    must_capture_from: Optional[SquareRecord] = None
    fuki_mode: bool = False
    pass_turn_allowed: bool = True
    ready_players: list[PlayerName] = field(default_factory=list)
    draw_offered_by: Optional[PieceColor] = None
    moves: list[str] = field(default_factory=list)
    history_fen: list[str] = field(default_factory=list)
