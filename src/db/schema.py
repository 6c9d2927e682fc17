"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    # list of piece records: {"id", "color", "row", "col", "is_king"}
    pieces: Mapped[list[dict]] = mapped_column(JSON)
    current_player: Mapped[str]
    status: Mapped[str]
    winner: Mapped[Optional[str]]
    must_capture_from: Mapped[Optional[list[int]]] = mapped_column(JSON, nullable=True)
    fuki_mode: Mapped[bool] = mapped_column(default=False)
    pass_turn_allowed: Mapped[bool] = mapped_column(default=True)
    registered_players: Mapped[dict[str, str]] = mapped_column(JSON)
    creator: Mapped[str]
    ready_players: Mapped[list[str]] = mapped_column(JSON, default=list)
    draw_offered_by: Mapped[Optional[str]]
    moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    history_fen: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
