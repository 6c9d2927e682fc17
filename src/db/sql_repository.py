"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


def as_utc(moment: datetime) -> datetime:
    """SQLite hands back naive datetimes. Every timestamp in this project is UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def sweep_inactive(self, cutoff: datetime) -> list[UUID]:
        """Remove every game without activity since the cutoff."""
        query = select(DBGame).where(DBGame.last_activity_at < as_utc(cutoff))
        expired = list(self.db.scalars(query))
        for game_db in expired:
            self.db.delete(game_db)
        self.db.commit()
        if expired:
            logger.info(f"Swept {len(expired)} inactive game(s)")
        return [game_db.id for game_db in expired]

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGame, game: GameModel) -> None:
        """Copy every field of the data transfer model onto the SQLAlchemy model."""
        game_db.pieces = game.pieces
        game_db.current_player = game.current_player
        game_db.status = game.status
        game_db.winner = game.winner
        game_db.must_capture_from = game.must_capture_from
        game_db.fuki_mode = game.fuki_mode
        game_db.pass_turn_allowed = game.pass_turn_allowed
        game_db.registered_players = game.registered_players
        game_db.creator = game.creator
        game_db.ready_players = game.ready_players
        game_db.draw_offered_by = game.draw_offered_by
        game_db.moves = game.moves
        game_db.history_fen = game.history_fen
        game_db.created_at = as_utc(game.created_at)
        game_db.last_activity_at = as_utc(game.last_activity_at)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            pieces=list(game_db.pieces),
            current_player=game_db.current_player,
            status=game_db.status,
            registered_players=dict(game_db.registered_players),
            creator=game_db.creator,
            created_at=as_utc(game_db.created_at),
            last_activity_at=as_utc(game_db.last_activity_at),
            winner=game_db.winner,
            must_capture_from=game_db.must_capture_from,
            fuki_mode=game_db.fuki_mode,
            pass_turn_allowed=game_db.pass_turn_allowed,
            ready_players=list(game_db.ready_players),
            draw_offered_by=game_db.draw_offered_by,
            moves=list(game_db.moves),
            history_fen=list(game_db.history_fen),
        )
