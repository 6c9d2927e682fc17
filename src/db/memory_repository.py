"""Implementation of (Game)Repository that keeps the games in a dictionary (the default store)"""

import logging
from copy import deepcopy
from datetime import datetime
from uuid import UUID, uuid4

from src.core.models import GameModel

logger = logging.getLogger(__name__)


class InMemoryGameRepository:
    """Games live as long as the process does. Records are copied in and out, so callers never share state with the store."""

    def __init__(self) -> None:
        self.games: dict[UUID, GameModel] = {}

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game = self.games.get(game_id)
        return deepcopy(game) if game else None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        self.games[new_id] = deepcopy(game)
        return deepcopy(game), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self.games:
            return None
        self.games[game_id] = deepcopy(game)
        return deepcopy(game)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self.games.pop(game_id, None)

    def sweep_inactive(self, cutoff: datetime) -> list[UUID]:
        expired = [
            game_id
            for game_id, game in self.games.items()
            if game.last_activity_at < cutoff
        ]
        for game_id in expired:
            del self.games[game_id]
        if expired:
            logger.info(f"Swept {len(expired)} inactive game(s)")
        return expired
