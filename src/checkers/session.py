"""
One match from creation to the end: the seats, the readiness gate, the variant settings and the activity clock.

The rules themselves live in the Game; a GameSession translates player ids into colors and delegates.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from random import Random
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.game import Game, MoveResult
from src.checkers.moves import Move
from src.checkers.position import Position
from src.core.exceptions import (
    GameNotActiveError,
    GameStateError,
    PermissionDeniedError,
    PlayerNotFoundError,
    SessionFullError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Outcome, PlayerId, Status

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class JoinResult:
    color: Color
    both_joined: bool
    # Re-joining is a no-op, not an error
    already_joined: bool = False


@dataclass
class GameSession:
    game: Game
    creator: PlayerId
    players: dict[Color, PlayerId]
    ready: set[PlayerId] = field(default_factory=set)
    created_at: datetime = field(default_factory=utc_now)
    last_activity_at: datetime = field(default_factory=utc_now)

    @classmethod
    def new_session(
        cls,
        creator: PlayerId,
        rng: Optional[Random] = None,
        fuki_mode: bool = False,
        pass_turn_allowed: bool = True,
        starting_fen: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Self:
        """The creator gets a uniformly random color; the second player gets the other one."""
        rng = rng or Random()
        creator_color = rng.choice([Color.WHITE, Color.BLACK])
        game = Game.new_game(
            fuki_mode=fuki_mode,
            pass_turn_allowed=pass_turn_allowed,
            starting_fen=starting_fen,
        )
        timestamp = now or utc_now()
        return cls(
            game=game,
            creator=creator,
            players={creator_color: creator},
            created_at=timestamp,
            last_activity_at=timestamp,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameSession from the information the Service layer actually has"""

        # Validation
        if model.status not in [status.value for status in Status]:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        game = Game(
            board=Board.from_records(model.pieces),
            current_player=Color(model.current_player),
            status=Status(model.status),
            winner=Outcome(model.winner) if model.winner else None,
            must_capture_from=(
                Position(*model.must_capture_from) if model.must_capture_from else None
            ),
            fuki_mode=model.fuki_mode,
            pass_turn_allowed=model.pass_turn_allowed,
            draw_offered_by=(
                Color(model.draw_offered_by) if model.draw_offered_by else None
            ),
            moves=[Move.from_notation(notation) for notation in model.moves],
            history=list(model.history_fen),
        )
        return cls(
            game=game,
            creator=model.creator,
            players={
                Color(color): player
                for color, player in model.registered_players.items()
            },
            ready=set(model.ready_players),
            created_at=model.created_at,
            last_activity_at=model.last_activity_at,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        game = self.game
        return GameModel(
            pieces=game.board.to_records(),
            current_player=game.current_player.value,
            status=game.status.value,
            registered_players={
                color.value: player for color, player in self.players.items()
            },
            creator=self.creator,
            created_at=self.created_at,
            last_activity_at=self.last_activity_at,
            winner=game.winner.value if game.winner else None,
            must_capture_from=(
                [game.must_capture_from.row, game.must_capture_from.col]
                if game.must_capture_from
                else None
            ),
            fuki_mode=game.fuki_mode,
            pass_turn_allowed=game.pass_turn_allowed,
            ready_players=sorted(self.ready),
            draw_offered_by=game.draw_offered_by.value if game.draw_offered_by else None,
            moves=[move.to_notation() for move in game.moves],
            history_fen=list(game.history),
        )

    # --- SEATS ---
    @property
    def status(self) -> Status:
        return self.game.status

    @property
    def both_joined(self) -> bool:
        return all(color in self.players for color in Color)

    def find_color(self, player: PlayerId) -> Optional[Color]:
        return next(
            (color for color, seated in self.players.items() if seated == player), None
        )

    def color_of(self, player: PlayerId) -> Color:
        color = self.find_color(player)
        if color is None:
            raise PlayerNotFoundError(f"Player {player!r} is not seated in this game.")
        return color

    def opponent_of(self, player: PlayerId) -> Optional[PlayerId]:
        color = self.find_color(player)
        if color is None:
            return None
        return self.players.get(color.opponent)

    def join(self, player: PlayerId, now: Optional[datetime] = None) -> JoinResult:
        """Registering the 2nd player to an open game"""
        seated_color = self.find_color(player)
        if seated_color is not None:
            logger.info(f"Player {player} is already seated as {seated_color}")
            return JoinResult(seated_color, self.both_joined, already_joined=True)

        if self.both_joined:
            raise SessionFullError("Cannot join this game. Both seats are taken.")

        free_color = next(color for color in Color if color not in self.players)
        self.players[free_color] = player
        self.touch(now)
        logger.info(f"Player {player} joined as {free_color}")
        return JoinResult(free_color, self.both_joined)

    def set_ready(self, player: PlayerId, now: Optional[datetime] = None) -> bool:
        """Mark a seated player as ready. The game starts once both seats are filled and both players are ready."""
        self.color_of(player)
        if self.status == Status.FINISHED:
            raise GameNotActiveError("Game is already finished.")

        self.ready.add(player)
        self.touch(now)
        everyone_ready = self.both_joined and all(
            seated in self.ready for seated in self.players.values()
        )
        if everyone_ready and self.status == Status.WAITING:
            self.game.start()
            logger.info(
                f"Game started: white={self.players[Color.WHITE]} black={self.players[Color.BLACK]} fuki={self.game.fuki_mode}"
            )
            if self.status == Status.FINISHED:
                logger.info(f"Game finished at the start. winner: {self.game.winner}")
        return self.status != Status.WAITING

    def toggle_fuki_mode(self, requester: PlayerId, now: Optional[datetime] = None) -> bool:
        """The variant can only be changed before play starts, and only by the creator."""
        if self.status != Status.WAITING:
            raise GameStateError("The fuki rule is locked once the game has started.")
        if requester != self.creator:
            raise PermissionDeniedError("Only the creator of the game can change the fuki rule.")

        self.game.fuki_mode = not self.game.fuki_mode
        self.touch(now)
        return self.game.fuki_mode

    # --- PLAY ---
    def make_move(
        self,
        from_position: Position,
        to_position: Position,
        player: Optional[PlayerId] = None,
        now: Optional[datetime] = None,
    ) -> MoveResult:
        """Without a player id the move is made on behalf of the player to move."""
        color = self.color_of(player) if player is not None else None
        result = self.game.make_move(from_position, to_position, color)
        self.touch(now)

        if result.fuki_burned:
            logger.info(f"Fuki: piece on {result.burned_position} burned")
        if result.game_over:
            logger.info(f"Game finished. winner: {result.winner}")
        return result

    def pass_turn(self, color: Color, now: Optional[datetime] = None) -> None:
        self.game.pass_turn(color)
        self.touch(now)

    def surrender(
        self, player: Optional[PlayerId] = None, now: Optional[datetime] = None
    ) -> None:
        color = self.color_of(player) if player is not None else None
        self.game.surrender(color)
        self.touch(now)
        logger.info(f"Game finished by surrender. winner: {self.game.winner}")

    def offer_draw(self, player: PlayerId, now: Optional[datetime] = None) -> None:
        self.game.offer_draw(self.color_of(player))
        self.touch(now)

    def accept_draw(self, player: PlayerId, now: Optional[datetime] = None) -> None:
        self.game.accept_draw(self.color_of(player))
        self.touch(now)
        logger.info("Game finished by agreement: draw")

    def reject_draw(self, player: PlayerId, now: Optional[datetime] = None) -> None:
        self.game.reject_draw(self.color_of(player))
        self.touch(now)

    # --- ACTIVITY ---
    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_activity_at = now or utc_now()

    def is_inactive(self, now: datetime, timeout: timedelta) -> bool:
        return now - self.last_activity_at > timeout
