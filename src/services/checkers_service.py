"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from datetime import datetime
from functools import wraps
from random import Random
from typing import Callable, Optional, TypeVar
from uuid import UUID

from src.api.models import (
    ActionResponse,
    CreateSessionRequest,
    CreateSessionResponse,
    GetStateRequest,
    JoinSessionRequest,
    JoinSessionResponse,
    MoveModel,
    MoveRequest,
    MoveResponse,
    PassTurnRequest,
    PieceModel,
    PlayerActionRequest,
    PositionModel,
    PossibleMovesRequest,
    PossibleMovesResponse,
    ReadyResponse,
    StateResponse,
    SurrenderRequest,
    ToggleFukiRequest,
    ToggleFukiResponse,
)
from src.checkers.board import board_to_grid
from src.checkers.moves import Move
from src.checkers.position import Position
from src.checkers.session import GameSession, utc_now
from src.core.config import Settings, configure_logging
from src.core.exceptions import GameError, SessionNotFoundError
from src.core.models import GameModel
from src.core.shared_types import PlayerId
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=ActionResponse)


def returns_error_response(
    response_type: type[ResponseT],
) -> Callable[[Callable[..., ResponseT]], Callable[..., ResponseT]]:
    """Rule and state violations never escape the service: they come back as a failed response."""

    def decorator(handler: Callable[..., ResponseT]) -> Callable[..., ResponseT]:
        @wraps(handler)
        def wrapper(*args, **kwargs) -> ResponseT:
            try:
                return handler(*args, **kwargs)
            except GameError as error:
                logger.info(f"{handler.__name__} rejected [{error.code}]: {error}")
                return response_type.from_error(error)

        return wrapper

    return decorator


def _to_position(model: PositionModel) -> Position:
    return Position(model.row, model.col)


def _to_position_model(position: Optional[Position]) -> Optional[PositionModel]:
    if position is None:
        return None
    return PositionModel(row=position.row, col=position.col)


def _to_move_model(move: Move) -> MoveModel:
    return MoveModel(
        from_position=_to_position_model(move.from_position),
        to_position=_to_position_model(move.to_position),
        is_capture=move.is_capture,
        captured_piece_id=move.captured_piece_id,
        captured_position=_to_position_model(move.captured_position),
        notation=move.to_notation(),
    )


class CheckersService:
    """Orchestration of layers for a draughts game."""

    def __init__(
        self,
        repository: GameRepository,
        settings: Optional[Settings] = None,
        rng: Optional[Random] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings.from_env()
        configure_logging(self.settings)
        self.rng = rng or Random()

    # -- API routes logic ---
    @returns_error_response(CreateSessionResponse)
    def create_session(self, request: CreateSessionRequest) -> CreateSessionResponse:
        """First player requested to create a new game. The creator is seated on a random color."""
        fuki_mode = (
            request.fuki_mode
            if request.fuki_mode is not None
            else self.settings.default_fuki_mode
        )
        session = GameSession.new_session(
            creator=request.creator_id,
            rng=self.rng,
            fuki_mode=fuki_mode,
            pass_turn_allowed=self.settings.allow_pass_turn,
            starting_fen=request.starting_fen,
        )
        _, session_id = self.repo.create_game(session.to_model())
        color = session.color_of(request.creator_id)
        logger.info(
            f"Session {session_id} created by {request.creator_id} (playing {color}, fuki={fuki_mode})"
        )
        return CreateSessionResponse(
            session_id=session_id, color=color, fuki_mode=fuki_mode
        )

    @returns_error_response(JoinSessionResponse)
    def join_session(self, request: JoinSessionRequest) -> JoinSessionResponse:
        """Second player requested to join a game."""
        session = self._load(request.session_id)
        result = session.join(request.player_id)
        if not result.already_joined:
            self._store(request.session_id, session)
        return JoinSessionResponse(
            color=result.color,
            both_joined=result.both_joined,
            already_joined=result.already_joined,
        )

    @returns_error_response(ReadyResponse)
    def set_ready(self, request: PlayerActionRequest) -> ReadyResponse:
        """A seated player signals readiness. Play starts once both players are ready."""
        session = self._load(request.session_id)
        started = session.set_ready(request.player_id)
        self._store(request.session_id, session)
        return ReadyResponse(started=started, ready=sorted(session.ready))

    @returns_error_response(StateResponse)
    def get_state(self, request: GetStateRequest) -> StateResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        session = self._load(request.session_id)
        return self._create_state_response(
            request.session_id, session, request.viewer_id
        )

    @returns_error_response(PossibleMovesResponse)
    def get_possible_moves(self, request: PossibleMovesRequest) -> PossibleMovesResponse:
        """Moves of the piece on the requested square (empty when it is not that piece's turn)."""
        session = self._load(request.session_id)
        moves = session.game.possible_moves(request.position.row, request.position.col)
        return PossibleMovesResponse(moves=[_to_move_model(move) for move in moves])

    @returns_error_response(MoveResponse)
    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt."""
        session = self._load(request.session_id)
        result = session.make_move(
            _to_position(request.from_position),
            _to_position(request.to_position),
            request.player_id,
        )
        self._store(request.session_id, session)
        return MoveResponse(
            move=_to_move_model(result.move) if result.move else None,
            became_king=result.became_king,
            must_continue_capture=result.must_continue_capture,
            game_over=result.game_over,
            winner=result.winner,
            fuki_burned=result.fuki_burned,
            burned_position=_to_position_model(result.burned_position),
            state=self._create_state_response(
                request.session_id, session, request.player_id
            ),
        )

    @returns_error_response(ActionResponse)
    def pass_turn(self, request: PassTurnRequest) -> ActionResponse:
        """Stop a capture chain voluntarily."""
        session = self._load(request.session_id)
        session.pass_turn(request.color)
        self._store(request.session_id, session)
        return ActionResponse()

    @returns_error_response(StateResponse)
    def surrender(self, request: SurrenderRequest) -> StateResponse:
        """Without a player id, the player to move gives up."""
        session = self._load(request.session_id)
        session.surrender(request.player_id)
        self._store(request.session_id, session)
        return self._create_state_response(
            request.session_id, session, request.player_id
        )

    @returns_error_response(ActionResponse)
    def offer_draw(self, request: PlayerActionRequest) -> ActionResponse:
        session = self._load(request.session_id)
        session.offer_draw(request.player_id)
        self._store(request.session_id, session)
        return ActionResponse()

    @returns_error_response(StateResponse)
    def accept_draw(self, request: PlayerActionRequest) -> StateResponse:
        session = self._load(request.session_id)
        session.accept_draw(request.player_id)
        self._store(request.session_id, session)
        return self._create_state_response(
            request.session_id, session, request.player_id
        )

    @returns_error_response(ActionResponse)
    def reject_draw(self, request: PlayerActionRequest) -> ActionResponse:
        session = self._load(request.session_id)
        session.reject_draw(request.player_id)
        self._store(request.session_id, session)
        return ActionResponse()

    @returns_error_response(ToggleFukiResponse)
    def toggle_fuki_mode(self, request: ToggleFukiRequest) -> ToggleFukiResponse:
        """Switch the fuki rule on/off before the game starts (creator only)."""
        session = self._load(request.session_id)
        fuki_mode = session.toggle_fuki_mode(request.requester_id)
        self._store(request.session_id, session)
        return ToggleFukiResponse(fuki_mode=fuki_mode)

    @returns_error_response(ActionResponse)
    def delete_session(self, session_id: UUID) -> ActionResponse:
        """Handle a request to delete a session record."""
        if self.repo.delete_game(session_id) is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        logger.info(f"Session {session_id} deleted")
        return ActionResponse()

    def sweep_inactive_sessions(self, now: Optional[datetime] = None) -> list[UUID]:
        """Remove every session without activity for longer than the configured timeout. Meant to be run periodically."""
        cutoff = (now or utc_now()) - self.settings.inactivity_timeout
        return self.repo.sweep_inactive(cutoff)

    # -- Internal helpers --
    def _create_state_response(
        self, session_id: UUID, session: GameSession, viewer_id: Optional[PlayerId]
    ) -> StateResponse:
        """Convert a session to a StateResponse. Viewer relative fields are only filled in for a seated viewer."""
        game = session.game
        my_color = session.find_color(viewer_id) if viewer_id is not None else None
        return StateResponse(
            session_id=session_id,
            pieces=[
                PieceModel(
                    id=piece.id,
                    color=piece.color,
                    row=piece.position.row,
                    col=piece.position.col,
                    is_king=piece.is_king,
                )
                for piece in game.board.pieces()
            ],
            grid=board_to_grid(game.board),
            fen=game.fen,
            current_player=game.current_player,
            status=game.status,
            winner=game.winner,
            my_color=my_color,
            opponent=session.opponent_of(viewer_id) if my_color else None,
            must_capture_from=_to_position_model(game.must_capture_from),
            fuki_mode=game.fuki_mode,
            players={color.value: player for color, player in session.players.items()},
            ready=sorted(session.ready),
            draw_offered_by=game.draw_offered_by,
            piece_counts={
                color.value: count for color, count in game.board.count_pieces().items()
            },
            move_history=[move.to_notation() for move in game.moves],
        )

    def _load(self, session_id: UUID) -> GameSession:
        return GameSession.from_model(self._fetch_game(session_id))

    def _store(self, session_id: UUID, session: GameSession) -> None:
        if self.repo.update_game(session_id, session.to_model()) is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")

    def _fetch_game(self, session_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(session_id)
        if game_model is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        return game_model
