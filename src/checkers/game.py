"""
The Game class is the rules engine's state machine.
It is responsible for orchestrating all the business logic required to play a turn: validating a move against the
legal move set, applying mandatory capture (or the fuki penalty), executing the move, promoting, continuing capture
chains, switching turns and detecting the end of the game.

It is pure: no I/O, no knowledge of who the players are (that is the GameSession's job).
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.checkers.board import Board
from src.checkers.captures import (
    FukiPenalty,
    available_captures,
    continuing_captures,
    has_legal_move,
    resolve_fuki_penalty,
)
from src.checkers.fen import FENState
from src.checkers.moves import Move, moves_for_piece
from src.checkers.position import Position
from src.core.exceptions import (
    GameNotActiveError,
    GameStateError,
    IllegalMoveError,
    MandatoryCaptureError,
    NoDrawOfferError,
    NotYourTurnError,
    PermissionDeniedError,
)
from src.core.shared_types import Color, Outcome, Status


@dataclass
class MoveResult:
    """What happened when a move got accepted."""

    # None if the move was cancelled because the moving piece itself burned (fuki)
    move: Optional[Move]
    became_king: bool = False
    must_continue_capture: bool = False
    game_over: bool = False
    winner: Optional[Outcome] = None
    fuki_burned: bool = False
    burned_position: Optional[Position] = None


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY THE SESSION ---

    board: Board
    current_player: Color = Color.WHITE
    status: Status = Status.WAITING
    winner: Optional[Outcome] = None
    must_capture_from: Optional[Position] = None
    fuki_mode: bool = False
    pass_turn_allowed: bool = True
    draw_offered_by: Optional[Color] = None
    moves: list[Move] = field(default_factory=list)
    history: list[str] = field(default_factory=list)  # list of FEN strings

    @classmethod
    def new_game(
        cls,
        fuki_mode: bool = False,
        pass_turn_allowed: bool = True,
        starting_fen: Optional[str] = None,
    ) -> Self:
        """Standard starting position (white to move), unless a custom FEN is supplied."""
        if starting_fen:
            state = FENState.from_fen(starting_fen)
            board = Board.from_state(state)
            color_to_move = state.color_to_move
        else:
            board = Board.initial()
            color_to_move = Color.WHITE

        return cls(
            board=board,
            current_player=color_to_move,
            fuki_mode=fuki_mode,
            pass_turn_allowed=pass_turn_allowed,
        )

    @property
    def fen(self) -> str:
        return self.board.to_fen(self.current_player)

    def start(self) -> None:
        if self.status != Status.WAITING:
            raise GameStateError(f"Game cannot be started. status: {self.status}")
        self._change_status(Status.ACTIVE)

        # a custom starting position can already be decided
        self._update_game_status()

    def possible_moves(self, row: int, col: int) -> list[Move]:
        """
        Moves of the piece on the given square, for display purposes.

        Empty if the game is not running, the square is empty, or the piece does not belong to the player to move.
        """
        piece = self.board.piece_at(row, col)
        if self.status != Status.ACTIVE or piece is None:
            return []
        if piece.color != self.current_player:
            return []
        return moves_for_piece(piece, self.board, self.must_capture_from)

    def make_move(
        self,
        from_position: Position,
        to_position: Position,
        color: Optional[Color] = None,
    ) -> MoveResult:
        """
        Attempt to make a move
        -----

        1. the game must be running, and it must be your turn
        2. the move must be in the legal move set of the piece
        3. mandatory capture: reject a quiet move (standard) or burn a piece (fuki)
        4. update the board, promote
        5. continue the capture chain or pass the turn
        6. update game status (if needed)

        NOTE: all checks happen before the first update, so a rejected move leaves the game untouched.
        """
        # make sure the game is (still) in progress
        self._assert_active()

        # make sure it is your turn
        mover = self._assert_your_turn(color)

        # check if move is legal
        move = self._find_legal_move(from_position, to_position, mover)

        # mandatory capture rule (raises in standard mode)
        penalty = self._apply_capture_rule(move, mover)

        # update the FEN history (with the FEN before the move)
        self._update_fen_history()

        # answering a draw offer by moving declines it
        if self.draw_offered_by == mover.opponent:
            self.draw_offered_by = None

        if penalty is not None:
            self.board.remove_piece(penalty.burned_piece.position)

        if penalty is not None and penalty.nullifies_move:
            result = MoveResult(move=None)
            self._end_turn()
        else:
            result = self._execute(move)

        if penalty is not None:
            result.fuki_burned = True
            result.burned_position = penalty.burned_piece.position

        # update the Game Status / check for end condition
        self._update_game_status()
        result.game_over = self.status == Status.FINISHED
        result.winner = self.winner
        return result

    def pass_turn(self, color: Color) -> None:
        """Voluntarily stop a capture chain and hand the turn to the opponent."""
        self._assert_active()
        self._assert_your_turn(color)
        if not self.pass_turn_allowed:
            raise PermissionDeniedError("Stopping a capture chain is disabled for this game.")
        if self.must_capture_from is None:
            raise IllegalMoveError("Nothing to pass: no capture chain in progress.")

        self._update_fen_history()
        self._end_turn()
        self._update_game_status()

    def surrender(self, color: Optional[Color] = None) -> None:
        """The surrendering color (by default: the player to move) loses."""
        self._assert_active()
        loser = color or self.current_player
        self._finish(Outcome.win_for(loser.opponent))

    def offer_draw(self, color: Color) -> None:
        self._assert_active()
        self.draw_offered_by = color

    def accept_draw(self, color: Color) -> None:
        self._assert_active()
        self._assert_draw_offered_to(color)
        self._finish(Outcome.DRAW)

    def reject_draw(self, color: Color) -> None:
        self._assert_active()
        self._assert_draw_offered_to(color)
        self.draw_offered_by = None

    # -- PRIVATE HELPERS ---
    def _assert_active(self) -> None:
        if self.status != Status.ACTIVE:
            raise GameNotActiveError(f"Game is not in progress. status: {self.status}")

    def _assert_your_turn(self, color: Optional[Color]) -> Color:
        """You must wait for your turn before making a move. Without a color, the player to move is assumed."""
        if color is not None and color != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player} to make a move first."
            )
        return self.current_player

    def _assert_draw_offered_to(self, color: Color) -> None:
        if self.draw_offered_by != color.opponent:
            raise NoDrawOfferError(f"There is no draw offer for {color} to answer.")

    def _find_legal_move(
        self, from_position: Position, to_position: Position, mover: Color
    ) -> Move:
        piece = self.board.piece(from_position)
        if piece is None or piece.color != mover:
            raise IllegalMoveError(f"There is no {mover} piece on {from_position}.")

        legal_moves = moves_for_piece(piece, self.board, self.must_capture_from)
        move = next(
            (move for move in legal_moves if move.connects(from_position, to_position)),
            None,
        )
        if move is None:
            raise IllegalMoveError(f"Move not allowed: {from_position} -> {to_position}")
        return move

    def _apply_capture_rule(self, move: Move, mover: Color) -> Optional[FukiPenalty]:
        """
        A quiet move while a capture is available:
        * standard rules: rejected
        * fuki: accepted, but a piece burns (see captures.py for which one)
        """
        if move.is_capture:
            return None

        captures = available_captures(self.board, mover)
        if not captures:
            return None

        if not self.fuki_mode:
            raise MandatoryCaptureError("Capturing is mandatory: choose a capturing move.")
        return resolve_fuki_penalty(self.board, move, captures)

    def _execute(self, move: Move) -> MoveResult:
        """Call for the proper updates of the Board's position, then decide who moves next."""
        piece = self.board.move_piece(move)
        self.moves.append(move)

        # promotion is evaluated once, on the landing square
        became_king = not piece.is_king and piece.reaches_promotion_row()
        if became_king:
            piece.promote()

        # a piece that just captured keeps capturing if it can (possibly as a fresh king)
        must_continue = move.is_capture and bool(
            continuing_captures(self.board, move.to_position)
        )
        if must_continue:
            self.must_capture_from = move.to_position
        else:
            self._end_turn()

        return MoveResult(
            move=move, became_king=became_king, must_continue_capture=must_continue
        )

    def _end_turn(self) -> None:
        self.must_capture_from = None
        self.current_player = self.current_player.opponent

    def _update_fen_history(self) -> None:
        """Before making a change, commit the current position to the registry of FEN strings."""
        self.history.append(self.fen)

    def _update_game_status(self) -> None:
        """Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been updated: the player to move is (usually) the opponent of the player who just moved.
        """
        for color, count in self.board.count_pieces().items():
            if count == 0:
                self._finish(Outcome.win_for(color.opponent))
                return

        if not has_legal_move(self.board, self.current_player, self.must_capture_from):
            self._finish(Outcome.win_for(self.current_player.opponent))

    def _finish(self, outcome: Outcome) -> None:
        self.winner = outcome
        self.must_capture_from = None
        self.draw_offered_by = None
        self._change_status(Status.FINISHED)

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status
