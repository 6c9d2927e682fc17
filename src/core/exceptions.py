"""
Custom exceptions raised by the domain, persistence and API layers.

Every exception carries an ErrorCode, so the service layer can turn it into a structured
response without knowing which layer raised it.
"""

from src.core.shared_types import ErrorCode


class GameError(Exception):
    """Top-level exception for anything that goes wrong while handling a game request."""

    code: ErrorCode = ErrorCode.INVALID_STATE


# --- RULES ---
class IllegalMoveError(GameError):
    code = ErrorCode.INVALID_MOVE


class MandatoryCaptureError(IllegalMoveError):
    """A quiet move was submitted while a capture is available (and fuki mode is off)."""

    code = ErrorCode.MANDATORY_CAPTURE


class NotYourTurnError(GameError):
    code = ErrorCode.NOT_YOUR_TURN


# --- GAME / SESSION STATE ---
class GameStateError(GameError):
    code = ErrorCode.INVALID_STATE


class GameNotActiveError(GameStateError):
    code = ErrorCode.GAME_NOT_ACTIVE


class SessionFullError(GameStateError):
    code = ErrorCode.SESSION_FULL


class PlayerNotFoundError(GameError):
    """The player id is not seated in this session."""

    code = ErrorCode.NOT_A_PLAYER


class PermissionDeniedError(GameError):
    code = ErrorCode.NOT_ALLOWED


class NoDrawOfferError(GameError):
    code = ErrorCode.NO_DRAW_OFFER


# --- PERSISTENCE ---
class RepositoryError(GameError):
    code = ErrorCode.SESSION_NOT_FOUND


class SessionNotFoundError(RepositoryError):
    code = ErrorCode.SESSION_NOT_FOUND


# --- INPUT PARSING ---
class InvalidRequestError(GameError):
    code = ErrorCode.INVALID_REQUEST


class InvalidFENError(GameError):
    code = ErrorCode.INVALID_FEN
