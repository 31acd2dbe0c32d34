"""Typed errors raised by the game engine and the match registry.

Every error carries the HTTP status code and a stable error code so the
API layer can translate it without inspecting messages.
"""


class GameError(Exception):
    """Base class for all engine errors."""
    status_code = 500
    error_code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


# --- 400 ---

class ValidationError(GameError):
    """Malformed or out-of-range input."""
    status_code = 400
    error_code = "INVALID_REQUEST"
    default_message = "Invalid request"


class InvalidModeError(ValidationError):
    error_code = "INVALID_GAME_MODE"
    default_message = "Invalid game mode"


class InvalidActionError(ValidationError):
    error_code = "INVALID_ACTION"
    default_message = "Invalid action"


class InvalidDirectionError(ValidationError):
    error_code = "INVALID_DIRECTION"
    default_message = "Invalid direction"


class OutOfBoundsError(ValidationError):
    error_code = "OUT_OF_BOUNDS"
    default_message = "Position is outside the maze"


# --- 404 ---

class NotFoundError(GameError):
    """Unknown match or combatant."""
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class MatchNotFoundError(NotFoundError):
    default_message = "Match not found"


class UnknownCombatantError(NotFoundError):
    default_message = "Combatant not found"


# --- 409 ---

class ConflictError(GameError):
    """The request is well formed but clashes with the match state."""
    status_code = 409
    error_code = "CONFLICT"
    default_message = "Resource conflict"


class CapacityExceededError(ConflictError):
    error_code = "CAPACITY_EXCEEDED"
    default_message = "Match already has the maximum number of combatants"


class NotPlayingError(ConflictError):
    error_code = "NOT_PLAYING"
    default_message = "Match is not in playing state"


class MatchFinishedError(NotPlayingError):
    error_code = "GAME_ALREADY_FINISHED"
    default_message = "Match is already finished"


class NotYourTurnError(ConflictError):
    error_code = "NOT_YOUR_TURN"
    default_message = "Not your turn"


# --- 500 ---

class InternalError(GameError):
    """Unexpected internal state; the match has been moved to ERROR."""
