"""Rule violations raised by the engines and reported by the orchestrator."""

from __future__ import annotations


class HybridGoError(Exception):
    """Base class for recoverable game-rule errors."""

    code = "HYBRIDGO_ERROR"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code.lower().replace("_", " "))

    @property
    def message(self) -> str:
        return str(self)


class OutOfBoundsError(HybridGoError):
    """Raised when a coordinate lies outside the board."""

    code = "OUT_OF_BOUNDS"


class OccupiedCellError(HybridGoError):
    """Raised when placing onto a cell that already holds a stone or piece."""

    code = "OCCUPIED_CELL"


class SuicideError(HybridGoError):
    """Raised when a stone would leave its own group without liberties."""

    code = "SUICIDE"


class IllegalPieceMoveError(HybridGoError):
    """Raised for wrong patterns, blocked paths, wrong owners and palace/river violations."""

    code = "ILLEGAL_PIECE_MOVE"


class InsufficientTokensError(HybridGoError):
    """Raised when summoning without a token to spend."""

    code = "INSUFFICIENT_TOKENS"


class BoardFullError(HybridGoError):
    """Raised when summon placement exhausts its retry bound."""

    code = "BOARD_FULL"


class NoHistoryError(HybridGoError):
    """Raised on undo with an empty history."""

    code = "NO_HISTORY"


class GameAlreadyOverError(HybridGoError):
    """Raised for any intent after a color reached the territory threshold."""

    code = "GAME_ALREADY_OVER"


class WrongPhaseError(HybridGoError):
    """Raised when the current battle phase does not accept the intent."""

    code = "WRONG_PHASE"


class InvalidTransitionError(HybridGoError):
    """Raised by the battle state machine for transitions it does not allow."""

    code = "INVALID_TRANSITION"
