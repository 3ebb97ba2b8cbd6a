"""Exceptions raised by the kinrow engine."""

from __future__ import annotations

from typing import Any, Dict


class GameError(ValueError):
    """Base error carrying a machine-readable code and structured context."""

    code = "GAME_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context: Dict[str, Any] = context


class ConfigurationError(GameError):
    code = "INVALID_CONFIG"


class IllegalMoveError(GameError):
    """A move the engine refuses; the position it was applied to is untouched."""

    code = "ILLEGAL_MOVE"


class GameOverError(IllegalMoveError):
    code = "TERMINAL_STATE_MOVE"


class WrongPlayerError(IllegalMoveError):
    code = "WRONG_PLAYER"


class PositionOutOfRangeError(IllegalMoveError):
    code = "POSITION_OUT_OF_RANGE"


class CellOccupiedError(IllegalMoveError):
    code = "CELL_OCCUPIED"

    @property
    def occupant(self):
        return self.context.get("occupant")


class PreconditionError(GameError):
    code = "NOT_TERMINAL"
