"""kinrow package exposing the k-in-a-row engine, its search opponent, and the web API."""

from .ai import NO_MOVE, MinimaxAI
from .api import app
from .engine import TicTacToeEngine
from .errors import (
    CellOccupiedError,
    ConfigurationError,
    GameError,
    GameOverError,
    IllegalMoveError,
    PositionOutOfRangeError,
    PreconditionError,
    WrongPlayerError,
)
from .factory import (
    create_3x3_engine,
    create_4x4_engine,
    create_7x7_engine,
    create_engine,
    create_human_vs_computer_engine,
)
from .game import GameConfig, GameMode, GameState, GameStatus, Move, Player

__all__ = [
    "CellOccupiedError",
    "ConfigurationError",
    "GameConfig",
    "GameError",
    "GameMode",
    "GameOverError",
    "GameState",
    "GameStatus",
    "IllegalMoveError",
    "MinimaxAI",
    "Move",
    "NO_MOVE",
    "Player",
    "PositionOutOfRangeError",
    "PreconditionError",
    "TicTacToeEngine",
    "WrongPlayerError",
    "app",
    "create_3x3_engine",
    "create_4x4_engine",
    "create_7x7_engine",
    "create_engine",
    "create_human_vs_computer_engine",
]
