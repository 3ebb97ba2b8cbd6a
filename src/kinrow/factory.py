"""Construction of configured engines, with presets for each supported board."""

from __future__ import annotations

from .engine import TicTacToeEngine
from .errors import ConfigurationError
from .game import GameConfig, GameMode, Player


def validate_config(config: GameConfig) -> None:
    if config is None:
        raise ConfigurationError("GameConfig is required")
    if not isinstance(config, GameConfig):
        raise ConfigurationError(
            f"Expected a GameConfig, got {type(config).__name__}",
            config=config,
        )
    # Field checks run in GameConfig.__post_init__; rebuilding re-runs them
    # for instances whose frozen fields were forced after construction.
    GameConfig(
        board_size=config.board_size,
        k_in_row=config.k_in_row,
        first_player=config.first_player,
        mode=config.mode,
    )


def create_engine(config: GameConfig) -> TicTacToeEngine:
    validate_config(config)
    return TicTacToeEngine(config)


def create_3x3_engine(first_player: Player = Player.X) -> TicTacToeEngine:
    return create_engine(GameConfig.standard(3, first_player=first_player))


def create_4x4_engine(first_player: Player = Player.X) -> TicTacToeEngine:
    return create_engine(GameConfig.standard(4, first_player=first_player))


def create_7x7_engine(first_player: Player = Player.X) -> TicTacToeEngine:
    """7x7 board, four in a row to win."""
    return create_engine(GameConfig.standard(7, first_player=first_player))


def create_human_vs_computer_engine(
    board_size: int, first_player: Player = Player.X
) -> TicTacToeEngine:
    return create_engine(
        GameConfig.standard(
            board_size, first_player=first_player, mode=GameMode.HUMAN_VS_COMPUTER
        )
    )
