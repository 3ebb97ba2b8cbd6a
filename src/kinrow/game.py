"""Core data model and k-in-a-row line detection for N×N tic-tac-toe."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ConfigurationError


class Player(str, Enum):
    X = "X"
    O = "O"


class GameStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    DRAW = "draw"


class GameMode(str, Enum):
    HUMAN_VS_HUMAN = "human-vs-human"
    HUMAN_VS_COMPUTER = "human-vs-computer"
    COMPUTER_VS_COMPUTER = "computer-vs-computer"


Cell = Optional[Player]
Board = Tuple[Cell, ...]

SUPPORTED_BOARD_SIZES: Tuple[int, ...] = (3, 4, 7)
DEFAULT_K_IN_ROW: Dict[int, int] = {3: 3, 4: 3, 7: 4}
MIN_K_IN_ROW = 3

# (d_row, d_col): horizontal, vertical, diagonal, anti-diagonal
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (1, -1))


def opponent(player: Player) -> Player:
    return Player.O if player == Player.X else Player.X


# ---------- Configuration & values ----------


@dataclass(frozen=True)
class GameConfig:
    board_size: int = 3
    k_in_row: int = 3
    first_player: Player = Player.X
    mode: GameMode = GameMode.HUMAN_VS_HUMAN

    def __post_init__(self) -> None:
        # Accept plain strings ("X", "human-vs-computer") from callers
        try:
            object.__setattr__(self, "first_player", Player(self.first_player))
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid first player: {self.first_player!r}. Must be 'X' or 'O'",
                first_player=self.first_player,
            ) from exc
        try:
            object.__setattr__(self, "mode", GameMode(self.mode))
        except ValueError as exc:
            modes = ", ".join(m.value for m in GameMode)
            raise ConfigurationError(
                f"Invalid game mode: {self.mode!r}. Must be one of {modes}",
                mode=self.mode,
            ) from exc

        if (
            not isinstance(self.board_size, int)
            or isinstance(self.board_size, bool)
            or self.board_size not in SUPPORTED_BOARD_SIZES
        ):
            raise ConfigurationError(
                f"Invalid board size: {self.board_size}. "
                f"Must be one of {', '.join(map(str, SUPPORTED_BOARD_SIZES))}",
                board_size=self.board_size,
            )
        if (
            not isinstance(self.k_in_row, int)
            or isinstance(self.k_in_row, bool)
            or not MIN_K_IN_ROW <= self.k_in_row <= self.board_size
        ):
            raise ConfigurationError(
                f"Invalid k value: {self.k_in_row}. Must be between "
                f"{MIN_K_IN_ROW} and {self.board_size} for a "
                f"{self.board_size}x{self.board_size} board",
                board_size=self.board_size,
                k_in_row=self.k_in_row,
            )

    @classmethod
    def standard(
        cls,
        board_size: int,
        first_player: Player = Player.X,
        mode: GameMode = GameMode.HUMAN_VS_HUMAN,
    ) -> "GameConfig":
        """Config with the usual win length for ``board_size``."""
        if board_size not in DEFAULT_K_IN_ROW:
            raise ConfigurationError(
                f"Invalid board size: {board_size}. "
                f"Must be one of {', '.join(map(str, SUPPORTED_BOARD_SIZES))}",
                board_size=board_size,
            )
        return cls(
            board_size=board_size,
            k_in_row=DEFAULT_K_IN_ROW[board_size],
            first_player=first_player,
            mode=mode,
        )

    @property
    def cell_count(self) -> int:
        return self.board_size * self.board_size


@dataclass(frozen=True)
class Move:
    player: Player
    position: int
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game; the engine derives a new one per move."""

    board: Board
    current_player: Player
    config: GameConfig
    move_history: Tuple[Move, ...] = ()
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[Player] = None
    winning_line: Optional[Tuple[int, ...]] = None
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None


# ---------- Board helpers ----------


def empty_board(board_size: int) -> Board:
    return (None,) * (board_size * board_size)


def to_coord(index: int, board_size: int) -> Tuple[int, int]:
    return divmod(index, board_size)


def empty_cells(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c is None]


def is_board_full(board: Board) -> bool:
    return all(c is not None for c in board)


# ---------- Win detection ----------


def iter_winning_lines(
    board: Board, board_size: int, k_in_row: int
) -> Iterator[Tuple[Player, Tuple[int, ...]]]:
    """Yield ``(mark, indices)`` for every k-in-a-row on the board.

    Cells are scanned row-major; from each occupied cell the four directions
    are tried in ``DIRECTIONS`` order. A run whose end would leave the board
    is skipped, so lines never wrap around an edge. Indices are ordered from
    the start cell towards the end of the run.
    """
    for start, mark in enumerate(board):
        if mark is None:
            continue
        row, col = divmod(start, board_size)
        for d_row, d_col in DIRECTIONS:
            end_row = row + d_row * (k_in_row - 1)
            end_col = col + d_col * (k_in_row - 1)
            if not (0 <= end_row < board_size and 0 <= end_col < board_size):
                continue
            line = tuple(
                (row + d_row * step) * board_size + col + d_col * step
                for step in range(k_in_row)
            )
            if all(board[i] == mark for i in line):
                yield mark, line


def find_winning_line(
    board: Board, board_size: int, k_in_row: int
) -> Optional[Tuple[Player, Tuple[int, ...]]]:
    """Return the first line ``iter_winning_lines`` finds, else ``None``."""
    return next(iter_winning_lines(board, board_size, k_in_row), None)


def completes_line(board, board_size: int, k_in_row: int, index: int) -> bool:
    """True if the mark at ``index`` sits on a run of at least ``k_in_row``."""
    mark = board[index]
    if mark is None:
        return False
    row, col = divmod(index, board_size)
    for d_row, d_col in DIRECTIONS:
        run = 1
        for sign in (1, -1):
            r, c = row + sign * d_row, col + sign * d_col
            while (
                0 <= r < board_size
                and 0 <= c < board_size
                and board[r * board_size + c] == mark
            ):
                run += 1
                r += sign * d_row
                c += sign * d_col
        if run >= k_in_row:
            return True
    return False
