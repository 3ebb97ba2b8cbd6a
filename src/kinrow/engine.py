"""State transitions for k-in-a-row tic-tac-toe."""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import List, Optional, Tuple

from .errors import (
    CellOccupiedError,
    GameOverError,
    IllegalMoveError,
    PositionOutOfRangeError,
    PreconditionError,
    WrongPlayerError,
)
from .game import (
    GameConfig,
    GameState,
    GameStatus,
    Move,
    Player,
    empty_board,
    find_winning_line,
    is_board_full,
    iter_winning_lines,
    opponent,
)

logger = logging.getLogger(__name__)


class TicTacToeEngine:
    """Pure state-transition functions bound to one game configuration.

    The engine holds no game state of its own: every method takes a
    ``GameState`` and either inspects it or returns a new one, so a single
    engine can serve any number of games.
    """

    def __init__(self, config: GameConfig) -> None:
        self.config = config

    def __repr__(self) -> str:
        return f"TicTacToeEngine(config={self.config!r})"

    # ---- lifecycle ----

    def initial_state(self, config: Optional[GameConfig] = None) -> GameState:
        config = config or self.config
        return GameState(
            board=empty_board(config.board_size),
            current_player=config.first_player,
            config=config,
            start_time=time.time(),
        )

    # ---- queries ----

    def legal_moves(self, state: GameState) -> List[int]:
        if state.status != GameStatus.PLAYING:
            return []
        return [i for i, c in enumerate(state.board) if c is None]

    def is_terminal(self, state: GameState) -> bool:
        return state.status != GameStatus.PLAYING

    def winner(self, state: GameState) -> Optional[Player]:
        """Winning mark of a finished game, ``None`` for a draw."""
        if not self.is_terminal(state):
            raise PreconditionError(
                "Cannot determine winner of non-terminal game state",
                status=state.status.value,
            )
        return state.winner

    def k_in_row(self, state: GameState) -> List[Tuple[int, ...]]:
        """Every k-in-a-row on a won board; the recorded ``winning_line`` comes first."""
        if state.winning_line is None:
            return []
        size, k = state.config.board_size, state.config.k_in_row
        lines = [line for _, line in iter_winning_lines(state.board, size, k)]
        return lines or [tuple(state.winning_line)]

    # ---- transitions ----

    def apply_move(self, state: GameState, move: Move) -> GameState:
        """Return the state after ``move``; raise ``IllegalMoveError`` if refused.

        ``state`` is left untouched either way.
        """
        self._validate_move(state, move)
        move = dataclasses.replace(move, player=Player(move.player))

        board = list(state.board)
        board[move.position] = Player(state.current_player)
        new_board = tuple(board)

        size, k = state.config.board_size, state.config.k_in_row
        found = find_winning_line(new_board, size, k)
        if found is not None:
            status = GameStatus.WON
            winner: Optional[Player] = Player(found[0])
            winning_line: Optional[Tuple[int, ...]] = found[1]
        else:
            status = GameStatus.DRAW if is_board_full(new_board) else GameStatus.PLAYING
            winner = None
            winning_line = None

        end_time = None
        if status != GameStatus.PLAYING:
            end_time = time.time()
            logger.debug(
                "Game finished after %d moves: %s (winner=%s)",
                len(state.move_history) + 1,
                status.value,
                winner.value if winner else None,
            )

        return GameState(
            board=new_board,
            current_player=opponent(state.current_player),
            config=state.config,
            move_history=state.move_history + (move,),
            status=status,
            winner=winner,
            winning_line=winning_line,
            start_time=state.start_time,
            end_time=end_time,
        )

    def try_apply_move(self, state: GameState, move: Move) -> GameState:
        """Lenient variant of ``apply_move``: refused moves return ``state`` itself."""
        try:
            return self.apply_move(state, move)
        except IllegalMoveError:
            return state

    def play(self, state: GameState, position: int) -> GameState:
        """Apply a move at ``position`` for whoever is to move."""
        return self.apply_move(state, Move(player=state.current_player, position=position))

    # ---- helpers ----

    def _validate_move(self, state: GameState, move: Move) -> None:
        if state.status != GameStatus.PLAYING:
            raise GameOverError(
                f"Cannot apply move to terminal game. Game status: "
                f"{state.status.value}, Winner: "
                f"{state.winner.value if state.winner else None}",
                status=state.status.value,
                position=move.position,
            )

        if move.player != state.current_player:
            raise WrongPlayerError(
                f"Move player {_mark(move.player)} does not match current "
                f"player {_mark(state.current_player)}",
                player=_mark(move.player),
                current_player=_mark(state.current_player),
            )

        cells = len(state.board)
        if not 0 <= move.position < cells:
            size = state.config.board_size
            raise PositionOutOfRangeError(
                f"Invalid move position: {move.position}. Valid range: "
                f"0-{cells - 1} for {size}x{size} board",
                position=move.position,
                valid_range=(0, cells - 1),
            )

        occupant = state.board[move.position]
        if occupant is not None:
            raise CellOccupiedError(
                f"Cannot move to occupied cell at position {move.position}. "
                f"Cell contains: {_mark(occupant)}",
                position=move.position,
                occupant=Player(occupant),
            )


def _mark(player) -> str:
    return player.value if isinstance(player, Player) else str(player)
