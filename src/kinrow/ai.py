"""Depth-limited minimax with alpha-beta pruning for k-in-a-row tic-tac-toe."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .game import GameState, Player, completes_line, opponent

logger = logging.getLogger(__name__)

NO_MOVE = -1
WIN_SCORE = 10
MIN_DEPTH = 2

# Per board size: (max empty cells, depth cutoff), first match wins.
# A 3×3 board is always searched to the end.
DEPTH_LIMITS: Dict[int, Tuple[Tuple[int, int], ...]] = {
    3: ((9, 15),),
    4: ((10, 15), (13, 8), (16, 6)),
    7: ((10, 10), (16, 6), (25, 4), (49, 3)),
}

# TT entry flags
EXACT, LOWER, UPPER = 0, 1, 2


def depth_limit(available_moves: int, board_size: int) -> int:
    """Ply cutoff for a ``board_size`` board with ``available_moves`` empty cells."""
    for max_empty, depth in DEPTH_LIMITS.get(board_size, ()):
        if available_moves <= max_empty:
            return depth
    return MIN_DEPTH


def centre_first(board_size: int) -> Tuple[int, ...]:
    """All indices, central cells first; equal distances keep ascending order."""
    span = board_size - 1

    def distance(index: int) -> int:
        row, col = divmod(index, board_size)
        return abs(2 * row - span) + abs(2 * col - span)

    return tuple(sorted(range(board_size * board_size), key=distance))


@dataclass
class TTEntry:
    score: float
    flag: int


@dataclass(frozen=True)
class _Search:
    player: Player
    board_size: int
    k_in_row: int
    max_depth: int
    order: Tuple[int, ...]


@dataclass
class SearchStats:
    nodes: int = 0
    depth: int = 0
    score: Optional[float] = None


@dataclass
class MinimaxAI:
    """Computer player recommending a move for ``state.current_player``.

    Usage:
      - MinimaxAI() searches to the depth picked by ``depth_limit``
      - MinimaxAI(max_depth=4) caps every search at 4 plies
      - calculate_next_move(state) -> board index, or NO_MOVE on a full board

    Moves are tried central cells first, and that order also breaks ties
    between equally scored moves.
    """

    max_depth: Optional[int] = None
    last_search: SearchStats = field(default_factory=SearchStats, repr=False)
    _tt: Dict[Tuple[Optional[Player], ...], TTEntry] = field(
        default_factory=dict, repr=False
    )

    # ---- public API ----

    def calculate_next_move(self, state: GameState) -> int:
        board: List[Optional[Player]] = list(state.board)
        size, k = state.config.board_size, state.config.k_in_row
        order = centre_first(size)
        moves = [i for i in order if board[i] is None]
        self.last_search = SearchStats()
        if not moves:
            return NO_MOVE
        if len(moves) == 1:
            return moves[0]

        player = Player(state.current_player)

        # Tactical shortcuts; minimax would pick the same moves, only slower
        win = self._immediate_wins(board, moves, player, size, k)
        if win:
            return win[0]
        threats = self._immediate_wins(board, moves, opponent(player), size, k)
        if len(threats) == 1:
            return threats[0]

        if self.max_depth is None:
            depth = depth_limit(len(moves), size)
        else:
            depth = self.max_depth
        depth = max(MIN_DEPTH, depth)
        search = _Search(
            player=player, board_size=size, k_in_row=k, max_depth=depth, order=order
        )
        # Scores are relative to this search's root, so entries never carry over
        self._tt = {}

        alpha, beta = -math.inf, math.inf
        best_move, best_score = NO_MOVE, -math.inf
        for move in moves:
            board[move] = player
            score = self._minimax(search, board, move, 1, alpha, beta, False)
            board[move] = None
            if score > best_score:
                best_move, best_score = move, score
            alpha = max(alpha, best_score)

        self.last_search.depth = depth
        self.last_search.score = best_score
        logger.debug(
            "Searched %d nodes at depth %d on %dx%d: move %d scores %s",
            self.last_search.nodes,
            depth,
            size,
            size,
            best_move,
            best_score,
        )
        return best_move

    # ---- core search ----

    def _minimax(
        self,
        search: _Search,
        board: List[Optional[Player]],
        last_move: int,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> float:
        self.last_search.nodes += 1

        # Terminal/leaf: only the last move can have completed a line
        if completes_line(board, search.board_size, search.k_in_row, last_move):
            if board[last_move] == search.player:
                return WIN_SCORE - depth
            return -WIN_SCORE + depth
        moves = [i for i in search.order if board[i] is None]
        if not moves or depth >= search.max_depth:
            return 0

        # The board fixes the depth within one search, so it is a full key
        key = tuple(board)
        tt_hit = self._tt.get(key)
        if tt_hit:
            if tt_hit.flag == EXACT:
                return tt_hit.score
            if tt_hit.flag == LOWER and tt_hit.score >= beta:
                return tt_hit.score
            if tt_hit.flag == UPPER and tt_hit.score <= alpha:
                return tt_hit.score

        alpha_orig, beta_orig = alpha, beta
        if maximizing:
            value = -math.inf
            for move in moves:
                board[move] = search.player
                score = self._minimax(search, board, move, depth + 1, alpha, beta, False)
                board[move] = None
                value = max(value, score)
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
        else:
            value = math.inf
            mover = opponent(search.player)
            for move in moves:
                board[move] = mover
                score = self._minimax(search, board, move, depth + 1, alpha, beta, True)
                board[move] = None
                value = min(value, score)
                beta = min(beta, value)
                if alpha >= beta:
                    break

        if value <= alpha_orig:
            flag = UPPER
        elif value >= beta_orig:
            flag = LOWER
        else:
            flag = EXACT
        self._tt[key] = TTEntry(score=value, flag=flag)
        return value

    # ---- tactics ----

    @staticmethod
    def _immediate_wins(
        board: List[Optional[Player]],
        moves: List[int],
        player: Player,
        size: int,
        k: int,
    ) -> List[int]:
        wins: List[int] = []
        for move in moves:
            board[move] = player
            if completes_line(board, size, k, move):
                wins.append(move)
            board[move] = None
        return wins
