"""FastAPI service exposing the kinrow engine to a browser front end."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import NO_MOVE, MinimaxAI
from .engine import TicTacToeEngine
from .errors import ConfigurationError, IllegalMoveError
from .factory import create_engine
from .game import (
    DEFAULT_K_IN_ROW,
    SUPPORTED_BOARD_SIZES,
    GameConfig,
    GameMode,
    GameState,
    Player,
)

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """An active game: its engine, latest state and computer opponent."""

    engine: TicTacToeEngine
    state: GameState
    ai: MinimaxAI
    computer_players: Tuple[Player, ...] = ()
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_computer_turn(self) -> bool:
        return (
            not self.engine.is_terminal(self.state)
            and self.state.current_player in self.computer_players
        )


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="kinrow",
    description="N×N k-in-a-row tic-tac-toe with a minimax opponent",
)


AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.6)


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    board_size: int = Field(default=3, alias="boardSize")
    k_in_row: Optional[int] = Field(
        default=None,
        alias="kInRow",
        description="Marks in a row needed to win; defaults per board size",
    )
    first_player: Player = Field(default=Player.X, alias="firstPlayer")
    mode: GameMode = GameMode.HUMAN_VS_HUMAN
    computer_player: Player = Field(
        default=Player.O,
        alias="computerPlayer",
        description="Mark played by the computer in human-vs-computer games",
    )

    @field_validator("board_size")
    @classmethod
    def ensure_supported_board_size(cls, value: int) -> int:
        if value not in SUPPORTED_BOARD_SIZES:
            raise ValueError(
                f"Unsupported board size {value}. "
                f"Choose one of {', '.join(map(str, SUPPORTED_BOARD_SIZES))}."
            )
        return value

    def to_config(self) -> GameConfig:
        k_in_row = self.k_in_row
        if k_in_row is None:
            k_in_row = DEFAULT_K_IN_ROW[self.board_size]
        return GameConfig(
            board_size=self.board_size,
            k_in_row=k_in_row,
            first_player=self.first_player,
            mode=self.mode,
        )

    def computer_players(self) -> Tuple[Player, ...]:
        if self.mode is GameMode.HUMAN_VS_COMPUTER:
            return (self.computer_player,)
        if self.mode is GameMode.COMPUTER_VS_COMPUTER:
            return (Player.X, Player.O)
        return ()


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    position: int


def _create_session(request: NewGameRequest) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    try:
        engine = create_engine(request.to_config())
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    session = GameSession(
        engine=engine,
        state=engine.initial_state(),
        ai=MinimaxAI(),
        computer_players=request.computer_players(),
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s: %dx%d, k=%d, %s",
        session_id,
        engine.config.board_size,
        engine.config.board_size,
        engine.config.k_in_row,
        engine.config.mode.value,
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _play_computer_move(game_id: str, session: GameSession) -> None:
    """Search and apply one move for the side to move. Caller holds the lock."""

    position = session.ai.calculate_next_move(session.state)
    if position == NO_MOVE:
        return
    player = session.state.current_player
    session.state = session.engine.play(session.state, position)
    logger.info(
        "Computer %s played %d in game %s (%d nodes)",
        player.value,
        position,
        game_id,
        session.ai.last_search.nodes,
    )


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if session.is_computer_turn():
                _play_computer_move(game_id, session)
        finally:
            session.ai_pending = False


def _schedule_ai_turn(
    game_id: str, session: GameSession, background_tasks: Optional[BackgroundTasks]
) -> None:
    """Queue the computer's reply in human-vs-computer games."""

    if session.engine.config.mode is not GameMode.HUMAN_VS_COMPUTER:
        return
    with session.lock:
        if not session.is_computer_turn() or session.ai_pending:
            return
        session.ai_pending = True
    if background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = session.state
        engine = session.engine
        config = state.config
        history: List[Dict[str, object]] = [
            {
                "player": move.player.value,
                "position": move.position,
                "timestamp": move.timestamp,
            }
            for move in state.move_history
        ]

        payload: Dict[str, object] = {
            "id": game_id,
            "board": [cell.value if cell else None for cell in state.board],
            "boardSize": config.board_size,
            "kInRow": config.k_in_row,
            "mode": config.mode.value,
            "firstPlayer": config.first_player.value,
            "currentPlayer": state.current_player.value,
            "status": state.status.value,
            "winner": state.winner.value if state.winner else None,
            "winningLine": list(state.winning_line) if state.winning_line else None,
            "legalMoves": engine.legal_moves(state),
            "moveHistory": history,
            "computerPlayers": [p.value for p in session.computer_players],
            "aiPending": session.ai_pending,
            "startTime": state.start_time,
            "endTime": state.end_time,
        }
        if history:
            payload["lastMove"] = history[-1]
        return payload


def _apply_player_move(
    game_id: str,
    session: GameSession,
    position: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        if session.ai_pending or session.is_computer_turn():
            raise HTTPException(
                status_code=400, detail="Computer is completing its move"
            )
        try:
            session.state = session.engine.play(session.state, position)
        except IllegalMoveError as exc:
            logger.info("Rejected move %s in game %s: %s", position, game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    _schedule_ai_turn(game_id, session, background_tasks)


@app.post("/api/game")
def create_game(
    request: NewGameRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    game_id, session = _create_session(request)
    _schedule_ai_turn(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.position, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/computer-move")
def make_computer_move(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if session.engine.is_terminal(session.state):
            raise HTTPException(status_code=400, detail="Game already finished")
        if session.ai_pending or not session.is_computer_turn():
            raise HTTPException(
                status_code=400, detail="It is not a computer player's turn"
            )
        _play_computer_move(game_id, session)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.state = session.engine.initial_state()
        session.ai_pending = False
    _schedule_ai_turn(game_id, session, background_tasks)
    return _serialize_session(game_id, session)
