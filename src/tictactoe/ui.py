"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import os
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import MinimaxAI
from .game import PLAYERS, Player, TicTacToeGame

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and, when present, its computer opponent."""

    game: TicTacToeGame
    computer: Optional[MinimaxAI]
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe played in the browser")


# Pause before the computer answers so the player notices the turn change
AI_THINK_DELAY: float = float(os.environ.get("TICTACTOE_AI_DELAY", "1.5"))


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    vs_computer: bool = Field(
        default=True,
        alias="vsComputer",
        description="Play against the computer instead of a second local player",
    )
    computer_mark: Optional[str] = Field(
        default=None,
        alias="computerMark",
        description="Mark played by the computer; picked at random when omitted",
    )

    @field_validator("computer_mark")
    @classmethod
    def ensure_known_mark(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in PLAYERS:
            raise ValueError(
                f"Unsupported mark {value!r}. Choose one of {', '.join(PLAYERS)}."
            )
        return value


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(
    vs_computer: bool, computer_mark: Optional[Player]
) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    computer: Optional[MinimaxAI] = None
    if vs_computer:
        computer = MinimaxAI(player=computer_mark or random.choice(PLAYERS))
    session = GameSession(game=TicTacToeGame(), computer=computer)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s (%s)",
        session_id,
        f"computer plays {computer.player}" if computer else "two players",
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _computer_to_move(session: GameSession) -> bool:
    game = session.game
    return (
        session.computer is not None
        and not game.is_over
        and game.current_player == session.computer.player
    )


def _player_name(session: GameSession, player: Player) -> str:
    if session.computer is not None:
        return "Computer" if player == session.computer.player else "Player"
    return "Player 1" if player == "X" else "Player 2"


def _note(session: GameSession) -> str:
    game = session.game
    if game.winner:
        return f"{_player_name(session, game.winner)} wins!"
    if game.drawn:
        return "It's a tie game."
    return f"{_player_name(session, game.current_player)} has turn."


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        try:
            if not _computer_to_move(session):
                return
            player = session.game.current_player
            cell_index = session.computer.choose(session.game)
            session.game.play_move(cell_index)
            session.move_log.append({"player": player, "cellIndex": cell_index})
            logger.info("Game %s: computer %s played %d", game_id, player, cell_index)
        finally:
            session.ai_pending = False


def _schedule_ai_turn(
    game_id: str, session: GameSession, background_tasks: Optional[BackgroundTasks]
) -> None:
    # Caller holds session.lock
    if not _computer_to_move(session):
        return
    session.ai_pending = True
    if background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "cells": list(game.cells),
            "currentPlayer": game.current_player,
            "vsComputer": session.computer is not None,
            "computerMark": session.computer.player if session.computer else None,
            "winner": game.winner,
            "winningLine": list(game.winning_line) if game.winning_line else None,
            "drawn": game.drawn,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "note": _note(session),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        game = session.game
        if game.is_over:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(
                status_code=400, detail="Computer is completing its move"
            )

        if _computer_to_move(session):
            raise HTTPException(status_code=400, detail="It is the computer's turn")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "cellIndex": cell_index})
        logger.info("Game %s: %s played %d", game_id, player, cell_index)
        if game.is_over:
            logger.info("Game %s finished: %s", game_id, _note(session))

        _schedule_ai_turn(game_id, session, background_tasks)


@app.post("/api/game")
def create_game(
    request: NewGameRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    game_id, session = _create_session(request.vs_computer, request.computer_mark)
    with session.lock:
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
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      .actions {
        display: flex;
        gap: 0.75rem;
        justify-content: center;
        margin-bottom: 1.25rem;
      }
      button.action {
        border: none;
        border-radius: 999px;
        padding: 0.6rem 1.1rem;
        font-weight: 600;
        background: #2d4bd8;
        color: #fff;
        cursor: pointer;
      }
      #note {
        min-height: 1.5rem;
        margin-bottom: 1rem;
        font-weight: 500;
      }
      #message {
        min-height: 1.25rem;
        color: #c0392b;
        margin-top: 0.75rem;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 8px;
        width: 300px;
        margin: 0 auto;
      }
      .board--disabled .cell {
        cursor: default;
      }
      .cell {
        height: 92px;
        border-radius: 12px;
        border: none;
        background: #eef1ff;
        font-size: 2.6rem;
        font-weight: 700;
        color: #13203a;
        cursor: pointer;
      }
      .cell--win {
        background: #ffe08a;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div class="actions">
        <button class="action" id="action-btn-comp">Play vs Computer</button>
        <button class="action" id="action-btn-player">Two Players</button>
      </div>
      <div id="note">Pick a mode to start.</div>
      <div class="board board--disabled" id="board"></div>
      <div id="message"></div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const noteEl = document.getElementById('note');
      const messageEl = document.getElementById('message');
      let gameState = null;
      let pollHandle = null;

      for (let i = 0; i < 9; i++) {
        const cell = document.createElement('button');
        cell.className = 'cell';
        cell.setAttribute('cell-index', i);
        boardEl.appendChild(cell);
      }

      function render() {
        const cells = boardEl.querySelectorAll('.cell');
        const line = gameState?.winningLine || [];
        cells.forEach((cell, idx) => {
          cell.textContent = gameState ? gameState.cells[idx] : '';
          cell.classList.toggle('cell--win', line.includes(idx));
        });
        noteEl.textContent = gameState ? gameState.note : 'Pick a mode to start.';
        const active = gameState && !gameState.winner && !gameState.drawn && !gameState.aiPending;
        boardEl.classList.toggle('board--disabled', !active);
      }

      function setState(data) {
        gameState = data;
        render();
        if (gameState.aiPending) {
          if (!pollHandle) pollHandle = setTimeout(poll, 300);
        }
      }

      async function poll() {
        pollHandle = null;
        if (!gameState) return;
        const response = await fetch(`/api/game/${gameState.id}`);
        if (response.ok) setState(await response.json());
      }

      async function start(vsComputer) {
        messageEl.textContent = '';
        const response = await fetch('/api/game', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ vsComputer }),
        });
        if (!response.ok) {
          messageEl.textContent = 'Unable to start game';
          return;
        }
        setState(await response.json());
      }

      boardEl.addEventListener('click', async (event) => {
        const index = event.target.getAttribute('cell-index');
        if (index === null || !gameState || boardEl.classList.contains('board--disabled')) {
          return;
        }
        messageEl.textContent = '';
        const response = await fetch(`/api/game/${gameState.id}/move`, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ cellIndex: Number.parseInt(index, 10) }),
        });
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          messageEl.textContent = payload?.detail || 'Invalid move';
          return;
        }
        setState(await response.json());
      });

      document.getElementById('action-btn-comp').addEventListener('click', () => start(true));
      document.getElementById('action-btn-player').addEventListener('click', () => start(false));
    </script>
  </body>
</html>
"""
