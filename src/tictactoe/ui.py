"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .controller import GameController, Presenter
from .game import BOARD_SIZE, EMPTY, Mode, Player, Status
from .scheduler import Scheduler, TimerScheduler

logger = logging.getLogger(__name__)


class WebPresenter(Presenter):
    """Keeps the last rendered view so the browser can poll for it."""

    def __init__(self) -> None:
        self.cells: List[str] = [EMPTY] * BOARD_SIZE
        self.status = ""
        self.game_over = False

    def on_board_changed(self, index: int, symbol: Player) -> None:
        self.cells[index] = symbol
        if symbol == EMPTY:
            self.game_over = False

    def on_status_changed(self, text: str) -> None:
        self.status = text

    def on_game_ended(self) -> None:
        self.game_over = True


@dataclass
class WebSession:
    """Container for a browser table: its controller and rendered view."""

    controller: GameController
    view: WebPresenter = field(repr=False, default_factory=WebPresenter)


SESSIONS: Dict[str, WebSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe played in the browser")


AI_MOVE_DELAY: float = float(os.environ.get("TICTACTOE_AI_DELAY", "0.5"))
SCHEDULER: Scheduler = TimerScheduler()


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: Mode = Field(default=Mode.AI, description="friend or ai")
    symbol: Literal["X", "O"] = Field(
        default="X", description="Symbol played by the (first) human"
    )


class MoveRequest(BaseModel):
    """Request payload for activating a cell on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(mode: Mode, symbol: Player) -> Tuple[str, WebSession]:
    """Create a new table, start its first game and register it."""

    view = WebPresenter()
    controller = GameController(
        presenter=view, scheduler=SCHEDULER, ai_delay=AI_MOVE_DELAY
    )
    session = WebSession(controller=controller, view=view)
    controller.on_start(mode, symbol)
    game_id = uuid.uuid4().hex
    SESSIONS[game_id] = session
    logger.info("Registered table %s", game_id)
    return game_id, session


def _get_session(game_id: str) -> WebSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_session(game_id: str, session: WebSession) -> Dict[str, object]:
    controller = session.controller
    with controller.lock:
        game = controller.session
        view = session.view
        outcome = game.outcome
        state: Dict[str, object] = {
            "id": game_id,
            "mode": game.mode.value,
            "playerSymbol": game.player_symbol,
            "aiSymbol": game.ai_symbol,
            "currentPlayer": game.current_turn,
            "active": game.active,
            "cells": list(view.cells),
            "winner": outcome.winner,
            "winningLine": list(outcome.line) if outcome.line else None,
            "drawn": outcome.status is Status.TIE,
            "status": view.status,
            "gameOver": view.game_over,
            "aiPending": controller.ai_pending,
            "moveLog": list(game.move_log),
        }
        if game.move_log:
            state["lastMove"] = game.move_log[-1]
        return state


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.symbol)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    session.controller.on_cell_activated(request.cell_index)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.controller.on_restart()
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem;
        background: #f2f5ff;
        color: #13203a;
      }
      main {
        background: #fff;
        border-radius: 16px;
        box-shadow: 0 16px 32px rgba(34, 47, 79, 0.14);
        padding: 2rem;
        text-align: center;
      }
      .controls {
        display: flex;
        gap: 0.75rem;
        justify-content: center;
        margin-bottom: 1.25rem;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 96px);
        grid-template-rows: repeat(3, 96px);
        gap: 6px;
        justify-content: center;
      }
      .cell {
        display: flex;
        align-items: center;
        justify-content: center;
        font-size: 2.6rem;
        font-weight: 700;
        background: #e7ebfb;
        border-radius: 10px;
        cursor: pointer;
      }
      .cell.win {
        background: #ffe6a8;
      }
      #message {
        min-height: 1.6rem;
        margin: 1rem 0;
        font-weight: 600;
      }
      .hidden {
        display: none;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <div class=\"controls\">
        <label>Mode
          <select id=\"mode\">
            <option value=\"friend\">Play with a friend</option>
            <option value=\"ai\">Play vs AI</option>
          </select>
        </label>
        <label>Symbol
          <select id=\"symbol\">
            <option value=\"X\">X</option>
            <option value=\"O\">O</option>
          </select>
        </label>
        <button id=\"startButton\">Start</button>
      </div>
      <div id=\"board\"></div>
      <div id=\"message\" role=\"status\"></div>
      <button id=\"restartButton\" class=\"hidden\">Restart</button>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const messageEl = document.getElementById('message');
      const restartButton = document.getElementById('restartButton');
      const startButton = document.getElementById('startButton');
      const modeSelect = document.getElementById('mode');
      const symbolSelect = document.getElementById('symbol');

      let gameId = null;
      let pollHandle = null;

      function render(state) {
        boardEl.innerHTML = '';
        const line = state.winningLine || [];
        state.cells.forEach((value, index) => {
          const cell = document.createElement('div');
          cell.className = 'cell';
          if (line.includes(index)) cell.classList.add('win');
          cell.textContent = value;
          cell.addEventListener('click', () => play(index));
          boardEl.appendChild(cell);
        });
        messageEl.textContent = state.status;
        restartButton.classList.toggle('hidden', !state.gameOver);
        clearTimeout(pollHandle);
        if (state.aiPending) {
          pollHandle = setTimeout(refresh, 200);
        }
      }

      async function send(url, body) {
        const response = await fetch(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined,
        });
        if (!response.ok) throw new Error(`Request failed: ${response.status}`);
        return response.json();
      }

      async function startGame() {
        const state = await send('/api/game', {
          mode: modeSelect.value,
          symbol: symbolSelect.value,
        });
        gameId = state.id;
        render(state);
      }

      async function refresh() {
        if (!gameId) return;
        const response = await fetch(`/api/game/${gameId}`);
        if (response.ok) render(await response.json());
      }

      async function play(index) {
        if (!gameId) return;
        render(await send(`/api/game/${gameId}/move`, { cellIndex: index }));
      }

      async function restartGame() {
        if (!gameId) return;
        render(await send(`/api/game/${gameId}/restart`));
      }

      startButton.addEventListener('click', startGame);
      restartButton.addEventListener('click', restartGame);
    </script>
  </body>
</html>
"""
