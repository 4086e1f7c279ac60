"""Input handling for a single tic-tac-toe table.

The controller owns the current :class:`GameSession`, turns start, click and
restart events into engine calls, and reports every change to a
:class:`Presenter`. In AI mode the reply is deferred through a scheduler so
the human's mark can be rendered first.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Optional, Tuple

from .ai import RandomAI
from .game import (
    BOARD_SIZE,
    EMPTY,
    GameSession,
    InvalidStateError,
    Mode,
    MoveResult,
    Player,
    apply_move,
    start,
    status_text,
)
from .scheduler import ScheduledTask, Scheduler, TimerScheduler

logger = logging.getLogger(__name__)

DEFAULT_AI_DELAY = 0.5


class Presenter:
    """Rendering hooks. Subclasses override the ones they care about."""

    def on_board_changed(self, index: int, symbol: Player) -> None:
        pass

    def on_status_changed(self, text: str) -> None:
        pass

    def on_game_ended(self) -> None:
        pass


class GameController:
    def __init__(
        self,
        presenter: Optional[Presenter] = None,
        scheduler: Optional[Scheduler] = None,
        ai_delay: float = DEFAULT_AI_DELAY,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.presenter = presenter or Presenter()
        self.scheduler = scheduler or TimerScheduler()
        self.ai_delay = ai_delay
        self.rng = rng or random.Random()
        self.session: Optional[GameSession] = None
        self.ai: Optional[RandomAI] = None
        self.lock = threading.RLock()
        self._settings: Optional[Tuple[Mode, Player]] = None
        self._pending: Optional[ScheduledTask] = None

    @property
    def ai_pending(self) -> bool:
        return self._pending is not None

    # ---- input adapter ----

    def on_start(self, mode: Mode, player_symbol: Player) -> GameSession:
        with self.lock:
            self._cancel_pending()
            session = start(mode, player_symbol)
            self.session = session
            self._settings = (session.mode, session.player_symbol)
            self.ai = (
                RandomAI(player=session.ai_symbol, rng=self.rng)
                if session.mode is Mode.AI
                else None
            )
            logger.info(
                "Started %s game %s as %s",
                session.mode.value,
                session.session_id,
                session.player_symbol,
            )
            for index in range(BOARD_SIZE):
                self.presenter.on_board_changed(index, EMPTY)
            self.presenter.on_status_changed("")
            return session

    def on_restart(self) -> GameSession:
        with self.lock:
            if self._settings is None:
                raise InvalidStateError("No game has been started")
            return self.on_start(*self._settings)

    def on_cell_activated(self, index: int) -> MoveResult:
        with self.lock:
            session = self.session
            if session is None:
                return MoveResult(accepted=False, index=index)
            # Against the AI the human may only ever place their own mark.
            symbol = session.player_symbol if session.mode is Mode.AI else None
            result = apply_move(session, index, symbol)
            self._report(result)
            if result.ai_due:
                self._schedule_ai(session)
            return result

    # ---- deferred AI move ----

    def _schedule_ai(self, session: GameSession) -> None:
        self._cancel_pending()
        self._pending = self.scheduler.schedule(
            self.ai_delay, lambda: self._run_ai_turn(session)
        )

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _run_ai_turn(self, session: GameSession) -> None:
        with self.lock:
            if session is not self.session:
                logger.debug("Dropping AI move for stale game %s", session.session_id)
                return
            self._pending = None
            if not session.active or not session.is_ai_turn() or self.ai is None:
                return
            index = self.ai.choose(session.board)
            result = apply_move(session, index, session.ai_symbol)
            self._report(result)

    def _report(self, result: MoveResult) -> None:
        if not result.accepted:
            return
        self.presenter.on_board_changed(result.index, result.symbol)
        if result.outcome.terminal:
            text = status_text(result.outcome)
            logger.info("Game %s finished: %s", self.session.session_id, text)
            self.presenter.on_status_changed(text)
            self.presenter.on_game_ended()
