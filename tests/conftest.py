"""Shared fixtures for the tic-tac-toe tests."""

from __future__ import annotations

from typing import Callable, List

import pytest

from tictactoe.controller import Presenter


class ManualTask:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Collects scheduled callbacks and runs them only when asked."""

    def __init__(self) -> None:
        self.tasks: List[ManualTask] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(delay, callback)
        self.tasks.append(task)
        return task

    def fire(self, task: ManualTask) -> None:
        # Run even if cancelled: a timer can race its own cancel().
        task.callback()

    def run_pending(self) -> int:
        ran = 0
        for task in list(self.tasks):
            if not task.cancelled:
                task.callback()
                ran += 1
        self.tasks.clear()
        return ran


class RecordingPresenter(Presenter):
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def on_board_changed(self, index, symbol) -> None:
        self.events.append(("board", index, symbol))

    def on_status_changed(self, text) -> None:
        self.events.append(("status", text))

    def on_game_ended(self) -> None:
        self.events.append(("ended",))


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()
