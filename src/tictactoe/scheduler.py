"""Deferred callbacks used to delay the AI's reply."""

from __future__ import annotations

import threading
from typing import Callable, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class TimerScheduler:
    """Run each callback on a daemon ``threading.Timer``."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, delay), callback)
        timer.daemon = True
        timer.start()
        return timer
