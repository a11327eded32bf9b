"""Deferred execution of the enemy's turn.

After a non-lethal player hit the battle does not answer back at once:
it hands the enemy turn to a :class:`TurnScheduler` so the caller has
time to show the hit.  Three schedulers cover the usual hosts:

- :class:`ImmediateScheduler` runs the task before ``schedule`` returns.
  Simulations and most tests use it.
- :class:`ManualScheduler` queues tasks until :meth:`ManualScheduler.advance`
  is called, which is how tests inspect the in-between ``enemy-turn`` phase.
- :class:`TimerScheduler` runs tasks on a ``threading.Timer`` after a
  real delay, for interactive front ends.

Every scheduled task is cancellable and runs at most once.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class ScheduledTask:
    """A callback that runs once unless cancelled first."""

    def __init__(self, callback: Callable[[], object], delay: float = 0.0) -> None:
        self._callback = callback
        self.delay = delay
        self._lock = threading.Lock()
        self._cancelled = False
        self._started = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._started

    def cancel(self) -> bool:
        """Prevent the task from running.  Returns ``False`` if it already ran."""
        with self._lock:
            if self._started:
                return False
            self._cancelled = True
            return True

    def run(self) -> None:
        with self._lock:
            if self._cancelled or self._started:
                return
            self._started = True
        self._callback()


class TurnScheduler(ABC):
    @abstractmethod
    def schedule(self, callback: Callable[[], object], delay: float) -> ScheduledTask:
        """Arrange for *callback* to run after *delay* seconds."""


class ImmediateScheduler(TurnScheduler):
    """Ignores the delay and runs the task synchronously."""

    def schedule(self, callback: Callable[[], object], delay: float) -> ScheduledTask:
        task = ScheduledTask(callback, delay)
        task.run()
        return task


class ManualScheduler(TurnScheduler):
    """Holds tasks until :meth:`advance` is called."""

    def __init__(self) -> None:
        self._queue: list[ScheduledTask] = []

    @property
    def pending(self) -> list[ScheduledTask]:
        return [t for t in self._queue if not (t.cancelled or t.done)]

    def schedule(self, callback: Callable[[], object], delay: float) -> ScheduledTask:
        task = ScheduledTask(callback, delay)
        self._queue.append(task)
        return task

    def advance(self) -> int:
        """Run every pending task in scheduling order.  Returns how many ran."""
        ran = 0
        while self._queue:
            task = self._queue.pop(0)
            if task.cancelled or task.done:
                continue
            task.run()
            ran += 1
        return ran


class TimerScheduler(TurnScheduler):
    """Runs tasks on daemon ``threading.Timer`` threads."""

    def __init__(self) -> None:
        self._timers: list[threading.Timer] = []

    def schedule(self, callback: Callable[[], object], delay: float) -> ScheduledTask:
        task = ScheduledTask(callback, delay)
        timer = threading.Timer(delay, self._run_logged, args=(task,))
        timer.daemon = True
        self._timers = [t for t in self._timers if t.is_alive()]
        self._timers.append(timer)
        timer.start()
        return task

    @staticmethod
    def _run_logged(task: ScheduledTask) -> None:
        try:
            task.run()
        except Exception:
            logger.exception("Scheduled enemy turn failed")
            raise

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
