"""Reconnect policy and host scheduling."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

LOGGER = logging.getLogger(__name__)


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> Any:
        """Run `callback` once after `delay_s` seconds."""


class TimerScheduler:
    """Scheduler backed by daemon `threading.Timer` objects."""

    def __init__(self) -> None:
        self._timers: list[threading.Timer] = []

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> threading.Timer:
        self._timers = [t for t in self._timers if t.is_alive()]
        timer = threading.Timer(delay_s, callback)
        timer.daemon = True
        timer.start()
        self._timers.append(timer)
        return timer

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()


class ReconnectSupervisor:
    """Schedules exactly one reconnect attempt per failure, at a fixed delay.

    The callback receives the generation of the session that failed so the
    driver can ignore attempts for sessions that were already superseded.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        reconnect: Callable[[int], None],
        *,
        delay_s: float = 5.0,
    ) -> None:
        self._scheduler = scheduler
        self._reconnect = reconnect
        self.delay_s = delay_s

    def schedule(self, generation: int) -> None:
        LOGGER.info("Reconnecting in %.0fs", self.delay_s)
        self._scheduler.call_later(self.delay_s, lambda: self._reconnect(generation))
