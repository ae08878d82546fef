"""Cancellable repeating timer used to drive haptic pulse cadence."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

LOGGER = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Subset of the timer API the haptic scheduler relies on."""

    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


class RepeatingTimer:
    """Calls ``callback`` every ``interval`` seconds on a daemon thread until cancelled."""

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "haptic-timer") -> None:
        if interval <= 0:
            raise ValueError("timer interval must be greater than zero")
        self._interval = interval
        self._callback = callback
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()

    def join(self, timeout: float = 1.0) -> None:
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval):
            try:
                self._callback()
            except Exception as exc:  # pragma: no cover - keep the cadence alive
                LOGGER.error("Repeating timer callback failed: %s", exc)


def repeating_timer(interval: float, callback: Callable[[], None]) -> TimerHandle:
    """Default timer factory."""
    return RepeatingTimer(interval, callback)


__all__ = ["RepeatingTimer", "TimerFactory", "TimerHandle", "repeating_timer"]
