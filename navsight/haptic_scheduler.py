"""Proximity-driven haptic pulse cadence."""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from .state import DISTANT_PAST
from .timers import TimerFactory, TimerHandle, repeating_timer

LOGGER = logging.getLogger(__name__)

PULSE_GUARD_S = 0.2


class HapticSink(Protocol):
    """Anything that can render a single pulse."""

    def pulse(self, intensity: float, sharpness: float) -> None:
        ...


class HapticPattern(Enum):
    """Pulse cadence per proximity band as (interval_s, intensity, sharpness)."""

    CLEAR = (2.5, 0.3, 0.3)
    APPROACHING = (1.5, 0.5, 0.5)
    CLOSE = (0.8, 0.7, 0.7)
    VERY_CLOSE = (0.3, 1.0, 1.0)
    STOPPED = (math.inf, 0.0, 0.0)

    @property
    def interval(self) -> float:
        return self.value[0]

    @property
    def intensity(self) -> float:
        return self.value[1]

    @property
    def sharpness(self) -> float:
        return self.value[2]


def pattern_for_depth(depth: float) -> HapticPattern:
    """Pick the pulse pattern for a center depth in metres."""
    if not math.isfinite(depth):
        return HapticPattern.CLEAR
    if depth < 0.5:
        return HapticPattern.VERY_CLOSE
    if depth < 1.5:
        return HapticPattern.CLOSE
    if depth < 3.0:
        return HapticPattern.APPROACHING
    return HapticPattern.CLEAR


@dataclass
class HapticSchedulerState:
    """Mutable state owned by the haptic scheduler."""

    pattern: HapticPattern = HapticPattern.STOPPED
    last_pulse_ts: float = DISTANT_PAST
    running: bool = False
    timer: Optional[TimerHandle] = None
    generation: int = 0


class HapticFeedbackScheduler:
    """Owns at most one repeating pulse timer and restarts it on pattern change.

    Timer callbacks carry the generation they were armed with; every cancel
    bumps the generation under the lock, so a callback that fires while its
    timer is being replaced finds a stale generation and does nothing.
    """

    def __init__(
        self,
        sink: HapticSink,
        timer_factory: TimerFactory = repeating_timer,
        clock: Callable[[], float] = time.monotonic,
        pulse_guard_s: float = PULSE_GUARD_S,
    ) -> None:
        self._sink = sink
        self._timer_factory = timer_factory
        self._clock = clock
        self._pulse_guard_s = pulse_guard_s
        self._lock = threading.Lock()
        self._state = HapticSchedulerState()

    @property
    def state(self) -> HapticSchedulerState:
        return self._state

    @property
    def pattern(self) -> HapticPattern:
        return self._state.pattern

    @property
    def running(self) -> bool:
        return self._state.running

    def start(self) -> None:
        with self._lock:
            if self._state.running:
                return
            self._state.running = True
        LOGGER.info("Haptic feedback started")

    def stop(self) -> None:
        with self._lock:
            if not self._state.running:
                return
            self._cancel_timer_locked()
            generation = self._state.generation
            self._state = HapticSchedulerState(generation=generation)
        LOGGER.info("Haptic feedback stopped")

    def update(self, depth: float) -> None:
        """Recompute the pattern for ``depth`` and restart the cadence if it changed."""
        with self._lock:
            if not self._state.running:
                return
            pattern = pattern_for_depth(depth)
            if pattern is self._state.pattern:
                return
            self._state.pattern = pattern
            self._restart_timer_locked()
        LOGGER.info("Haptic pattern changed to %s (depth: %.2fm)", pattern.name, depth)

    # Internal helpers -----------------------------------------------------

    def _restart_timer_locked(self) -> None:
        self._cancel_timer_locked()
        pattern = self._state.pattern
        if pattern is HapticPattern.STOPPED:
            return
        self._pulse_locked()
        generation = self._state.generation
        timer = self._timer_factory(pattern.interval, lambda: self._on_timer(generation))
        self._state.timer = timer
        timer.start()

    def _cancel_timer_locked(self) -> None:
        self._state.generation += 1
        if self._state.timer is not None:
            self._state.timer.cancel()
            self._state.timer = None

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._state.generation or not self._state.running:
                return
            self._pulse_locked()

    def _pulse_locked(self) -> None:
        pattern = self._state.pattern
        if not self._state.running or pattern is HapticPattern.STOPPED:
            return
        now = self._clock()
        if now - self._state.last_pulse_ts < self._pulse_guard_s:
            LOGGER.debug("Pulse dropped by %.1fs guard", self._pulse_guard_s)
            return
        self._state.last_pulse_ts = now
        try:
            self._sink.pulse(pattern.intensity, pattern.sharpness)
        except Exception as exc:  # pragma: no cover - actuator faults must not stop the cadence
            LOGGER.error("Haptic pulse failed: %s", exc)


__all__ = [
    "HapticFeedbackScheduler",
    "HapticPattern",
    "HapticSchedulerState",
    "HapticSink",
    "PULSE_GUARD_S",
    "pattern_for_depth",
]
