"""Per-tick fusion of depth readings into speech and haptic decisions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .haptic_scheduler import HapticFeedbackScheduler
from .proximity import NavigationDirection, resolve
from .speech_output import SpeechSink
from .speech_scheduler import Announcement, SpeechGuidanceScheduler
from .state import DepthReading

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration for the guidance engine."""

    watchdog_s: float = 1.0


class GuidanceEngine:
    """Runs direction, speech and haptic decisions for each sensor tick."""

    def __init__(
        self,
        speech: SpeechGuidanceScheduler,
        haptics: HapticFeedbackScheduler,
        speaker: SpeechSink,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self._speech = speech
        self._haptics = haptics
        self._speaker = speaker
        self._config = config or EngineConfig()
        self._active = False
        self._watchdog_tripped = False
        self._last_direction: Optional[NavigationDirection] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def watchdog_tripped(self) -> bool:
        return self._watchdog_tripped

    def start(self) -> None:
        """Begin a navigation session."""
        if self._active:
            return
        self._active = True
        self._watchdog_tripped = False
        self._haptics.start()
        LOGGER.info("Guidance session started")

    def stop(self) -> None:
        """End the session; scheduler state returns to its initial values."""
        if not self._active:
            return
        self._active = False
        self._haptics.stop()
        self._speech.reset()
        self._last_direction = None
        LOGGER.info("Guidance session stopped")

    def process_tick(self, reading: DepthReading, now: float) -> Optional[Announcement]:
        """Process a single depth tick, speaking at most one message."""
        if not self._active:
            return None
        if self._check_watchdog(reading, now):
            return None

        left, center, right = reading.left, reading.center, reading.right
        direction = resolve(left, center, right)
        if direction is not self._last_direction:
            LOGGER.info("Direction decision: %s", direction.value)
            self._last_direction = direction
        LOGGER.debug(
            "Left: %.2fm | Center: %.2fm | Right: %.2fm -> %s",
            left,
            center,
            right,
            direction.value,
        )

        announcement = self._speech.process(left, center, right, direction, now)
        if announcement is not None:
            self._speaker.speak(announcement.text)
        self._haptics.update(center)
        return announcement

    # Internal helpers -----------------------------------------------------

    def _check_watchdog(self, reading: DepthReading, now: float) -> bool:
        elapsed = now - reading.last_rx_ts
        if elapsed >= self._config.watchdog_s:
            if not self._watchdog_tripped:
                LOGGER.warning("Depth watchdog triggered after %.3fs without data", elapsed)
                self._haptics.stop()
            self._watchdog_tripped = True
            return True
        if self._watchdog_tripped:
            LOGGER.info("Depth watchdog recovered after sensor update")
            self._haptics.start()
        self._watchdog_tripped = False
        return False


__all__ = ["EngineConfig", "GuidanceEngine"]
