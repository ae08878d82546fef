"""Hysteresis scheduler deciding when and what to announce each tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .phrasing import build_message
from .proximity import NavigationDirection, ProximityState, classify, is_blocked
from .state import SpeechSchedulerState

LOGGER = logging.getLogger(__name__)

MODE_DUAL = "dual"
MODE_SINGLE = "single"
SPEECH_MODES = (MODE_DUAL, MODE_SINGLE)


class SpeechCategory(Enum):
    STATUS = "status"
    COMMAND = "command"


@dataclass(frozen=True)
class SpeechPolicy:
    """Timing and hysteresis thresholds for the speech scheduler."""

    status_interval_s: float = 2.0
    command_interval_s: float = 4.0
    depth_delta_m: float = 0.5
    mode: str = MODE_DUAL
    single_interval_s: float = 4.0

    def __post_init__(self) -> None:
        if self.mode not in SPEECH_MODES:
            raise ValueError(f"speech mode must be one of {SPEECH_MODES}, got {self.mode!r}")
        if self.status_interval_s < 0 or self.command_interval_s < 0 or self.single_interval_s < 0:
            raise ValueError("speech intervals must not be negative")
        if self.depth_delta_m < 0:
            raise ValueError("depth_delta_m must not be negative")


@dataclass(frozen=True)
class Announcement:
    """A message the scheduler decided to speak."""

    text: str
    category: SpeechCategory
    reasons: Tuple[str, ...] = ()


def categorize(center: float) -> SpeechCategory:
    """Blocked or very close centers are commands, anything else is status."""
    if is_blocked(center) or classify(center) is ProximityState.VERY_CLOSE:
        return SpeechCategory.COMMAND
    return SpeechCategory.STATUS


class SpeechGuidanceScheduler:
    """Decides whether a tick produces an announcement.

    Four signals feed the decision: proximity state change, depth change,
    direction change and a time gate. Command candidates ignore the depth
    signal and use the stricter gate; status candidates use all three change
    signals with the permissive gate. ``VERY_CLOSE`` bypasses either gate.
    """

    def __init__(self, policy: Optional[SpeechPolicy] = None) -> None:
        self._policy = policy or SpeechPolicy()
        self._state = SpeechSchedulerState()

    @property
    def state(self) -> SpeechSchedulerState:
        return self._state

    @property
    def policy(self) -> SpeechPolicy:
        return self._policy

    def reset(self) -> None:
        """Forget everything announced so far."""
        self._state = SpeechSchedulerState()

    def process(
        self,
        left: float,
        center: float,
        right: float,
        direction: NavigationDirection,
        now: float,
    ) -> Optional[Announcement]:
        """Process one tick and return the announcement to speak, if any."""
        if self._policy.mode == MODE_SINGLE:
            return self._process_single(left, center, right, direction, now)

        current = classify(center)
        category = categorize(center)
        state = self._state
        safety_override = current is ProximityState.VERY_CLOSE

        # Each category compares against what it last announced itself.
        if category is SpeechCategory.COMMAND:
            state_changed = state.last_command_state != current
            depth_changed = False
            direction_changed = state.last_command_direction != direction
            gate_open = now - state.last_command_ts >= self._policy.command_interval_s
        else:
            state_changed = state.last_status_state != current
            depth_changed = abs(center - state.last_status_depth) >= self._policy.depth_delta_m
            direction_changed = state.last_status_direction != direction
            gate_open = now - state.last_status_ts >= self._policy.status_interval_s

        changed = state_changed or depth_changed or direction_changed
        if not changed or not (gate_open or safety_override):
            return None

        message = build_message(left, center, right, direction)
        if message == state.last_message:
            LOGGER.debug("Suppressed repeated %s message: %s", category.value, message)
            return None

        reasons = _reasons(state_changed, depth_changed, direction_changed, safety_override)
        self._record(category, current, center, direction, message, now)
        LOGGER.info(
            "Speech triggered (%s): %s - state=%s direction=%s",
            category.value,
            ", ".join(reasons),
            current.name,
            direction.value,
        )
        return Announcement(text=message, category=category, reasons=reasons)

    # Internal helpers -----------------------------------------------------

    def _process_single(
        self,
        left: float,
        center: float,
        right: float,
        direction: NavigationDirection,
        now: float,
    ) -> Optional[Announcement]:
        # Legacy policy: one shared gate and baseline, no categories, no
        # deduplication. The status track holds the baseline.
        current = classify(center)
        state = self._state
        last_ts = max(state.last_status_ts, state.last_command_ts)

        state_changed = state.last_status_state != current
        depth_changed = abs(center - state.last_status_depth) >= self._policy.depth_delta_m
        direction_changed = state.last_status_direction != direction
        safety_override = current is ProximityState.VERY_CLOSE
        gate_open = now - last_ts >= self._policy.single_interval_s

        if not (state_changed or depth_changed or direction_changed):
            return None
        if not (gate_open or safety_override):
            return None

        category = categorize(center)
        message = build_message(left, center, right, direction)
        reasons = _reasons(state_changed, depth_changed, direction_changed, safety_override)
        # Both tracks move together so the shared gate holds.
        for track in SpeechCategory:
            self._record(track, current, center, direction, message, now)
        LOGGER.info("Speech triggered: %s - state=%s", ", ".join(reasons), current.name)
        return Announcement(text=message, category=category, reasons=reasons)

    def _record(
        self,
        category: SpeechCategory,
        current: ProximityState,
        center: float,
        direction: NavigationDirection,
        message: str,
        now: float,
    ) -> None:
        state = self._state
        state.last_message = message
        if category is SpeechCategory.COMMAND:
            state.last_command_state = current
            state.last_command_direction = direction
            state.last_command_ts = max(state.last_command_ts, now)
        else:
            state.last_status_state = current
            state.last_status_depth = center
            state.last_status_direction = direction
            state.last_status_ts = max(state.last_status_ts, now)


def _reasons(
    state_changed: bool,
    depth_changed: bool,
    direction_changed: bool,
    safety_override: bool,
) -> Tuple[str, ...]:
    reasons = []
    if state_changed:
        reasons.append("state change")
    if depth_changed:
        reasons.append("depth change")
    if direction_changed:
        reasons.append("direction change")
    if safety_override:
        reasons.append("safety override")
    return tuple(reasons)


__all__ = [
    "Announcement",
    "MODE_DUAL",
    "MODE_SINGLE",
    "SPEECH_MODES",
    "SpeechCategory",
    "SpeechGuidanceScheduler",
    "SpeechPolicy",
    "categorize",
]
