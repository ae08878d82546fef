"""Dataclasses modelling depth readings and per-session scheduler state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .proximity import NavigationDirection, ProximityState

DEPTH_SENTINEL_M = 10.0
DISTANT_PAST = float("-inf")


@dataclass
class DepthReading:
    """Latest left/center/right depths in metres received from the sampler."""

    left: float
    center: float
    right: float
    last_rx_ts: float


@dataclass
class SpeechSchedulerState:
    """Mutable state owned by the speech scheduler.

    Only changed when an announcement is actually emitted. Status and command
    each keep their own baseline and timestamp so one never resets the other.
    The last message is shared: a repeat is dropped whichever track said it.
    """

    last_status_state: Optional[ProximityState] = None
    last_status_depth: float = 0.0
    last_status_direction: Optional[NavigationDirection] = None
    last_status_ts: float = DISTANT_PAST
    last_command_state: Optional[ProximityState] = None
    last_command_direction: Optional[NavigationDirection] = None
    last_command_ts: float = DISTANT_PAST
    last_message: Optional[str] = None


__all__ = ["DEPTH_SENTINEL_M", "DISTANT_PAST", "DepthReading", "SpeechSchedulerState"]
