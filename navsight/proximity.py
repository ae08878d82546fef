"""Proximity classification and direction decisions for a depth triple."""

from __future__ import annotations

import math
from enum import Enum, IntEnum

SAFETY_THRESHOLD_M = 1.0
VERY_CLOSE_M = 0.5
CLOSE_M = 1.5
MEDIUM_M = 3.0


class ProximityState(IntEnum):
    """Discrete proximity bucket, ordered from nearest to farthest."""

    VERY_CLOSE = 0
    CLOSE = 1
    MEDIUM = 2
    CLEAR = 3


class NavigationDirection(Enum):
    """Direction advice derived from the left/center/right readings."""

    FORWARD_CLEAR = "Forward Clear"
    MOVE_LEFT = "Move Left"
    MOVE_RIGHT = "Move Right"


def classify(depth: float) -> ProximityState:
    """Map a depth in metres to a proximity bucket.

    Each threshold belongs to the farther bucket: ``classify(0.5)`` is
    ``CLOSE``. Non-finite readings are treated as far away.
    """
    if not math.isfinite(depth):
        return ProximityState.CLEAR
    if depth < VERY_CLOSE_M:
        return ProximityState.VERY_CLOSE
    if depth < CLOSE_M:
        return ProximityState.CLOSE
    if depth < MEDIUM_M:
        return ProximityState.MEDIUM
    return ProximityState.CLEAR


def is_blocked(center: float) -> bool:
    """Return True when the forward path is inside the safety threshold."""
    return center < SAFETY_THRESHOLD_M


def resolve(left: float, center: float, right: float) -> NavigationDirection:
    """Decide whether to keep going or which side to move towards.

    A clear center always wins. Otherwise the side with strictly more room
    is chosen; ties go right.
    """
    if not is_blocked(center):
        return NavigationDirection.FORWARD_CLEAR
    if left > right:
        return NavigationDirection.MOVE_LEFT
    return NavigationDirection.MOVE_RIGHT


__all__ = [
    "CLOSE_M",
    "MEDIUM_M",
    "NavigationDirection",
    "ProximityState",
    "SAFETY_THRESHOLD_M",
    "VERY_CLOSE_M",
    "classify",
    "is_blocked",
    "resolve",
]
