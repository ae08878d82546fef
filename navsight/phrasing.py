"""Spoken message composition for depth guidance."""

from __future__ import annotations

import math

from .proximity import MEDIUM_M, VERY_CLOSE_M, NavigationDirection, is_blocked

CENTIMETRE_LIMIT_M = 1.0


def format_distance(distance: float) -> str:
    """Render a distance as spoken text.

    Below one metre the value is truncated to whole centimetres; otherwise
    metres with one decimal place.
    """
    if distance < CENTIMETRE_LIMIT_M:
        return f"{_centimetres(distance)} centimeters"
    return f"{distance:.1f} meters"


def format_obstacle(distance: float) -> str:
    """Render a blocked-path distance, escalating to a warning when very close."""
    if distance < VERY_CLOSE_M:
        return f"Warning, {_centimetres(distance)} centimeters"
    return f"Obstacle at {format_distance(distance)}"


def format_ahead(distance: float) -> str:
    if distance < MEDIUM_M:
        return f"{format_distance(distance)} ahead"
    return "Clear"


def build_message(
    left: float,
    center: float,
    right: float,
    direction: NavigationDirection,
) -> str:
    """Compose the announcement for one depth triple.

    A blocked center produces a turn command. Otherwise the nearest side
    obstacle inside the awareness range is described, falling back to a plain
    distance ahead.
    """
    if is_blocked(center):
        obstacle = format_obstacle(center)
        if direction is NavigationDirection.MOVE_LEFT:
            return f"{obstacle}, move left"
        if direction is NavigationDirection.MOVE_RIGHT:
            return f"{obstacle}, move right"
        return obstacle

    min_depth = min(left, center, right)
    if min_depth < MEDIUM_M:
        if left == min_depth and left < center:
            return f"Object on the left at {format_distance(left)}"
        if right == min_depth and right < center:
            return f"Object on the right at {format_distance(right)}"

    return format_ahead(center)


def _centimetres(distance: float) -> int:
    # Round away binary noise first so 0.29 m reads as 29, not 28.
    return int(math.floor(round(distance * 100, 6)))


__all__ = ["build_message", "format_ahead", "format_distance", "format_obstacle"]
