"""Depth-map sampling and sanitizing helpers for the host side of the sampler."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from .state import DEPTH_SENTINEL_M

DepthMap = Sequence[Sequence[float]]

# Horizontal sample positions as fractions of the map width.
REGION_FRACTIONS = {"left": 0.25, "center": 0.5, "right": 0.75}


def sanitize_depth(value: Optional[float], sentinel: float = DEPTH_SENTINEL_M) -> float:
    """Return ``value`` in metres, or ``sentinel`` when it is missing or invalid.

    ``None``, NaN, infinities and non-positive readings all count as no
    return from the sensor.
    """
    if value is None:
        return sentinel
    try:
        depth = float(value)
    except (TypeError, ValueError):
        return sentinel
    if not math.isfinite(depth) or depth <= 0.0:
        return sentinel
    return depth


def window_mean(
    depth_map: DepthMap,
    cx: int,
    cy: int,
    radius: int = 1,
    sentinel: float = DEPTH_SENTINEL_M,
) -> float:
    """Average the valid readings in a square window centred on (cx, cy).

    Out-of-bounds and invalid cells are skipped. Returns ``sentinel`` when
    the window holds no valid reading.
    """
    if radius < 0:
        raise ValueError("radius must not be negative")
    height = len(depth_map)
    total = 0.0
    count = 0
    for y in range(cy - radius, cy + radius + 1):
        if not 0 <= y < height:
            continue
        row = depth_map[y]
        width = len(row)
        for x in range(cx - radius, cx + radius + 1):
            if not 0 <= x < width:
                continue
            depth = float(row[x])
            if not math.isfinite(depth) or depth <= 0.0:
                continue
            total += depth
            count += 1
    if count == 0:
        return sentinel
    return total / count


def sample_regions(
    depth_map: DepthMap,
    radius: int = 1,
    sentinel: float = DEPTH_SENTINEL_M,
) -> Tuple[float, float, float]:
    """Sample left, center and right depths along the middle row of ``depth_map``."""
    height = len(depth_map)
    if height == 0:
        return sentinel, sentinel, sentinel
    width = len(depth_map[0])
    cy = height // 2
    left, center, right = (
        window_mean(depth_map, int(width * REGION_FRACTIONS[name]), cy, radius, sentinel)
        for name in ("left", "center", "right")
    )
    return left, center, right


def clamp(x: float, lower: float, upper: float) -> float:
    """Clamp ``x`` into the inclusive range [``lower``, ``upper``]."""
    if lower > upper:
        raise ValueError("lower bound must be <= upper bound")
    if x < lower:
        return lower
    if x > upper:
        return upper
    return x


__all__ = ["DepthMap", "clamp", "sample_regions", "sanitize_depth", "window_mean"]
