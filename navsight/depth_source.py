"""Software stand-in for a live depth sampler."""

from __future__ import annotations

import logging
from itertools import cycle
from time import perf_counter
from typing import Any, Iterable, Optional, Sequence, Tuple

from .filters import sample_regions, sanitize_depth
from .state import DEPTH_SENTINEL_M, DepthReading

LOGGER = logging.getLogger(__name__)

Frame = Tuple[float, float, float]


class SimDepthSource:
    """Cycles through a fixed list of (left, center, right) frames.

    A frame given as a 2-D depth map is reduced to three readings with
    ``sample_regions`` once, at construction.

    Each frame is repeated for ``hold_ticks`` consecutive reads so a demo
    at sensor rate lingers long enough on each scene to be heard.
    """

    def __init__(
        self,
        frames: Optional[Iterable[Sequence[Any]]] = None,
        sentinel: float = DEPTH_SENTINEL_M,
        hold_ticks: int = 1,
    ) -> None:
        if hold_ticks < 1:
            raise ValueError("hold_ticks must be at least 1")
        parsed = tuple(_parse_frame(frame, sentinel) for frame in (frames or ()))
        if not parsed:
            parsed = ((sentinel, sentinel, sentinel),)
        self._frames = parsed
        self._source = cycle(frame for frame in parsed for _ in range(hold_ticks))
        LOGGER.info("Simulated depth source started with %d frames", len(parsed))

    @property
    def frames(self) -> Tuple[Frame, ...]:
        return self._frames

    def consume_reading(self) -> DepthReading:
        left, center, right = next(self._source)
        return DepthReading(left=left, center=center, right=right, last_rx_ts=perf_counter())


def _parse_frame(frame: Sequence[Any], sentinel: float) -> Frame:
    # A frame is either a (left, center, right) triple or a 2-D depth map.
    if frame and isinstance(frame[0], (list, tuple)):
        return sample_regions(frame, sentinel=sentinel)
    if len(frame) != 3:
        raise ValueError(f"Simulator frame must have three depths, got {list(frame)!r}")
    left, center, right = (sanitize_depth(value, sentinel) for value in frame)
    return left, center, right


__all__ = ["Frame", "SimDepthSource"]
