"""Tests for the simulated depth source."""

from __future__ import annotations

import pytest

from navsight.depth_source import SimDepthSource


def _triples(source: SimDepthSource, count: int):
    readings = [source.consume_reading() for _ in range(count)]
    return [(r.left, r.center, r.right) for r in readings]


def test_frames_cycle() -> None:
    source = SimDepthSource([(4.0, 5.0, 4.0), (2.0, 0.3, 1.0)])
    assert _triples(source, 3) == [(4.0, 5.0, 4.0), (2.0, 0.3, 1.0), (4.0, 5.0, 4.0)]


def test_frames_are_held_for_hold_ticks() -> None:
    source = SimDepthSource([(4.0, 5.0, 4.0), (2.0, 0.3, 1.0)], hold_ticks=2)
    assert [t[1] for t in _triples(source, 5)] == [5.0, 5.0, 0.3, 0.3, 5.0]


def test_invalid_values_become_sentinel() -> None:
    source = SimDepthSource([(0.0, float("nan"), 2.0)])
    assert _triples(source, 1) == [(10.0, 10.0, 2.0)]


def test_empty_frames_default_to_clear() -> None:
    source = SimDepthSource()
    assert source.frames == ((10.0, 10.0, 10.0),)


def test_bad_frames_raise() -> None:
    with pytest.raises(ValueError):
        SimDepthSource([(1.0, 2.0)])
    with pytest.raises(ValueError):
        SimDepthSource([(1.0, 2.0, 3.0)], hold_ticks=0)


def test_depth_map_frames_are_sampled_into_regions() -> None:
    depth_map = [[float(x + 1) for x in range(8)] for _ in range(5)]
    depth_map[2][4] = float("nan")
    source = SimDepthSource([depth_map, (4.0, 5.0, 4.0)])

    left, center, right = source.frames[0]
    assert (left, right) == (3.0, 7.0)
    assert center == pytest.approx(5.0)
    assert _triples(source, 2)[1] == (4.0, 5.0, 4.0)
