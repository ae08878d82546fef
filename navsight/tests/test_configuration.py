"""Tests for YAML configuration parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from navsight.configuration import load_config, load_default_config, parse_config
from navsight.speech_scheduler import MODE_DUAL, MODE_SINGLE


def test_default_config_loads() -> None:
    config = load_default_config()
    assert config.engine.tick_hz > 0
    assert config.speech.policy.mode == MODE_DUAL
    assert config.speech.policy.status_interval_s == pytest.approx(2.0)
    assert config.speech.policy.command_interval_s == pytest.approx(4.0)
    assert config.haptics.pulse_guard_s == pytest.approx(0.2)
    assert config.depth.sentinel_m == pytest.approx(10.0)
    assert len(config.simulator.frames) > 0


def test_missing_sections_fall_back_to_defaults() -> None:
    config = parse_config({})
    assert config.depth.port == 9000
    assert config.speech.backend == "pyttsx3"
    assert config.haptics.backend == "osc"
    assert config.simulator.enabled is False
    assert config.logging.level == "INFO"


def test_load_config_from_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "speech:\n"
        "  mode: single\n"
        "  backend: log\n"
        "haptics:\n"
        "  backend: midi\n"
        "  midi:\n"
        "    port: Wristband\n"
        "    channel: 3\n"
        "simulator:\n"
        "  enabled: true\n"
        "  hold_ticks: 5\n"
        "  frames:\n"
        "    - [1, 2, 3]\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.speech.policy.mode == MODE_SINGLE
    assert config.speech.backend == "log"
    assert config.haptics.midi_port == "Wristband"
    assert config.haptics.midi_channel == 3
    assert config.simulator.frames == ((1.0, 2.0, 3.0),)
    assert config.simulator.hold_ticks == 5


def test_empty_sections_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "depth:\nengine:\nspeech:\nhaptics:\n  osc:\nsimulator:\nlogging:\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.depth.port == 9000
    assert config.engine.tick_hz == pytest.approx(30.0)
    assert config.speech.policy.mode == MODE_DUAL
    assert config.haptics.osc_port == 9001
    assert config.simulator.frames == ()
    assert config.logging.level == "INFO"


def test_simulator_accepts_depth_map_frames() -> None:
    config = parse_config(
        {"simulator": {"frames": [[[1, 2, 3, 4], [5, 6, 7, 8]], [4.0, 5.0, 4.0]]}}
    )
    assert config.simulator.frames == (
        ((1.0, 2.0, 3.0, 4.0), (5.0, 6.0, 7.0, 8.0)),
        (4.0, 5.0, 4.0),
    )


@pytest.mark.parametrize(
    "raw",
    [
        {"engine": {"tick_hz": 0}},
        {"speech": {"mode": "loud"}},
        {"speech": {"backend": "festival"}},
        {"speech": {"status_interval_s": -1}},
        {"haptics": {"backend": "buzzer"}},
        {"haptics": {"pulse_guard_s": -0.1}},
        {"depth": {"watchdog_s": 0}},
        {"simulator": {"frames": [[1.0, 2.0]]}},
        {"simulator": {"hold_ticks": 0}},
        {"speech": "loud"},
    ],
)
def test_invalid_values_raise(raw: dict) -> None:
    with pytest.raises(ValueError):
        parse_config(raw)
