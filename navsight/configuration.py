"""Configuration loading and dataclasses for the guidance node."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Tuple

import yaml

from .haptic_scheduler import PULSE_GUARD_S
from .speech_scheduler import SpeechPolicy
from .state import DEPTH_SENTINEL_M

SPEECH_BACKENDS = ("pyttsx3", "log")
HAPTIC_BACKENDS = ("osc", "midi", "log")


@dataclass(frozen=True)
class DepthConfig:
    host: str
    port: int
    sentinel_m: float = DEPTH_SENTINEL_M
    watchdog_s: float = 1.0


@dataclass(frozen=True)
class EngineSettings:
    tick_hz: float


@dataclass(frozen=True)
class SpeechConfig:
    backend: str
    rate: int
    volume: float
    policy: SpeechPolicy


@dataclass(frozen=True)
class HapticConfig:
    backend: str
    osc_host: str
    osc_port: int
    midi_port: str
    midi_channel: int
    pulse_guard_s: float = PULSE_GUARD_S


@dataclass(frozen=True)
class SimulatorConfig:
    enabled: bool = False
    hold_ticks: int = 1
    frames: Tuple[Tuple[Any, ...], ...] = ()


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class AppConfig:
    depth: DepthConfig
    engine: EngineSettings
    speech: SpeechConfig
    haptics: HapticConfig
    simulator: SimulatorConfig
    logging: LoggingConfig


def load_config(path: Path) -> AppConfig:
    """Load configuration from a YAML file."""
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    return parse_config(raw)


def parse_config(raw: Any) -> AppConfig:
    """Build an ``AppConfig`` from an already-parsed mapping."""
    if not isinstance(raw, dict):
        raise ValueError("configuration root must be a mapping")

    engine = EngineSettings(tick_hz=float(_section(raw, "engine").get("tick_hz", 30.0)))
    if engine.tick_hz <= 0:
        raise ValueError("engine.tick_hz must be greater than zero")

    return AppConfig(
        depth=_parse_depth(_section(raw, "depth")),
        engine=engine,
        speech=_parse_speech(_section(raw, "speech")),
        haptics=_parse_haptics(_section(raw, "haptics")),
        simulator=_parse_simulator(_section(raw, "simulator")),
        logging=LoggingConfig(level=str(_section(raw, "logging").get("level", "INFO"))),
    )


def _section(raw: dict, key: str) -> dict:
    # A key left empty in YAML loads as None.
    section = raw.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"{key} section must be a mapping")
    return section


def _parse_depth(raw: Any) -> DepthConfig:
    depth = DepthConfig(
        host=str(raw.get("host", "0.0.0.0")),
        port=int(raw.get("port", 9000)),
        sentinel_m=float(raw.get("sentinel_m", DEPTH_SENTINEL_M)),
        watchdog_s=float(raw.get("watchdog_s", 1.0)),
    )
    if depth.sentinel_m <= 0:
        raise ValueError("depth.sentinel_m must be greater than zero")
    if depth.watchdog_s <= 0:
        raise ValueError("depth.watchdog_s must be greater than zero")
    return depth


def _parse_speech(raw: Any) -> SpeechConfig:
    backend = str(raw.get("backend", "pyttsx3"))
    if backend not in SPEECH_BACKENDS:
        raise ValueError(f"speech.backend must be one of {SPEECH_BACKENDS}, got {backend!r}")
    policy = SpeechPolicy(
        status_interval_s=float(raw.get("status_interval_s", 2.0)),
        command_interval_s=float(raw.get("command_interval_s", 4.0)),
        depth_delta_m=float(raw.get("depth_delta_m", 0.5)),
        mode=str(raw.get("mode", "dual")),
        single_interval_s=float(raw.get("single_interval_s", 4.0)),
    )
    return SpeechConfig(
        backend=backend,
        rate=int(raw.get("rate", 150)),
        volume=float(raw.get("volume", 1.0)),
        policy=policy,
    )


def _parse_haptics(raw: Any) -> HapticConfig:
    backend = str(raw.get("backend", "osc"))
    if backend not in HAPTIC_BACKENDS:
        raise ValueError(f"haptics.backend must be one of {HAPTIC_BACKENDS}, got {backend!r}")
    osc = _section(raw, "osc")
    midi = _section(raw, "midi")
    haptics = HapticConfig(
        backend=backend,
        osc_host=str(osc.get("host", "127.0.0.1")),
        osc_port=int(osc.get("port", 9001)),
        midi_port=str(midi.get("port", "")),
        midi_channel=int(midi.get("channel", 1)),
        pulse_guard_s=float(raw.get("pulse_guard_s", PULSE_GUARD_S)),
    )
    if haptics.pulse_guard_s < 0:
        raise ValueError("haptics.pulse_guard_s must not be negative")
    return haptics


def _parse_simulator(raw: Any) -> SimulatorConfig:
    frames = []
    for frame in raw.get("frames", []) or []:
        if frame and isinstance(frame[0], (list, tuple)):
            # Depth map rows, sampled into three regions by the simulator.
            frames.append(tuple(tuple(float(value) for value in row) for row in frame))
            continue
        if len(frame) != 3:
            raise ValueError(f"simulator frames need three depths or a depth map, got {frame!r}")
        frames.append((float(frame[0]), float(frame[1]), float(frame[2])))
    hold_ticks = int(raw.get("hold_ticks", 1))
    if hold_ticks < 1:
        raise ValueError("simulator.hold_ticks must be at least 1")
    return SimulatorConfig(
        enabled=bool(raw.get("enabled", False)),
        hold_ticks=hold_ticks,
        frames=tuple(frames),
    )


def load_default_config() -> AppConfig:
    """Load the default config.yaml shipped with the package."""
    path = Path(__file__).resolve().parent / "config.yaml"
    return load_config(path)


__all__ = [
    "AppConfig",
    "DepthConfig",
    "EngineSettings",
    "HAPTIC_BACKENDS",
    "HapticConfig",
    "LoggingConfig",
    "SPEECH_BACKENDS",
    "SimulatorConfig",
    "SpeechConfig",
    "load_config",
    "load_default_config",
    "parse_config",
]
