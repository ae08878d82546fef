"""Haptic actuator backends behind a single ``pulse(intensity, sharpness)`` call."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import mido
from pythonosc.udp_client import SimpleUDPClient

from .filters import clamp
from .haptic_scheduler import HapticSink

LOGGER = logging.getLogger(__name__)

HAPTIC_ADDRESS = "/haptic"

# Impact generator notes per strength; the wearable maps these to motor presets.
IMPACT_NOTES = {"light": 60, "medium": 62, "heavy": 64}


class MidiPort(Protocol):
    """Subset of the mido output port API used by the impact backend."""

    def send(self, message: mido.Message) -> None:
        ...

    def close(self) -> None:
        ...


class HapticBackend(HapticSink, Protocol):
    """A haptic sink that owns a device connection."""

    def close(self) -> None:
        ...


class OscHaptics:
    """Precision actuator: forwards intensity and sharpness as OSC floats."""

    def __init__(self, host: str, port: int, client: Optional[SimpleUDPClient] = None) -> None:
        self._client = client or SimpleUDPClient(host, port)
        LOGGER.info("OSC haptics sending to %s:%s", host, port)

    def pulse(self, intensity: float, sharpness: float) -> None:
        payload = [clamp(float(intensity), 0.0, 1.0), clamp(float(sharpness), 0.0, 1.0)]
        try:
            self._client.send_message(HAPTIC_ADDRESS, payload)
        except OSError as exc:  # pragma: no cover - depends on network state
            LOGGER.warning("OSC haptic send failed: %s", exc)

    def close(self) -> None:
        pass


class MidiImpactHaptics:
    """Simple impact generator: one note per pulse, strength from intensity."""

    def __init__(self, port: MidiPort, channel: int = 1) -> None:
        self._port = port
        self._channel = _zero_based_channel(channel)

    def pulse(self, intensity: float, sharpness: float) -> None:
        intensity = clamp(float(intensity), 0.0, 1.0)
        if intensity <= 0.0:
            return
        note = IMPACT_NOTES[impact_style(intensity)]
        velocity = max(1, min(int(round(intensity * 127)), 127))
        self._port.send(mido.Message("note_on", channel=self._channel, note=note, velocity=velocity))
        self._port.send(mido.Message("note_off", channel=self._channel, note=note, velocity=0))

    def close(self) -> None:
        self._port.close()


class LoggingHaptics:
    """Dry-run backend that only logs pulses."""

    def pulse(self, intensity: float, sharpness: float) -> None:
        LOGGER.info("Haptic pulse intensity=%.2f sharpness=%.2f", intensity, sharpness)

    def close(self) -> None:
        pass


def impact_style(intensity: float) -> str:
    """Bucket an intensity into the impact generator's three strengths."""
    if intensity < 0.4:
        return "light"
    if intensity < 0.6:
        return "medium"
    return "heavy"


def open_midi_port(port_name: str) -> MidiPort:
    """Open a MIDI output port with user-friendly errors."""
    try:
        return mido.open_output(port_name)
    except IOError as exc:  # pragma: no cover - depends on system ports
        available = ", ".join(mido.get_output_names())
        raise RuntimeError(
            f"Failed to open MIDI output '{port_name}'. Available ports: {available}"
        ) from exc


def _zero_based_channel(channel: int) -> int:
    """Convert 1-based user channel numbers to 0-based MIDI channels."""
    if not 1 <= channel <= 16:
        raise ValueError(f"MIDI channel must be 1-16, got {channel}")
    return channel - 1


__all__ = [
    "HAPTIC_ADDRESS",
    "HapticBackend",
    "HapticSink",
    "IMPACT_NOTES",
    "LoggingHaptics",
    "MidiImpactHaptics",
    "OscHaptics",
    "impact_style",
    "open_midi_port",
]
