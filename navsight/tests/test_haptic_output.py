"""Tests for the haptic actuator backends."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from navsight.haptic_output import (
    HAPTIC_ADDRESS,
    IMPACT_NOTES,
    MidiImpactHaptics,
    OscHaptics,
    impact_style,
)


@dataclass
class FakePort:
    messages: list = field(default_factory=list)
    closed: bool = False

    def send(self, message) -> None:
        self.messages.append(message)

    def close(self) -> None:
        self.closed = True


@dataclass
class FakeOscClient:
    sent: list = field(default_factory=list)

    def send_message(self, address: str, value) -> None:
        self.sent.append((address, value))


def test_osc_haptics_sends_clamped_pair() -> None:
    client = FakeOscClient()
    haptics = OscHaptics("127.0.0.1", 9001, client=client)
    haptics.pulse(0.7, 0.7)
    haptics.pulse(1.5, -0.2)

    assert client.sent[0][0] == HAPTIC_ADDRESS
    assert client.sent[0][1] == pytest.approx([0.7, 0.7])
    assert client.sent[1][1] == pytest.approx([1.0, 0.0])


@pytest.mark.parametrize(
    "intensity, style",
    [(0.3, "light"), (0.5, "medium"), (0.7, "heavy"), (1.0, "heavy")],
)
def test_impact_style_buckets(intensity: float, style: str) -> None:
    assert impact_style(intensity) == style


def test_midi_impact_sends_note_on_then_off() -> None:
    port = FakePort()
    haptics = MidiImpactHaptics(port, channel=2)
    haptics.pulse(1.0, 1.0)

    note_on, note_off = port.messages
    assert note_on.type == "note_on"
    assert note_on.channel == 1
    assert note_on.note == IMPACT_NOTES["heavy"]
    assert note_on.velocity == 127
    assert note_off.type == "note_off"
    assert note_off.note == note_on.note


def test_midi_impact_velocity_follows_intensity() -> None:
    port = FakePort()
    haptics = MidiImpactHaptics(port)
    haptics.pulse(0.3, 0.3)
    assert port.messages[0].note == IMPACT_NOTES["light"]
    assert port.messages[0].velocity == 38


def test_midi_impact_skips_zero_intensity() -> None:
    port = FakePort()
    MidiImpactHaptics(port).pulse(0.0, 0.0)
    assert port.messages == []


def test_midi_impact_rejects_bad_channel() -> None:
    with pytest.raises(ValueError):
        MidiImpactHaptics(FakePort(), channel=17)


def test_midi_impact_close_closes_port() -> None:
    port = FakePort()
    MidiImpactHaptics(port).close()
    assert port.closed
