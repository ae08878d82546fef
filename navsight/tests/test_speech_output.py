"""Tests for the threaded text-to-speech output."""

from __future__ import annotations

import threading
from typing import Callable, Dict, List

from navsight.speech_output import LoggingSpeech, SpeechOutput


class FakeEngine:
    """Stand-in for a pyttsx3 engine that records what it was asked to say."""

    def __init__(self) -> None:
        self.properties: Dict[str, object] = {}
        self.spoken: List[str] = []
        self.stops = 0
        self.callbacks: Dict[str, Callable[..., None]] = {}
        self.said = threading.Event()
        self._queue: List[str] = []

    def setProperty(self, name: str, value: object) -> None:
        self.properties[name] = value

    def connect(self, topic: str, callback: Callable[..., None]) -> None:
        self.callbacks[topic] = callback

    def say(self, text: str) -> None:
        self._queue.append(text)

    def runAndWait(self) -> None:
        for text in self._queue:
            self.callbacks["started-word"](text, 0, len(text))
            self.spoken.append(text)
        self._queue.clear()
        self.said.set()

    def stop(self) -> None:
        self.stops += 1


def test_speech_output_speaks_on_worker_thread() -> None:
    engine = FakeEngine()
    output = SpeechOutput(rate=120, volume=0.8, engine_factory=lambda: engine)
    try:
        output.speak("2.0 meters ahead")
        assert engine.said.wait(timeout=2.0)
    finally:
        output.close()

    assert engine.spoken == ["2.0 meters ahead"]
    assert engine.properties == {"rate": 120, "volume": 0.8}
    assert engine.stops == 0


def test_blank_messages_are_ignored() -> None:
    engine = FakeEngine()
    output = SpeechOutput(engine_factory=lambda: engine)
    output.speak("   ")
    output.close()
    assert engine.spoken == []


def test_speak_after_close_is_ignored() -> None:
    engine = FakeEngine()
    output = SpeechOutput(engine_factory=lambda: engine)
    output.close()
    output.close()
    output.speak("Clear")
    assert engine.spoken == []


def test_closing_interrupts_current_utterance() -> None:
    engine = FakeEngine()
    output = SpeechOutput(engine_factory=lambda: engine)
    output.close()
    output._interrupt_if_superseded(engine)
    assert engine.stops == 1


def test_logging_speech_is_silent_sink() -> None:
    speaker = LoggingSpeech()
    speaker.speak("Clear")
    speaker.close()


class BlockingEngine(FakeEngine):
    """Engine whose utterance stays in flight until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.in_flight = threading.Event()
        self.release = threading.Event()
        self.finished = threading.Event()

    def runAndWait(self) -> None:
        self.in_flight.set()
        self.release.wait(timeout=2.0)
        super().runAndWait()
        if len(self.spoken) >= 2:
            self.finished.set()


def test_newer_message_replaces_utterance_in_flight() -> None:
    engine = BlockingEngine()
    output = SpeechOutput(engine_factory=lambda: engine)
    try:
        output.speak("2.0 meters ahead")
        assert engine.in_flight.wait(timeout=2.0)
        output.speak("Obstacle at 80 centimeters, move left")
        output.speak("Warning, 30 centimeters, move left")
        engine.release.set()
        assert engine.finished.wait(timeout=2.0)
    finally:
        output.close()

    assert engine.stops >= 1
    assert engine.spoken == ["2.0 meters ahead", "Warning, 30 centimeters, move left"]
