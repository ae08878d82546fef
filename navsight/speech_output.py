"""Text-to-speech collaborators: latest message wins, never blocks the tick."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol

import pyttsx3

LOGGER = logging.getLogger(__name__)


class SpeechSink(Protocol):
    def speak(self, text: str) -> None:
        ...

    def close(self) -> None:
        ...


class SpeechOutput:
    """pyttsx3 speaker running on its own worker thread.

    The engine is created and driven only on the worker thread. ``speak``
    stores the text in a single pending slot, replacing anything not yet
    spoken; the worker stops the current utterance at the next word boundary
    when a newer message is pending.
    """

    def __init__(
        self,
        rate: int = 150,
        volume: float = 1.0,
        engine_factory: Callable[[], Any] = pyttsx3.init,
    ) -> None:
        self._rate = rate
        self._volume = volume
        self._engine_factory = engine_factory
        self._lock = threading.Lock()
        self._wakeup = threading.Condition(self._lock)
        self._pending: Optional[str] = None
        self._closed = False
        self._thread = threading.Thread(target=self._run, name="speech-out", daemon=True)
        self._thread.start()

    def speak(self, text: str) -> None:
        text = text.strip()
        if not text:
            return
        with self._lock:
            if self._closed:
                return
            self._pending = text
            self._wakeup.notify()
        LOGGER.info("Speaking: %r", text)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._pending = None
            self._wakeup.notify_all()
        self._thread.join(timeout=1.0)

    # Internal -----------------------------------------------------------------

    def _run(self) -> None:
        try:
            engine = self._engine_factory()
            engine.setProperty("rate", self._rate)
            engine.setProperty("volume", self._volume)
        except Exception as exc:  # pragma: no cover - depends on platform TTS drivers
            LOGGER.error("Speech engine failed to start: %s", exc)
            return

        engine.connect("started-word", lambda *_args, **_kwargs: self._interrupt_if_superseded(engine))
        while True:
            with self._lock:
                while self._pending is None and not self._closed:
                    self._wakeup.wait()
                if self._closed:
                    return
                text, self._pending = self._pending, None
            try:
                engine.say(text)
                engine.runAndWait()
            except Exception as exc:  # pragma: no cover
                LOGGER.error("Speech playback failed: %s", exc)

    def _interrupt_if_superseded(self, engine: Any) -> None:
        with self._lock:
            superseded = self._pending is not None or self._closed
        if superseded:
            engine.stop()


class LoggingSpeech:
    """Dry-run speaker that only logs messages."""

    def speak(self, text: str) -> None:
        LOGGER.info("Speech (dry run): %r", text)

    def close(self) -> None:
        pass


__all__ = ["LoggingSpeech", "SpeechOutput", "SpeechSink"]
