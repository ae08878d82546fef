"""Entrypoint for the guidance node asyncio application."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
from pathlib import Path
from time import perf_counter
from typing import Iterable, Optional, Protocol, Tuple

from .configuration import AppConfig, load_config, load_default_config
from .depth_client import DepthClient
from .depth_source import SimDepthSource
from .guidance_engine import EngineConfig, GuidanceEngine
from .haptic_output import (
    HapticBackend,
    LoggingHaptics,
    MidiImpactHaptics,
    OscHaptics,
    open_midi_port,
)
from .haptic_scheduler import HapticFeedbackScheduler
from .speech_output import LoggingSpeech, SpeechOutput, SpeechSink
from .speech_scheduler import SpeechGuidanceScheduler
from .state import DepthReading

LOGGER = logging.getLogger(__name__)


class DepthSource(Protocol):
    def consume_reading(self) -> DepthReading:
        ...


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Depth-to-speech and haptic guidance node.")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration YAML. Defaults to bundled config.yaml if omitted.",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Replay the simulator frames from the config instead of listening for OSC depth.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log speech and haptic output instead of driving real devices.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


async def engine_loop(engine: GuidanceEngine, source: DepthSource, app_config: AppConfig) -> None:
    """Run the fixed-rate tick loop until cancelled."""
    tick_interval = 1.0 / app_config.engine.tick_hz
    next_tick = perf_counter()
    try:
        while True:
            next_tick += tick_interval
            engine.process_tick(source.consume_reading(), perf_counter())
            sleep_time = max(0.0, next_tick - perf_counter())
            if sleep_time:
                await asyncio.sleep(sleep_time)
    except asyncio.CancelledError:
        LOGGER.info("Engine loop cancelled")
        raise


def build_speaker(app_config: AppConfig, dry_run: bool) -> SpeechSink:
    speech = app_config.speech
    if dry_run or speech.backend == "log":
        return LoggingSpeech()
    return SpeechOutput(rate=speech.rate, volume=speech.volume)


def build_haptics(app_config: AppConfig, dry_run: bool) -> HapticBackend:
    """Pick the haptic backend once at startup."""
    haptics = app_config.haptics
    if dry_run or haptics.backend == "log":
        return LoggingHaptics()
    if haptics.backend == "midi":
        return MidiImpactHaptics(open_midi_port(haptics.midi_port), channel=haptics.midi_channel)
    return OscHaptics(haptics.osc_host, haptics.osc_port)


def build_engine(
    app_config: AppConfig, speaker: SpeechSink, haptic_sink: HapticBackend
) -> GuidanceEngine:
    return GuidanceEngine(
        speech=SpeechGuidanceScheduler(app_config.speech.policy),
        haptics=HapticFeedbackScheduler(haptic_sink, pulse_guard_s=app_config.haptics.pulse_guard_s),
        speaker=speaker,
        config=EngineConfig(watchdog_s=app_config.depth.watchdog_s),
    )


def _build_source(app_config: AppConfig, simulate: bool) -> Tuple[DepthSource, Optional[DepthClient]]:
    depth = app_config.depth
    if simulate or app_config.simulator.enabled:
        source = SimDepthSource(
            app_config.simulator.frames,
            sentinel=depth.sentinel_m,
            hold_ticks=app_config.simulator.hold_ticks,
        )
        return source, None
    client = DepthClient(depth.host, depth.port, sentinel=depth.sentinel_m)
    return client, client


async def async_main(args: argparse.Namespace) -> None:
    config = load_config(args.config) if args.config else load_default_config()
    logging.basicConfig(level=getattr(logging, config.logging.level.upper(), logging.INFO))

    speaker = build_speaker(config, args.dry_run)
    haptic_sink = build_haptics(config, args.dry_run)
    engine = build_engine(config, speaker, haptic_sink)
    source, client = _build_source(config, args.simulate)

    loop_task: asyncio.Task[None] | None = None
    try:
        if client is not None:
            await client.start()
            LOGGER.info("Depth receiver started on %s:%s", config.depth.host, config.depth.port)
        engine.start()
        loop_task = asyncio.create_task(engine_loop(engine, source, config))
        await loop_task
    except asyncio.CancelledError:
        if loop_task is not None:
            loop_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await loop_task
        raise
    finally:
        engine.stop()
        if client is not None:
            await client.stop()
        speaker.close()
        haptic_sink.close()


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = parse_args(argv)
    try:
        asyncio.run(async_main(args))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")


if __name__ == "__main__":
    main()
