"""OSC client abstraction for receiving depth triples from the sampler."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Optional, Tuple

from pythonosc import dispatcher
from pythonosc.osc_server import AsyncIOOSCUDPServer

from .filters import sanitize_depth
from .state import DEPTH_SENTINEL_M, DepthReading

LOGGER = logging.getLogger(__name__)

DEPTH_ADDRESS = "/depth"


@dataclass
class _DepthBuffer:
    sentinel: float = DEPTH_SENTINEL_M
    left: float = DEPTH_SENTINEL_M
    center: float = DEPTH_SENTINEL_M
    right: float = DEPTH_SENTINEL_M
    last_rx_ts: float = field(default_factory=perf_counter)

    def update(self, left: object, center: object, right: object) -> None:
        self.left = sanitize_depth(left, self.sentinel)
        self.center = sanitize_depth(center, self.sentinel)
        self.right = sanitize_depth(right, self.sentinel)
        self.last_rx_ts = perf_counter()

    def snapshot(self) -> DepthReading:
        return DepthReading(
            left=self.left, center=self.center, right=self.right, last_rx_ts=self.last_rx_ts
        )


class DepthClient:
    """Receives ``/depth left center right`` OSC messages and exposes the latest reading."""

    def __init__(
        self,
        host: str,
        port: int,
        sentinel: float = DEPTH_SENTINEL_M,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._loop = loop or asyncio.get_event_loop()
        self._address = (host, port)
        self._buffer = _DepthBuffer(
            sentinel=sentinel, left=sentinel, center=sentinel, right=sentinel
        )
        self._dispatcher = dispatcher.Dispatcher()
        self._dispatcher.map(DEPTH_ADDRESS, self._on_depth)
        self._server = AsyncIOOSCUDPServer(self._address, self._dispatcher, self._loop)
        self._transport: Optional[asyncio.BaseTransport] = None
        self._protocol = None

    async def start(self) -> None:
        """Start listening for OSC messages."""
        if self._transport is not None:
            return
        self._transport, self._protocol = await self._server.create_serve_endpoint()
        LOGGER.info("DepthClient listening on %s:%s", *self.address)

    async def stop(self) -> None:
        """Stop the OSC server."""
        if self._transport is None:
            return
        self._transport.close()
        self._transport = None
        self._protocol = None

    @property
    def address(self) -> Tuple[str, int]:
        """Return the configured OSC address tuple."""
        return self._address

    def consume_reading(self) -> DepthReading:
        """Return the latest depth triple."""
        return self._buffer.snapshot()

    def inject_depths(self, left: float, center: float, right: float) -> None:
        """Testing helper to inject a depth triple."""
        self._buffer.update(left, center, right)

    # Handlers -----------------------------------------------------------------

    def _on_depth(self, _addr: str, *values: object) -> None:
        if len(values) != 3:
            LOGGER.debug("Ignoring depth payload with %d values: %s", len(values), values)
            return
        self._buffer.update(*values)


__all__ = ["DEPTH_ADDRESS", "DepthClient"]
