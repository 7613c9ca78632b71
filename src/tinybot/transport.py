"""WebSocket transport: reads inbound frames and writes outbound ones."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable

import websockets

logger = logging.getLogger(__name__)

FrameCallback = Callable[[dict[str, Any]], Awaitable[None]]


def decode_frame(raw: str | bytes) -> dict[str, Any] | None:
    """Decode one inbound frame. Returns None (and logs) if it is unusable."""
    try:
        message = json.loads(raw)
    except ValueError:
        logger.warning("Bad JSON in inbound frame: %r", raw)
        return None
    if not isinstance(message, dict):
        logger.warning("Inbound frame is not an object: %r", raw)
        return None
    return message


class Transport:
    """A single websocket connection. No reconnect: when it closes, it's done."""

    def __init__(self, connect: Callable[..., Any] = websockets.connect) -> None:
        self._connect = connect
        self._ws: Any = None
        self._task: asyncio.Task | None = None
        self.closed = asyncio.Event()

    @property
    def connected(self) -> bool:
        return self._ws is not None and not self.closed.is_set()

    async def open(self, url: str) -> None:
        logger.info("Connecting socket %s", url)
        self._ws = await self._connect(url)
        logger.debug("Socket opened %s", url)

    def start(self, callback: FrameCallback) -> asyncio.Task:
        """Start the reader task that feeds decoded frames to ``callback``."""
        self._task = asyncio.create_task(self._read(callback), name="tinybot-reader")
        return self._task

    async def _read(self, callback: FrameCallback) -> None:
        try:
            async for raw in self._ws:
                message = decode_frame(raw)
                if message is None:
                    continue

                if message.get("type") != "reconnect_url":
                    logger.debug("Inbound: %s", message)

                try:
                    await callback(message)
                except Exception:
                    logger.exception("Error processing frame")
        except asyncio.CancelledError:
            logger.info("Socket reader cancelled")
            raise
        except websockets.ConnectionClosed as e:
            logger.warning("Socket closed: %s", e)
        else:
            logger.info("Socket closed by server")
        finally:
            self.closed.set()

    async def send(self, frame: dict[str, Any]) -> None:
        if not self.connected:
            raise RuntimeError("Socket is not open")
        await self._ws.send(json.dumps(frame))

    async def close(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        if self._ws is not None:
            await self._ws.close()
        self.closed.set()
