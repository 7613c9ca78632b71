"""Outgoing message frames and their correlation ids."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .directory import Directory
    from .transport import Transport

logger = logging.getLogger(__name__)


class MessageIdSequence:
    """Strictly increasing ids for outgoing frames. Never reset."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def next(self) -> int:
        return next(self._counter)


class Outbox:
    """Builds ``message`` frames and hands them to the transport."""

    def __init__(
        self,
        directory: Directory,
        transport: Transport,
        *,
        default_channel: str | None = None,
        ids: MessageIdSequence | None = None,
    ) -> None:
        self.directory = directory
        self.transport = transport
        self.default_channel = default_channel
        self.ids = ids or MessageIdSequence()

    def build(self, text: str, channel: str | None = None) -> dict[str, Any] | None:
        """Build a frame for ``text``; None if the channel can't be resolved."""
        target = channel or self.default_channel
        channel_id = self.directory.resolve_channel(target)
        # ids of other kinds (G..., D...) are not in the directory
        if not channel_id and target and not target.startswith("#"):
            channel_id = target
        if not channel_id:
            logger.error("Invalid channel %r, message not sent", target)
            return None

        return {
            "channel": channel_id,
            "text": text,
            "type": "message",
            "id": self.ids.next(),
        }

    async def send(self, text: str, channel: str | None = None) -> dict[str, Any] | None:
        frame = self.build(text, channel)
        if frame is None:
            return None
        try:
            await self.transport.send(frame)
        except Exception:
            logger.exception("Failed to send message %s", frame["id"])
            return None
        return frame
