"""Subscription record and listener callback types."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from .matcher import Filter

Event = Mapping[str, Any]
Listener = Callable[[Event, tuple[str, ...]], "Awaitable[None] | None"]
RawHandler = Callable[[Event], "Awaitable[None] | None"]


@dataclass(eq=False)
class Subscription:
    """A registered listener.

    ``name`` is only used by ``drop``; two subscriptions may share it.
    """

    filters: Filter
    callback: Listener
    name: str
    persistent: bool = True
    active: bool = True
    fired: bool = False

    async def invoke(self, event: Event, captures: tuple[str, ...]) -> None:
        result = self.callback(event, captures)
        if inspect.isawaitable(result):
            await result
