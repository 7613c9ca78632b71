"""Listener registry: owns subscriptions and fans events out to them."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, Mapping

from .event import Event, Listener, Subscription
from .matcher import Matcher, compile_filter

logger = logging.getLogger(__name__)

DROP_ALL = "*"


class ListenerRegistry:
    """Holds active subscriptions and dispatches events to them.

    Each dispatch pass iterates over a snapshot of the subscriptions taken
    when the pass starts, so callbacks may register or drop listeners freely.
    Changes apply from the next pass on.
    """

    def __init__(self, matcher: Matcher | None = None) -> None:
        self.matcher = matcher or Matcher()
        self._subscriptions: list[Subscription] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __iter__(self) -> Iterator[Subscription]:
        return iter(list(self._subscriptions))

    def names(self) -> list[str]:
        return [sub.name for sub in self._subscriptions]

    # --- Registration ---

    def register(
        self,
        filters: Mapping[str, Any],
        callback: Listener,
        *,
        name: str,
        persistent: bool = True,
    ) -> Subscription:
        sub = Subscription(
            filters=compile_filter(filters),
            callback=callback,
            name=name,
            persistent=persistent,
        )
        self._subscriptions.append(sub)
        logger.debug("Registered listener %r (persistent=%s)", name, persistent)
        return sub

    def register_once(
        self, filters: Mapping[str, Any], callback: Listener, *, name: str
    ) -> Subscription:
        return self.register(filters, callback, name=name, persistent=False)

    # --- Removal ---

    def remove(self, sub: Subscription) -> bool:
        """Remove one subscription. Returns False if it was already removed."""
        if not sub.active:
            return False
        sub.active = False
        try:
            self._subscriptions.remove(sub)
        except ValueError:
            return False
        return True

    def drop(self, name_pattern: str | re.Pattern | None) -> int:
        """Remove every subscription whose name matches ``name_pattern``.

        A string matches names exactly, ``"*"`` matches everything and a
        compiled pattern is matched from the start of the name.
        """
        if not name_pattern:
            logger.warning("drop() needs a name or pattern; pass '*' to remove all listeners")
            return 0

        doomed = [
            sub for sub in self._subscriptions if _name_matches(name_pattern, sub.name)
        ]
        for sub in doomed:
            self.remove(sub)

        logger.debug("Dropped %d listener(s) matching %r", len(doomed), name_pattern)
        return len(doomed)

    # --- Dispatch ---

    async def dispatch(self, event: Event) -> int:
        """Run one dispatch pass. Returns the number of callbacks invoked."""
        invoked = 0

        for sub in list(self._subscriptions):
            # a re-entrant pass may already have consumed this one-shot
            if sub.fired:
                continue

            try:
                result = self.matcher.match(event, sub.filters)
            except Exception:
                logger.exception("Error matching listener %r", sub.name)
                continue
            if not result.matched:
                continue

            if not sub.persistent:
                sub.fired = True
                self.remove(sub)

            invoked += 1
            try:
                await sub.invoke(event, result.captures)
            except Exception:
                logger.exception("Error in listener %r", sub.name)

        return invoked


def _name_matches(pattern: str | re.Pattern, name: str) -> bool:
    if isinstance(pattern, re.Pattern):
        return pattern.match(name) is not None
    if pattern == DROP_ALL:
        return True
    return pattern == name
