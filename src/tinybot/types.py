"""Dataclasses for directory entities, filter values and match results."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Entity:
    """A user or channel record from the handshake directory."""

    id: str
    name: str


# --- Filter values (what a filter field expects) ---


@dataclass(frozen=True)
class ExactMatch:
    value: Any


@dataclass(frozen=True)
class PatternMatch:
    pattern: re.Pattern


@dataclass(frozen=True)
class PresenceCheck:
    """The field must be present; its value is not compared."""


@dataclass(frozen=True)
class Unsatisfiable:
    """Never matches. Produced for a literal ``False`` filter value."""


FilterValue = ExactMatch | PatternMatch | PresenceCheck | Unsatisfiable


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    captures: tuple[str, ...] = ()

    @classmethod
    def hit(cls, captures: tuple[str, ...] = ()) -> MatchResult:
        return cls(matched=True, captures=captures)

    def __bool__(self) -> bool:
        return self.matched


NO_MATCH = MatchResult(matched=False)


@dataclass
class Handshake:
    """The parts of an ``rtm.start`` response the bot consumes."""

    url: str
    users: list[Entity] = field(default_factory=list)
    channels: list[Entity] = field(default_factory=list)
    self_id: str | None = None


def _parse_entity(data: dict) -> Entity:
    return Entity(id=data["id"], name=data["name"])


def parse_handshake(data: dict) -> Handshake:
    """Parse a successful ``rtm.start`` response body."""
    self_data = data.get("self") or {}
    return Handshake(
        url=data["url"],
        users=[_parse_entity(u) for u in data.get("users", [])],
        channels=[_parse_entity(c) for c in data.get("channels", [])],
        self_id=self_data.get("id"),
    )
