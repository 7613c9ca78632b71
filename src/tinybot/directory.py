"""Name-to-id lookup over the users and channels loaded at connect time."""

from __future__ import annotations

from typing import Iterable

from .types import Entity, Handshake


class Directory:
    """Read-only snapshot of users and channels.

    Names may carry a sigil (``#general``, ``@neil``). Values that already
    look like ids are passed through without a lookup.
    """

    def __init__(
        self,
        users: Iterable[Entity] = (),
        channels: Iterable[Entity] = (),
        *,
        self_id: str | None = None,
        user_prefix: str = "U",
        channel_prefix: str = "C",
    ) -> None:
        self._users = tuple(users)
        self._channels = tuple(channels)
        self.self_id = self_id
        self.user_prefix = user_prefix
        self.channel_prefix = channel_prefix

    @classmethod
    def from_handshake(cls, handshake: Handshake) -> Directory:
        return cls(handshake.users, handshake.channels, self_id=handshake.self_id)

    @property
    def users(self) -> tuple[Entity, ...]:
        return self._users

    @property
    def channels(self) -> tuple[Entity, ...]:
        return self._channels

    def looks_like_user_id(self, value: str) -> bool:
        return value.startswith(self.user_prefix)

    def looks_like_channel_id(self, value: str) -> bool:
        return value.startswith(self.channel_prefix)

    def resolve_channel(self, name_or_id: str | None) -> str | None:
        """Return the channel id for ``general``, ``#general`` or an id."""
        if not name_or_id:
            return None
        if self.looks_like_channel_id(name_or_id):
            return name_or_id
        return _find(self._channels, name_or_id.removeprefix("#"))

    def resolve_user(self, name_or_id: str | None) -> str | None:
        """Return the user id for ``neil``, ``@neil`` or an id."""
        if not name_or_id:
            return None
        if self.looks_like_user_id(name_or_id):
            return name_or_id
        return _find(self._users, name_or_id.removeprefix("@"))


def _find(entities: tuple[Entity, ...], name: str) -> str | None:
    for entity in entities:
        if entity.name == name:
            return entity.id
    return None
