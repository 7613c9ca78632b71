"""Shared fixtures for the tinybot test suite."""

from __future__ import annotations

import json

import pytest

from tinybot.directory import Directory
from tinybot.matcher import Matcher
from tinybot.registry import ListenerRegistry
from tinybot.types import Entity


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Keep config tests and Bot construction away from the real environment."""
    for var in ("TINYBOT_TOKEN", "TINYBOT_API_URL", "TINYBOT_DEFAULT_CHANNEL", "TINYBOT_LOG_LEVEL"):
        # set first so teardown also clears values loaded from a .env file
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def directory() -> Directory:
    """The same users and channels the stub server hands out."""
    return Directory(
        users=[Entity("n0", "neil"), Entity("s1", "thebigdog"), Entity("UBOT", "tinybot")],
        channels=[Entity("CG0", "general"), Entity("CR1", "random")],
        self_id="UBOT",
    )


@pytest.fixture
def matcher(directory) -> Matcher:
    return Matcher(directory)


@pytest.fixture
def registry(matcher) -> ListenerRegistry:
    return ListenerRegistry(matcher)


class FakeSocket:
    """Stands in for a websockets connection."""

    def __init__(self, frames=()):
        self.frames = list(frames)
        self.sent: list[dict] = []
        self.closed = False

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for frame in self.frames:
            yield frame

    async def send(self, data: str) -> None:
        self.sent.append(json.loads(data))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_socket():
    return FakeSocket()


@pytest.fixture
def connect_to(fake_socket):
    """A connect() replacement that records the URL and returns fake_socket."""
    urls: list[str] = []

    async def connect(url):
        urls.append(url)
        return fake_socket

    connect.urls = urls
    return connect
