"""Tests for the rtm.start handshake."""

from __future__ import annotations

import httpx
import pytest

from tinybot.client import Client, ConnectionFailed
from tinybot.config import BotConfig
from tinybot.types import Entity

STUB_BODY = {
    "ok": True,
    "url": "ws://localhost:6970",
    "self": {"id": "UBOT"},
    "users": [{"name": "neil", "id": "n0"}, {"name": "thebigdog", "id": "s1"}],
    "channels": [{"name": "general", "id": "CG0"}],
}


def _client(handler) -> Client:
    config = BotConfig(token="xoxb-test", api_url="http://stub.test/api/")
    return Client(config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_successful_handshake():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=STUB_BODY)

    client = _client(handler)
    try:
        handshake = await client.rtm_start()
    finally:
        await client.close()

    assert handshake.url == "ws://localhost:6970"
    assert handshake.self_id == "UBOT"
    assert handshake.users[0] == Entity("n0", "neil")
    assert handshake.channels == [Entity("CG0", "general")]

    assert len(requests) == 1
    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/rtm.start"
    assert requests[0].url.params["token"] == "xoxb-test"


@pytest.mark.asyncio
async def test_http_error_status():
    client = _client(lambda request: httpx.Response(503, text="down"))
    try:
        with pytest.raises(ConnectionFailed) as exc_info:
            await client.rtm_start()
    finally:
        await client.close()

    err = exc_info.value
    assert err.kind == "RequestFailed"
    assert err.status_code == 503
    assert err.response_body == "down"


@pytest.mark.asyncio
async def test_api_error_body():
    body = {"ok": False, "error": "invalid_auth"}
    client = _client(lambda request: httpx.Response(200, json=body))
    try:
        with pytest.raises(ConnectionFailed) as exc_info:
            await client.rtm_start()
    finally:
        await client.close()

    assert exc_info.value.kind == "ApiError"
    assert exc_info.value.status_code == 200
    assert exc_info.value.response_body == body


@pytest.mark.asyncio
async def test_ok_body_without_url_is_an_api_error():
    client = _client(lambda request: httpx.Response(200, json={"ok": True}))
    try:
        with pytest.raises(ConnectionFailed) as exc_info:
            await client.rtm_start()
    finally:
        await client.close()

    assert exc_info.value.kind == "ApiError"


@pytest.mark.asyncio
async def test_transport_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)
    try:
        with pytest.raises(ConnectionFailed) as exc_info:
            await client.rtm_start()
    finally:
        await client.close()

    assert exc_info.value.kind == "RequestError"
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
