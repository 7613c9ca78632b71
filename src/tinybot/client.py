"""Async HTTP client for the rtm.start handshake."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from .types import Handshake, parse_handshake

if TYPE_CHECKING:
    from .config import BotConfig

logger = logging.getLogger(__name__)


class ConnectionFailed(Exception):
    """Raised when the handshake does not yield a usable socket endpoint.

    ``kind`` is one of ``RequestError`` (transport failure), ``RequestFailed``
    (HTTP status above 299) or ``ApiError`` (body with ``ok: false``).
    """

    def __init__(
        self,
        kind: str,
        status_code: int | None = None,
        response_body: Any = None,
    ):
        self.kind = kind
        self.status_code = status_code
        self.response_body = response_body
        detail = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Couldn't connect: {kind}{detail}")


class Client:
    """Async HTTP client that performs the connection handshake."""

    def __init__(
        self,
        config: BotConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._http = httpx.AsyncClient(
            params={"token": config.token},
            headers={"Accept": "application/json"},
            timeout=30.0,
            transport=transport,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def rtm_start(self) -> Handshake:
        """Call rtm.start once and return the socket URL plus directory snapshot."""
        try:
            resp = await self._http.get(self.config.rtm_start_url)
        except httpx.HTTPError as e:
            raise ConnectionFailed("RequestError", response_body=str(e)) from e

        body = _body(resp)
        if resp.status_code > 299:
            raise ConnectionFailed("RequestFailed", resp.status_code, body)
        if not isinstance(body, dict) or not body.get("ok"):
            raise ConnectionFailed("ApiError", resp.status_code, body)

        try:
            handshake = parse_handshake(body)
        except (KeyError, TypeError) as e:
            raise ConnectionFailed("ApiError", resp.status_code, body) from e

        logger.info(
            "Handshake ok: %d users, %d channels",
            len(handshake.users),
            len(handshake.channels),
        )
        return handshake


def _body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text
