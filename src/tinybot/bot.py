"""Bot class: the central orchestrator."""

from __future__ import annotations

import asyncio
import importlib
import inspect
import logging
import re
import signal
from typing import Any, Callable, Mapping

from .client import Client
from .config import BotConfig
from .directory import Directory
from .event import Event, Listener, RawHandler, Subscription
from .matcher import Matcher
from .outbound import MessageIdSequence, Outbox
from .registry import ListenerRegistry
from .transport import Transport

logger = logging.getLogger(__name__)


class Bot:
    """The main bot object. Holds config, client, transport, and the listener registry."""

    def __init__(
        self,
        token: str | None = None,
        default_channel: str | None = None,
        api_url: str | None = None,
        config_path: str | None = None,
        *,
        transport: Transport | None = None,
        ids: MessageIdSequence | None = None,
    ) -> None:
        self.config = BotConfig.load(
            config_path,
            token=token,
            api_url=api_url,
            default_channel=default_channel,
        )
        self.client = Client(self.config)
        self.transport = transport or Transport()
        self.matcher = Matcher(Directory())
        self.listeners = ListenerRegistry(self.matcher)
        self.outbox = Outbox(
            self.matcher.directory,
            self.transport,
            default_channel=self.config.default_channel or None,
            ids=ids,
        )

        self._raw_handlers: list[RawHandler] = []
        self._extensions: dict[str, Any] = {}  # module name -> module
        self._closed = False
        self._stop_event: asyncio.Event | None = None

    # --- Directory ---

    @property
    def directory(self) -> Directory:
        return self.matcher.directory

    @directory.setter
    def directory(self, directory: Directory) -> None:
        self.matcher.directory = directory
        self.outbox.directory = directory

    def channel_id_for_name(self, name: str) -> str | None:
        return self.directory.resolve_channel(name)

    def user_id_for_name(self, name: str) -> str | None:
        return self.directory.resolve_user(name)

    # --- Listener registration ---

    def hears(
        self,
        filters: Mapping[str, Any],
        callback: Listener | None = None,
        *,
        name: str,
    ) -> Any:
        """Call ``callback(event, captures)`` for every event matching ``filters``.

        Usable directly or as a decorator::

            bot.hears({"text": "cool"}, on_cool, name="cool")

            @bot.hears({"text": re.compile(r"n(.*)e")}, name="nope")
            async def nope(event, captures): ...
        """
        return self._register(filters, callback, name=name, persistent=True)

    def hears_once(
        self,
        filters: Mapping[str, Any],
        callback: Listener | None = None,
        *,
        name: str,
    ) -> Any:
        """Like ``hears`` but the listener is removed after its first match."""
        return self._register(filters, callback, name=name, persistent=False)

    def _register(
        self,
        filters: Mapping[str, Any],
        callback: Listener | None,
        *,
        name: str,
        persistent: bool,
    ) -> Any:
        if callback is not None:
            return self.listeners.register(
                filters, callback, name=name, persistent=persistent
            )

        def decorator(func: Listener) -> Listener:
            self.listeners.register(filters, func, name=name, persistent=persistent)
            return func

        return decorator

    def drop(self, name_pattern: str | re.Pattern | None) -> int:
        """Remove listeners by name: exact string, compiled pattern, or ``"*"``."""
        return self.listeners.drop(name_pattern)

    def remove_listener(self, sub: Subscription) -> bool:
        return self.listeners.remove(sub)

    # --- Raw events ---

    def on_event(self, func: RawHandler) -> RawHandler:
        """Register a handler for every decoded event (usable as a decorator)."""
        self._raw_handlers.append(func)
        return func

    def off_event(self, func: RawHandler) -> None:
        try:
            self._raw_handlers.remove(func)
        except ValueError:
            pass

    # --- Traits and extensions ---

    def add_trait(self, trait: Callable[[Bot], Any]) -> None:
        """Compose behaviour: ``trait(bot)`` usually registers listeners."""
        trait(self)

    async def load_extension(self, module_name: str) -> None:
        """Load an extension module and call its setup(bot) function."""
        if module_name in self._extensions:
            raise ValueError(f"Extension {module_name!r} is already loaded")

        module = importlib.import_module(module_name)
        setup = getattr(module, "setup", None)
        if setup is None:
            raise ValueError(f"Extension {module_name!r} has no setup() function")

        result = setup(self)
        if inspect.isawaitable(result):
            await result
        self._extensions[module_name] = module
        logger.info("Loaded extension: %s", module_name)

    # --- Sending ---

    async def say(self, text: str, channel: str | None = None) -> dict | None:
        """Post ``text`` to a channel id or ``#name`` (default channel if omitted).

        Returns the frame that was sent, or None if it could not be sent.
        """
        return await self.outbox.send(text, channel)

    # --- Event dispatching ---

    async def _dispatch(self, event: Event) -> None:
        """Dispatch one decoded event to raw handlers, then to listeners."""
        for handler in list(self._raw_handlers):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Error in raw event handler")

        await self.listeners.dispatch(event)

    # --- Lifecycle ---

    async def start(self) -> None:
        """Handshake, load the directory, and open the socket.

        Raises ConnectionFailed if the handshake fails. There is no retry.
        """
        handshake = await self.client.rtm_start()
        self.directory = Directory.from_handshake(handshake)

        for ext in self.config.extensions:
            try:
                await self.load_extension(ext)
            except Exception:
                logger.exception("Failed to load extension: %s", ext)

        await self.transport.open(handshake.url)
        self.transport.start(self._dispatch)

    async def close(self) -> None:
        """Gracefully shut down (idempotent)."""
        if self._closed:
            return
        self._closed = True
        logger.info("Shutting down...")
        await self.transport.close()
        await self.client.close()

        # Unblock _runner if it's waiting
        if self._stop_event:
            self._stop_event.set()

    def run(self) -> None:
        """Blocking entry point. Starts the event loop and runs until interrupted."""
        logging.basicConfig(
            level=getattr(logging, self.config.log_level, logging.INFO),
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

        async def _runner() -> None:
            self._stop_event = asyncio.Event()
            loop = asyncio.get_running_loop()

            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(
                    sig, lambda s=sig: asyncio.create_task(self._handle_signal(s))
                )

            try:
                await self.start()
                closed = asyncio.create_task(self.transport.closed.wait())
                stopped = asyncio.create_task(self._stop_event.wait())
                await asyncio.wait(
                    {closed, stopped}, return_when=asyncio.FIRST_COMPLETED
                )
                for task in (closed, stopped):
                    task.cancel()
                await asyncio.gather(closed, stopped, return_exceptions=True)
            except asyncio.CancelledError:
                pass
            finally:
                await self.close()

        asyncio.run(_runner())

    async def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down...", sig.name)
        await self.close()
