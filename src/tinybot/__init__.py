"""tinybot: a small real-time messaging bot with pattern-based listeners."""

from .bot import Bot
from .client import Client, ConnectionFailed
from .config import BotConfig
from .directory import Directory
from .event import Subscription
from .matcher import Matcher, compile_filter, resolve_field
from .outbound import MessageIdSequence, Outbox
from .registry import ListenerRegistry
from .transport import Transport
from .types import (
    NO_MATCH,
    Entity,
    ExactMatch,
    Handshake,
    MatchResult,
    PatternMatch,
    PresenceCheck,
    Unsatisfiable,
)

__all__ = [
    "Bot",
    "Client",
    "ConnectionFailed",
    "BotConfig",
    "Directory",
    "Subscription",
    "Matcher",
    "compile_filter",
    "resolve_field",
    "MessageIdSequence",
    "Outbox",
    "ListenerRegistry",
    "Transport",
    # Types
    "NO_MATCH",
    "Entity",
    "ExactMatch",
    "Handshake",
    "MatchResult",
    "PatternMatch",
    "PresenceCheck",
    "Unsatisfiable",
]
