"""Forward-origin classification.

Telegram describes who originally sent a forwarded message with a
``forward_origin`` object tagged by ``type``. Four tags are known today; any
other tag (future API additions) is kept as an ``UnknownOrigin`` so that every
forwarded message lands in exactly one variant.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Final, TypeAlias

KNOWN_ORIGIN_TYPES: Final[frozenset[str]] = frozenset({"user", "hidden_user", "chat", "channel"})


@dataclass(frozen=True)
class UserOrigin:
    """Forwarded from a user who allows linking to their account."""

    type: ClassVar[str] = "user"
    date: int
    sender_user: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HiddenUserOrigin:
    """Forwarded from a user who hides their account."""

    type: ClassVar[str] = "hidden_user"
    date: int
    sender_user_name: str = ""


@dataclass(frozen=True)
class ChatOrigin:
    """Message originally sent on behalf of a chat."""

    type: ClassVar[str] = "chat"
    date: int
    sender_chat: dict[str, Any] = field(default_factory=dict)
    author_signature: str | None = None


@dataclass(frozen=True)
class ChannelOrigin:
    """Message originally posted in a channel."""

    type: ClassVar[str] = "channel"
    date: int
    chat: dict[str, Any] = field(default_factory=dict)
    message_id: int | None = None
    author_signature: str | None = None


@dataclass(frozen=True)
class UnknownOrigin:
    """Origin with a tag this bot does not know."""

    raw_type: str
    date: int = 0

    @property
    def type(self) -> str:
        return self.raw_type


AnyMessageOrigin: TypeAlias = UserOrigin | HiddenUserOrigin | ChatOrigin | ChannelOrigin | UnknownOrigin


def parse_origin(payload: Mapping[str, Any] | None) -> AnyMessageOrigin | None:
    """Build the origin variant for a ``forward_origin`` payload.

    Args:
        payload: The ``forward_origin`` object of a message, or None.

    Returns:
        The matching variant, None when the message was not forwarded.
    """
    if not payload:
        return None

    date = payload.get("date") or 0
    match payload.get("type"):
        case "user":
            return UserOrigin(date=date, sender_user=dict(payload.get("sender_user") or {}))
        case "hidden_user":
            return HiddenUserOrigin(date=date, sender_user_name=payload.get("sender_user_name") or "")
        case "chat":
            return ChatOrigin(
                date=date,
                sender_chat=dict(payload.get("sender_chat") or {}),
                author_signature=payload.get("author_signature"),
            )
        case "channel":
            return ChannelOrigin(
                date=date,
                chat=dict(payload.get("chat") or {}),
                message_id=payload.get("message_id"),
                author_signature=payload.get("author_signature"),
            )
        case other:
            return UnknownOrigin(raw_type=str(other), date=date)


def is_user_origin(origin: AnyMessageOrigin) -> bool:
    return origin.type == "user"


def is_hidden_user_origin(origin: AnyMessageOrigin) -> bool:
    return origin.type == "hidden_user"


def is_chat_origin(origin: AnyMessageOrigin) -> bool:
    return origin.type == "chat"


def is_channel_origin(origin: AnyMessageOrigin) -> bool:
    return origin.type == "channel"


def is_unknown_origin(origin: AnyMessageOrigin) -> bool:
    """True for any tag outside the four known ones."""
    return origin.type not in KNOWN_ORIGIN_TYPES
