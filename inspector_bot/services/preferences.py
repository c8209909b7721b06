"""Preference defaults and resolution.

Builds the default session record for a chat kind, completes partially stored
records against those defaults, picks the preferences that apply to a given
user and decides whether a message type should get a report. Everything here
is pure: functions take and return models, the session store is never touched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..models import (
    DisplayMode,
    MessageFilters,
    MessageType,
    PrivacyOptions,
    SessionData,
    ViewPreferences,
)

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = frozenset({"group", "supergroup", "channel"})
_MESSAGE_TYPE_VALUES = frozenset(message_type.value for message_type in MessageType)

# Checked in order; animations also carry a ``document`` field.
_CONTENT_KEYS: tuple[tuple[str, MessageType], ...] = (
    ("text", MessageType.TEXT),
    ("photo", MessageType.PHOTO),
    ("video", MessageType.VIDEO),
    ("animation", MessageType.ANIMATION),
    ("document", MessageType.DOCUMENT),
    ("audio", MessageType.AUDIO),
    ("sticker", MessageType.STICKER),
    ("voice", MessageType.VOICE),
    ("poll", MessageType.POLL),
    ("location", MessageType.LOCATION),
    ("contact", MessageType.CONTACT),
)


def is_group_chat(chat_type: str | None) -> bool:
    """Return True for chat kinds that get group defaults."""
    return chat_type in GROUP_CHAT_TYPES


def default_message_filters() -> MessageFilters:
    """All message types enabled and responding to everything."""
    return MessageFilters(
        enabled_types={message_type: True for message_type in MessageType},
        respond_to_all=True,
    )


def default_view_preferences(is_group: bool) -> ViewPreferences:
    """Default display preferences for a group or a private scope.

    Groups get the machine-readable raw view; phone numbers are masked
    everywhere.
    """
    return ViewPreferences(
        display_mode=DisplayMode.RAW if is_group else DisplayMode.COMPACT,
        show_forward_info=True,
        show_author_info=True,
        privacy_options=PrivacyOptions(
            mask_user_ids=False,
            mask_phone_numbers=True,
            mask_chat_ids=False,
        ),
    )


def default_session(chat_type: str | None = None) -> SessionData:
    """Create the record used for a chat seen for the first time.

    The bot is opt-out in private chats and opt-in everywhere else.

    Args:
        chat_type: Telegram chat type (private, group, supergroup, channel).

    Returns:
        A fresh SessionData instance.
    """
    return SessionData(
        enabled=chat_type == "private",
        view_preferences=default_view_preferences(is_group_chat(chat_type)),
        message_filters=default_message_filters(),
        use_per_user_preferences=False,
        user_preferences={},
    )


def _merge(default: Any, value: Any) -> Any:
    """Value-or-default merge; ``None`` counts as missing, ``False`` does not."""
    if value is None:
        return default
    if isinstance(default, dict) and isinstance(value, Mapping):
        merged = dict(default)
        for key, item in value.items():
            merged[key] = _merge(default.get(key), item)
        return merged
    return value


def ensure_complete_session(
    partial: SessionData | Mapping[str, Any] | None,
    chat_type: str | None = None,
) -> SessionData:
    """Fill every missing field of a stored record with its default.

    Args:
        partial: Stored record in its persisted (camelCase) shape, an already
            complete SessionData, or None.
        chat_type: Chat type used to pick the defaults.

    Returns:
        A complete SessionData. Applying this function to its own output
        returns an equal record. Filter entries for unknown message types are
        dropped; a record that still does not validate is replaced by the
        defaults.
    """
    defaults = default_session(chat_type).to_record()

    if partial is None:
        return SessionData.model_validate(defaults)

    record = partial.to_record() if isinstance(partial, SessionData) else dict(partial)
    merged = _merge(defaults, record)

    # Each override is completed against the chat kind's default view.
    default_view = defaults["viewPreferences"]
    users = merged.get("userPreferences") or {}
    if isinstance(users, Mapping):
        merged["userPreferences"] = {
            user_id: (
                {"viewPreferences": _merge(default_view, (entry or {}).get("viewPreferences"))}
                if entry is None or isinstance(entry, Mapping)
                else entry
            )
            for user_id, entry in users.items()
        }

    filters = merged.get("messageFilters")
    if isinstance(filters, dict) and isinstance(filters.get("enabledTypes"), Mapping):
        filters["enabledTypes"] = {
            key: value for key, value in filters["enabledTypes"].items() if key in _MESSAGE_TYPE_VALUES
        }

    try:
        return SessionData.model_validate(merged)
    except ValidationError as e:
        logger.warning(f"Discarding invalid session record ({e.error_count()} invalid fields), using defaults")
        return default_session(chat_type)


def get_effective_preferences(session: SessionData, user_id: int | None = None) -> ViewPreferences:
    """Pick the view preferences that apply to ``user_id`` in this chat.

    Per-user overrides only count when the chat has per-user mode on. A user
    without an override gets the chat defaults; no entry is created.
    """
    if not session.use_per_user_preferences or user_id is None:
        return session.view_preferences

    user_prefs = session.user_preferences.get(user_id)
    if user_prefs is None:
        return session.view_preferences
    return user_prefs.view_preferences


def should_process_message_type(
    filters: MessageFilters | Mapping[str, Any] | None,
    message_type: MessageType | str,
) -> bool:
    """Decide whether a message type gets a report.

    Missing information never suppresses a reply: the gate only closes on an
    explicit ``False`` entry while ``respondToAll`` is explicitly ``False``.
    Raw mappings in the persisted shape are accepted for legacy records.
    """
    if filters is None:
        return True

    if isinstance(filters, MessageFilters):
        respond_to_all: Any = filters.respond_to_all
        enabled_types: Mapping[Any, Any] | None = filters.enabled_types
    else:
        respond_to_all = filters.get("respondToAll")
        enabled_types = filters.get("enabledTypes")

    if respond_to_all is not False:
        return True

    if not enabled_types:
        return True

    key = MessageType(message_type)
    enabled = enabled_types.get(key, enabled_types.get(key.value))
    return enabled is not False


def detect_message_type(message: Mapping[str, Any] | None) -> MessageType | None:
    """Classify a message payload for filtering.

    Forwarded messages are classified as ``forward`` regardless of content.

    Returns:
        The message type, or None for messages outside the filterable set
        (service messages and the like).
    """
    if not message:
        return None

    if message.get("forward_origin"):
        return MessageType.FORWARD

    for key, message_type in _CONTENT_KEYS:
        if message.get(key):
            return message_type

    return None
