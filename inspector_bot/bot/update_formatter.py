"""Update report formatting.

Turns an update payload plus the preferences that apply to the sender into
the HTML report sent back to the chat. Rendering is pure: no I/O, no session
access.
"""

from __future__ import annotations

import html
import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Final

from telegram.constants import MessageLimit

from ..models import DisplayMode, PrivacyOptions, ViewPreferences
from ..services.privacy import apply_privacy_mask
from .messages import (
    AUTHOR_HEADER,
    AUTHOR_LINE,
    COMPACT_CHAT_ID_LINE,
    COMPACT_CONTENT_LINE,
    COMPACT_HINT,
    COMPACT_MESSAGE_ID_LINE,
    COMPACT_TYPE_LINE,
    FORWARD_CHANNEL_LINE,
    FORWARD_CHANNEL_MESSAGE_LINE,
    FORWARD_CHAT_LINE,
    FORWARD_DATE_LINE,
    FORWARD_HEADER,
    FORWARD_HIDDEN_USER_LINE,
    FORWARD_SIGNATURE_LINE,
    FORWARD_UNKNOWN_LINE,
    FORWARD_USER_LINE,
    FORWARD_USERNAME_LINE,
    RAW_BLOCK,
    RAW_HEADER,
    TRUNCATION_MARK,
)
from .origins import AnyMessageOrigin, ChannelOrigin, ChatOrigin, HiddenUserOrigin, UnknownOrigin, UserOrigin

logger = logging.getLogger(__name__)

MESSAGE_KEYS: Final[tuple[str, ...]] = (
    "message",
    "edited_message",
    "channel_post",
    "edited_channel_post",
)

# Label lookup order for the compact view.
TYPE_LABELS: Final[tuple[tuple[str, str], ...]] = (
    ("text", "Text"),
    ("photo", "Photo"),
    ("video", "Video"),
    ("document", "Document"),
    ("sticker", "Sticker"),
)
OTHER_LABEL: Final = "Other"

CONTENT_PREVIEW_LENGTH: Final = 100
# Upper bound for the escaped JSON; the reply as a whole stays within
# MessageLimit.MAX_TEXT_LENGTH.
MAX_JSON_LENGTH: Final = 3000
DATE_FORMAT: Final = "%Y-%m-%d %H:%M:%S UTC"


def extract_message(update: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the message-like object carried by an update payload."""
    for key in MESSAGE_KEYS:
        message = update.get(key)
        if message:
            return message
    return {}


def _escape(value: Any) -> str:
    return html.escape(str(value), quote=False)


def _clip_escaped(text: str, limit: int) -> str:
    """Escape ``text`` and cut it so the escaped form fits ``limit`` characters."""
    escaped = _escape(text)
    if len(escaped) <= limit:
        return escaped

    logger.debug("Clipping update JSON of %d characters", len(escaped))
    budget = max(limit - len(TRUNCATION_MARK), 0)
    pieces: list[str] = []
    size = 0
    for char in text:
        piece = _escape(char)
        if size + len(piece) > budget:
            break
        pieces.append(piece)
        size += len(piece)
    return "".join(pieces) + TRUNCATION_MARK


def _full_name(user: Mapping[str, Any]) -> str:
    parts = [user.get("first_name"), user.get("last_name")]
    return " ".join(part for part in parts if part) or "?"


def _format_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, UTC).strftime(DATE_FORMAT)


class UpdateFormatter:
    """Renders update reports according to view preferences."""

    def render(
        self,
        update: Mapping[str, Any],
        preferences: ViewPreferences,
        author_id: int | None = None,
        forward_origin: AnyMessageOrigin | None = None,
    ) -> str:
        """Render the report for one update.

        Sections appear in a fixed order: forward info, author info, then the
        body selected by the display mode. The privacy masks run over every
        section, and the JSON block is clipped after masking so the masked
        report fits in one Telegram message.

        Args:
            update: Update payload as returned by ``Update.to_dict()``.
            preferences: Effective preferences for the sender.
            author_id: Telegram id of the sender, if known.
            forward_origin: Parsed forward origin, if the message is a forward.

        Returns:
            HTML report.
        """
        sections: list[str] = []

        if forward_origin is not None and preferences.show_forward_info:
            sections.append(self.format_forward_info(forward_origin))

        if author_id is not None and preferences.show_author_info:
            sections.append(f"{AUTHOR_HEADER}\n{AUTHOR_LINE.format(user_id=_escape(author_id))}")

        mode = preferences.display_mode
        if mode is not DisplayMode.RAW:
            sections.append(self.format_compact(update))

        options = preferences.privacy_options
        text = apply_privacy_mask("\n\n".join(sections), options)
        if mode is DisplayMode.COMPACT:
            return text

        separator = "\n\n" if text else ""
        max_length = MessageLimit.MAX_TEXT_LENGTH - len(text) - len(separator)
        return text + separator + self.format_raw(update, options, max_length)

    def format_forward_info(self, origin: AnyMessageOrigin) -> str:
        """Describe the original sender of a forwarded message."""
        lines = [FORWARD_HEADER]

        match origin:
            case UserOrigin(sender_user=user):
                lines.append(
                    FORWARD_USER_LINE.format(name=_escape(_full_name(user)), user_id=_escape(user.get("id", "?")))
                )
                if user.get("username"):
                    lines.append(FORWARD_USERNAME_LINE.format(username=_escape(user["username"])))
            case HiddenUserOrigin(sender_user_name=name):
                lines.append(FORWARD_HIDDEN_USER_LINE.format(name=_escape(name or "?")))
            case ChatOrigin(sender_chat=chat, author_signature=signature):
                lines.append(
                    FORWARD_CHAT_LINE.format(title=_escape(chat.get("title") or "?"), chat_id=_escape(chat.get("id", "?")))
                )
                if signature:
                    lines.append(FORWARD_SIGNATURE_LINE.format(signature=_escape(signature)))
            case ChannelOrigin(chat=chat, message_id=message_id, author_signature=signature):
                lines.append(
                    FORWARD_CHANNEL_LINE.format(title=_escape(chat.get("title") or "?"), chat_id=_escape(chat.get("id", "?")))
                )
                if message_id is not None:
                    lines.append(FORWARD_CHANNEL_MESSAGE_LINE.format(message_id=_escape(message_id)))
                if signature:
                    lines.append(FORWARD_SIGNATURE_LINE.format(signature=_escape(signature)))
            case UnknownOrigin(raw_type=raw_type):
                lines.append(FORWARD_UNKNOWN_LINE.format(origin_type=_escape(raw_type)))
            case _:
                lines.append(FORWARD_UNKNOWN_LINE.format(origin_type=_escape(origin.type)))

        if origin.date:
            lines.append(FORWARD_DATE_LINE.format(date=_format_date(origin.date)))

        return "\n".join(lines)

    def format_compact(self, update: Mapping[str, Any]) -> str:
        """Summarise the message: type, content preview, ids and a usage hint."""
        message = extract_message(update)

        label = next((name for key, name in TYPE_LABELS if message.get(key)), OTHER_LABEL)
        lines = [COMPACT_TYPE_LINE.format(label=label)]

        content = message.get("text") or message.get("caption")
        if content:
            preview = content[:CONTENT_PREVIEW_LENGTH]
            if len(content) > CONTENT_PREVIEW_LENGTH:
                preview += TRUNCATION_MARK
            lines.append(COMPACT_CONTENT_LINE.format(content=_escape(preview)))

        chat = message.get("chat") or {}
        lines.append(COMPACT_MESSAGE_ID_LINE.format(message_id=_escape(message.get("message_id", "?"))))
        lines.append(COMPACT_CHAT_ID_LINE.format(chat_id=_escape(chat.get("id", "?"))))

        return "\n".join(lines) + f"\n\n{COMPACT_HINT}"

    def format_raw(
        self,
        update: Mapping[str, Any],
        privacy_options: PrivacyOptions | None = None,
        max_length: int = MessageLimit.MAX_TEXT_LENGTH,
    ) -> str:
        """Dump the update as indented JSON inside a code block.

        The JSON is masked first and then clipped, so the whole block, markup
        included, is at most ``max_length`` characters.
        """
        dumped = json.dumps(update, indent=2, ensure_ascii=False, default=str)
        dumped = apply_privacy_mask(dumped, privacy_options)

        frame = len(RAW_HEADER) + 1 + len(RAW_BLOCK.format(json=""))
        limit = min(MAX_JSON_LENGTH, max_length - frame)
        return f"{RAW_HEADER}\n{RAW_BLOCK.format(json=_clip_escaped(dumped, limit))}"


# Global update formatter instance
update_formatter = UpdateFormatter()
