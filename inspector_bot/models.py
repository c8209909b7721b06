"""Data models for the inspector bot.

Defines Pydantic models for the per-chat session record and the display
preferences nested inside it. Field names are snake_case in Python and
camelCase in the persisted JSON shape (``viewPreferences``,
``respondToAll`` and so on), so records written by the store can be read back
by ``model_validate`` without any manual key mapping.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DisplayMode(str, Enum):
    """How an update report is rendered."""

    COMPACT = "compact"
    FULL = "full"
    RAW = "raw"


class MessageType(str, Enum):
    """Closed set of message kinds that can be filtered per chat."""

    TEXT = "text"
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
    AUDIO = "audio"
    STICKER = "sticker"
    ANIMATION = "animation"
    VOICE = "voice"
    POLL = "poll"
    LOCATION = "location"
    CONTACT = "contact"
    FORWARD = "forward"


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        """Dump the model in its persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True)


class PrivacyOptions(CamelModel):
    """Which numeric identifiers are masked in rendered output.

    Attributes:
        mask_user_ids: Wrap 8-10 digit runs (user ids) in mask markers.
        mask_phone_numbers: Replace everything after the country code.
        mask_chat_ids: Wrap ``-100...`` supergroup/channel ids in mask markers.
    """

    mask_user_ids: bool
    mask_phone_numbers: bool
    mask_chat_ids: bool


class ViewPreferences(CamelModel):
    """Display preferences for one scope (whole chat or a single user).

    Attributes:
        display_mode: Compact summary, summary plus JSON, or JSON only.
        show_forward_info: Whether to render the forward-origin block.
        show_author_info: Whether to render the author block.
        privacy_options: Masks applied to the final text.
    """

    display_mode: DisplayMode
    show_forward_info: bool
    show_author_info: bool
    privacy_options: PrivacyOptions


class MessageFilters(CamelModel):
    """Per-chat message type gate.

    When ``respond_to_all`` is true the ``enabled_types`` entries are kept but
    ignored for gating.
    """

    enabled_types: dict[MessageType, bool] = Field(default_factory=dict)
    respond_to_all: bool


class UserPreferences(CamelModel):
    """View preferences of a user who diverged from the chat defaults."""

    view_preferences: ViewPreferences


class SessionData(CamelModel):
    """Per-chat record held by the session store.

    Attributes:
        enabled: Whether the bot answers ordinary messages in this chat.
        view_preferences: Chat-wide display preferences.
        message_filters: Which message types get a report.
        use_per_user_preferences: Whether user overrides are honoured.
        user_preferences: Sparse map of user id to override.
    """

    enabled: bool
    view_preferences: ViewPreferences
    message_filters: MessageFilters
    use_per_user_preferences: bool
    user_preferences: dict[int, UserPreferences] = Field(default_factory=dict)


class ImportedSettings(CamelModel):
    """Settings subset recovered from an export token."""

    view_preferences: ViewPreferences | None = None
    message_filters: MessageFilters | None = None
    use_per_user_preferences: bool | None = None
