"""Inline keyboard callback actions.

Callback data strings (``view_raw``, ``filter_photo``, ``admin_export`` and so
on) are decoded once into small action objects; handlers dispatch on those
with ``match`` instead of matching strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal, TypeAlias

from ..models import DisplayMode, MessageType

ToggleTarget = Literal["forward", "author"]
PrivacyTarget = Literal["user_ids", "chat_ids"]
FilterControl = Literal["all", "save"]
UserPrefsOperation = Literal["toggle", "view", "reset"]
AdminOperation = Literal["toggle", "export", "reset", "userprefs", "filters"]

TOGGLE_TARGETS: Final[frozenset[str]] = frozenset({"forward", "author"})
PRIVACY_TARGETS: Final[frozenset[str]] = frozenset({"user_ids", "chat_ids"})
FILTER_CONTROLS: Final[frozenset[str]] = frozenset({"all", "save"})
USERPREFS_OPERATIONS: Final[frozenset[str]] = frozenset({"toggle", "view", "reset"})
ADMIN_OPERATIONS: Final[frozenset[str]] = frozenset({"toggle", "export", "reset", "userprefs", "filters"})


@dataclass(frozen=True)
class ViewModeAction:
    mode: DisplayMode

    def encode(self) -> str:
        return f"view_{self.mode.value}"


@dataclass(frozen=True)
class ToggleAction:
    target: ToggleTarget

    def encode(self) -> str:
        return f"toggle_{self.target}"


@dataclass(frozen=True)
class PrivacyAction:
    target: PrivacyTarget

    def encode(self) -> str:
        return f"privacy_{self.target}"


@dataclass(frozen=True)
class FilterAction:
    """Toggle one message type, toggle respond-to-all, or close the panel."""

    target: MessageType | FilterControl

    def encode(self) -> str:
        target = self.target.value if isinstance(self.target, MessageType) else self.target
        return f"filter_{target}"


@dataclass(frozen=True)
class UserPrefsAction:
    operation: UserPrefsOperation

    def encode(self) -> str:
        return f"userprefs_{self.operation}"


@dataclass(frozen=True)
class AdminAction:
    operation: AdminOperation

    def encode(self) -> str:
        return f"admin_{self.operation}"


CallbackAction: TypeAlias = ViewModeAction | ToggleAction | PrivacyAction | FilterAction | UserPrefsAction | AdminAction


def parse_callback_data(data: str | None) -> CallbackAction | None:
    """Decode callback data into an action.

    Args:
        data: ``callback_data`` of the pressed button.

    Returns:
        The action, or None for data this bot never produces.
    """
    if not data or "_" not in data:
        return None

    prefix, _, value = data.partition("_")
    match prefix:
        case "view" if value in {mode.value for mode in DisplayMode}:
            return ViewModeAction(DisplayMode(value))
        case "toggle" if value in TOGGLE_TARGETS:
            return ToggleAction(value)  # type: ignore[arg-type]
        case "privacy" if value in PRIVACY_TARGETS:
            return PrivacyAction(value)  # type: ignore[arg-type]
        case "filter" if value in FILTER_CONTROLS:
            return FilterAction(value)  # type: ignore[arg-type]
        case "filter" if value in {message_type.value for message_type in MessageType}:
            return FilterAction(MessageType(value))
        case "userprefs" if value in USERPREFS_OPERATIONS:
            return UserPrefsAction(value)  # type: ignore[arg-type]
        case "admin" if value in ADMIN_OPERATIONS:
            return AdminAction(value)  # type: ignore[arg-type]
        case _:
            return None
