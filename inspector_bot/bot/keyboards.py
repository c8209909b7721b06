"""Inline keyboard layouts for the settings panels."""

from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from ..models import DisplayMode, MessageFilters, MessageType, SessionData, ViewPreferences
from .callbacks import AdminAction, CallbackAction, FilterAction, PrivacyAction, ToggleAction, UserPrefsAction, ViewModeAction
from .messages import (
    BUTTON_ADMIN_EXPORT,
    BUTTON_ADMIN_FILTERS,
    BUTTON_ADMIN_RESET,
    BUTTON_ADMIN_TOGGLE,
    BUTTON_ADMIN_USERPREFS,
    BUTTON_AUTHOR,
    BUTTON_COMPACT,
    BUTTON_FORWARD,
    BUTTON_FULL,
    BUTTON_MASK_CHAT_IDS,
    BUTTON_MASK_USER_IDS,
    BUTTON_RAW,
    BUTTON_RESPOND_ALL,
    BUTTON_SAVE,
    BUTTON_USERPREFS_RESET,
    BUTTON_USERPREFS_TOGGLE,
    BUTTON_USERPREFS_VIEW,
    CHECK_OFF,
    CHECK_ON,
)

MODE_LABELS = {
    DisplayMode.COMPACT: BUTTON_COMPACT,
    DisplayMode.FULL: BUTTON_FULL,
    DisplayMode.RAW: BUTTON_RAW,
}
FILTER_COLUMNS = 3


def _check(flag: bool) -> str:
    return CHECK_ON if flag else CHECK_OFF


def _button(label: str, action: CallbackAction) -> InlineKeyboardButton:
    return InlineKeyboardButton(label, callback_data=action.encode())


def view_keyboard(preferences: ViewPreferences) -> InlineKeyboardMarkup:
    """Display mode selector plus the forward/author toggles."""
    modes = [
        _button(
            f"• {label}" if preferences.display_mode is mode else label,
            ViewModeAction(mode),
        )
        for mode, label in MODE_LABELS.items()
    ]
    toggles = [
        _button(f"{_check(preferences.show_forward_info)} {BUTTON_FORWARD}", ToggleAction("forward")),
        _button(f"{_check(preferences.show_author_info)} {BUTTON_AUTHOR}", ToggleAction("author")),
    ]
    return InlineKeyboardMarkup([modes, toggles])


def privacy_keyboard(preferences: ViewPreferences) -> InlineKeyboardMarkup:
    options = preferences.privacy_options
    return InlineKeyboardMarkup(
        [
            [_button(f"{_check(options.mask_user_ids)} {BUTTON_MASK_USER_IDS}", PrivacyAction("user_ids"))],
            [_button(f"{_check(options.mask_chat_ids)} {BUTTON_MASK_CHAT_IDS}", PrivacyAction("chat_ids"))],
        ]
    )


def filter_keyboard(filters: MessageFilters) -> InlineKeyboardMarkup:
    """One toggle per message type, three per row, then the controls."""
    buttons = [
        _button(
            f"{_check(filters.enabled_types.get(message_type, True))} {message_type.value}",
            FilterAction(message_type),
        )
        for message_type in MessageType
    ]
    rows = [buttons[i : i + FILTER_COLUMNS] for i in range(0, len(buttons), FILTER_COLUMNS)]
    rows.append(
        [
            _button(f"{_check(filters.respond_to_all)} {BUTTON_RESPOND_ALL}", FilterAction("all")),
            _button(BUTTON_SAVE, FilterAction("save")),
        ]
    )
    return InlineKeyboardMarkup(rows)


def userprefs_keyboard(session: SessionData) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                _button(
                    f"{_check(session.use_per_user_preferences)} {BUTTON_USERPREFS_TOGGLE}",
                    UserPrefsAction("toggle"),
                )
            ],
            [
                _button(BUTTON_USERPREFS_VIEW, UserPrefsAction("view")),
                _button(BUTTON_USERPREFS_RESET, UserPrefsAction("reset")),
            ],
        ]
    )


def admin_keyboard(session: SessionData) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                _button(f"{_check(session.enabled)} {BUTTON_ADMIN_TOGGLE}", AdminAction("toggle")),
                _button(
                    f"{_check(session.use_per_user_preferences)} {BUTTON_ADMIN_USERPREFS}",
                    AdminAction("userprefs"),
                ),
            ],
            [
                _button(BUTTON_ADMIN_FILTERS, AdminAction("filters")),
                _button(BUTTON_ADMIN_EXPORT, AdminAction("export")),
            ],
            [_button(BUTTON_ADMIN_RESET, AdminAction("reset"))],
        ]
    )
