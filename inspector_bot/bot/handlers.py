"""Telegram bot handlers.

Command handlers translate the chat's session record into settings panels,
the callback handler applies button presses to the record, and the message
handler replies to ordinary messages with an update report. The session store
is taken from ``context.bot_data`` so handlers never depend on a global store.
"""

import html
import logging

from telegram import InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from ..config import config
from ..models import MessageType, SessionData, UserPreferences, ViewPreferences
from ..services.preferences import (
    default_session,
    detect_message_type,
    ensure_complete_session,
    get_effective_preferences,
    should_process_message_type,
)
from ..services.session_store import SessionStore, session_key
from ..services.settings_codec import apply_imported_settings, export_settings, import_settings
from .callbacks import (
    AdminAction,
    CallbackAction,
    FilterAction,
    PrivacyAction,
    ToggleAction,
    UserPrefsAction,
    ViewModeAction,
    parse_callback_data,
)
from .keyboards import admin_keyboard, filter_keyboard, privacy_keyboard, userprefs_keyboard, view_keyboard
from .messages import (
    ADMIN_MESSAGE,
    ADMIN_ONLY_ALERT,
    ADMIN_ONLY_MESSAGE,
    ADMIN_RESET_MESSAGE,
    BOT_DISABLED_MESSAGE,
    BOT_ENABLED_MESSAGE,
    EXPORT_MESSAGE,
    FILTER_MESSAGE,
    FILTER_SAVED_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    HELP_HEADER,
    HELP_LINE,
    IMPORT_INVALID_MESSAGE,
    IMPORT_SUCCESS_MESSAGE,
    IMPORT_USAGE_MESSAGE,
    MODE_MESSAGE,
    PRIVACY_MESSAGE,
    SCOPE_CHAT,
    SCOPE_PERSONAL,
    START_MESSAGE,
    STATE_OFF,
    STATE_ON,
    UNKNOWN_ACTION_ALERT,
    USERPREFS_MESSAGE,
    USERPREFS_RESET_MESSAGE,
    USERPREFS_VIEW_MESSAGE,
)
from .origins import parse_origin
from .permissions import can_manage_settings
from .update_formatter import extract_message, update_formatter

logger = logging.getLogger(__name__)

SESSION_STORE_KEY = "session_store"

Panel = tuple[str, InlineKeyboardMarkup | None]


# === SESSION HELPERS ===


def get_session_store(context: ContextTypes.DEFAULT_TYPE) -> SessionStore:
    """Return the store placed in ``bot_data`` at startup."""
    return context.bot_data[SESSION_STORE_KEY]


async def load_session(update: Update, context: ContextTypes.DEFAULT_TYPE) -> SessionData:
    """Load the chat's record, filling anything missing with defaults."""
    chat = update.effective_chat
    if chat is None:
        return default_session()

    record = await get_session_store(context).get(session_key(chat.id))
    return ensure_complete_session(record, chat.type)


async def save_session(update: Update, context: ContextTypes.DEFAULT_TYPE, session: SessionData) -> None:
    chat = update.effective_chat
    if chat is None:
        return
    await get_session_store(context).put(session_key(chat.id), session)


def _user_id(update: Update) -> int | None:
    return update.effective_user.id if update.effective_user else None


def _state(flag: bool) -> str:
    return STATE_ON if flag else STATE_OFF


def _editable_preferences(session: SessionData, user_id: int | None) -> ViewPreferences:
    """Preferences a settings change applies to.

    In per-user mode the sender's own override is edited, created from a
    copy of the chat defaults on first change.
    """
    if not session.use_per_user_preferences or user_id is None:
        return session.view_preferences

    entry = session.user_preferences.get(user_id)
    if entry is None:
        entry = UserPreferences(view_preferences=session.view_preferences.model_copy(deep=True))
        session.user_preferences[user_id] = entry
    return entry.view_preferences


def _scope(session: SessionData, user_id: int | None) -> str:
    if session.use_per_user_preferences and user_id is not None:
        return SCOPE_PERSONAL
    return SCOPE_CHAT


# === PANELS ===


def _mode_panel(session: SessionData, user_id: int | None) -> Panel:
    preferences = get_effective_preferences(session, user_id)
    text = MODE_MESSAGE.format(
        scope=_scope(session, user_id),
        mode=preferences.display_mode.value,
        forward=_state(preferences.show_forward_info),
        author=_state(preferences.show_author_info),
    )
    return text, view_keyboard(preferences)


def _privacy_panel(session: SessionData, user_id: int | None) -> Panel:
    preferences = get_effective_preferences(session, user_id)
    options = preferences.privacy_options
    text = PRIVACY_MESSAGE.format(
        scope=_scope(session, user_id),
        user_ids=_state(options.mask_user_ids),
        chat_ids=_state(options.mask_chat_ids),
        phones=_state(options.mask_phone_numbers),
    )
    return text, privacy_keyboard(preferences)


def _filter_panel(session: SessionData) -> Panel:
    text = FILTER_MESSAGE.format(respond_to_all=_state(session.message_filters.respond_to_all))
    return text, filter_keyboard(session.message_filters)


def _userprefs_panel(session: SessionData, user_id: int | None) -> Panel:
    text = USERPREFS_MESSAGE.format(
        mode=_state(session.use_per_user_preferences),
        has_own=_state(user_id is not None and user_id in session.user_preferences),
    )
    return text, userprefs_keyboard(session)


def _userprefs_view_panel(session: SessionData, user_id: int | None) -> Panel:
    preferences = get_effective_preferences(session, user_id)
    text = USERPREFS_VIEW_MESSAGE.format(
        mode=preferences.display_mode.value,
        forward=_state(preferences.show_forward_info),
        author=_state(preferences.show_author_info),
        user_ids=_state(preferences.privacy_options.mask_user_ids),
        chat_ids=_state(preferences.privacy_options.mask_chat_ids),
    )
    return text, userprefs_keyboard(session)


def _admin_panel(session: SessionData) -> Panel:
    text = ADMIN_MESSAGE.format(
        enabled=_state(session.enabled),
        per_user=_state(session.use_per_user_preferences),
        overrides=len(session.user_preferences),
    )
    return text, admin_keyboard(session)


def _export_panel(session: SessionData) -> Panel:
    return EXPORT_MESSAGE.format(command=html.escape(export_settings(session), quote=False)), None


async def _reply(update: Update, panel: Panel) -> None:
    message = update.effective_message
    if message is None:
        return
    text, markup = panel
    await message.reply_text(text, parse_mode=ParseMode.HTML, reply_markup=markup)


# === COMMANDS ===


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command."""
    await _reply(update, (START_MESSAGE, None))


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command with the configured command menu."""
    lines = [HELP_HEADER]
    lines.extend(
        HELP_LINE.format(command=item["command"], description=html.escape(item["description"], quote=False))
        for item in config.commands
    )
    await _reply(update, ("\n".join(lines), None))


async def toggle_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /toggle command: enable or disable the bot in this chat."""
    if not await can_manage_settings(update, context):
        await _reply(update, (ADMIN_ONLY_MESSAGE, None))
        return

    session = await load_session(update, context)
    session.enabled = not session.enabled
    await save_session(update, context, session)

    logger.info("Bot %s in chat %s", "enabled" if session.enabled else "disabled", update.effective_chat.id)
    await _reply(update, (BOT_ENABLED_MESSAGE if session.enabled else BOT_DISABLED_MESSAGE, None))


async def mode_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /mode command: display mode and section toggles."""
    session = await load_session(update, context)
    await _reply(update, _mode_panel(session, _user_id(update)))


async def filter_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /filter command: message type filters."""
    session = await load_session(update, context)
    await _reply(update, _filter_panel(session))


async def privacy_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /privacy command: masking toggles."""
    session = await load_session(update, context)
    await _reply(update, _privacy_panel(session, _user_id(update)))


async def userprefs_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /userprefs command: per-user mode and personal overrides."""
    session = await load_session(update, context)
    await _reply(update, _userprefs_panel(session, _user_id(update)))


async def admin_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /admin command: chat administration panel."""
    if not await can_manage_settings(update, context):
        await _reply(update, (ADMIN_ONLY_MESSAGE, None))
        return

    session = await load_session(update, context)
    await _reply(update, _admin_panel(session))


async def export_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export command."""
    session = await load_session(update, context)
    await _reply(update, _export_panel(session))


async def import_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /import <token> command."""
    if not context.args:
        await _reply(update, (IMPORT_USAGE_MESSAGE, None))
        return

    imported = import_settings(context.args[0])
    if imported is None:
        logger.info("Rejected settings import in chat %s", update.effective_chat.id if update.effective_chat else None)
        await _reply(update, (IMPORT_INVALID_MESSAGE, None))
        return

    session = await load_session(update, context)
    apply_imported_settings(session, imported)
    await save_session(update, context, session)
    await _reply(update, (IMPORT_SUCCESS_MESSAGE, None))


# === CALLBACKS ===


def _requires_admin(action: CallbackAction) -> bool:
    match action:
        case AdminAction() | UserPrefsAction("toggle"):
            return True
        case _:
            return False


def apply_action(
    action: CallbackAction,
    session: SessionData,
    user_id: int | None,
    chat_type: str | None = None,
) -> tuple[SessionData, Panel]:
    """Apply a button press to the session.

    Args:
        action: Decoded callback action.
        session: Chat record, mutated in place except on reset.
        user_id: Id of the user who pressed the button.
        chat_type: Chat type, used for the defaults on reset.

    Returns:
        The resulting session and the panel to show in place of the old one.
    """
    match action:
        case ViewModeAction(mode):
            _editable_preferences(session, user_id).display_mode = mode
            return session, _mode_panel(session, user_id)
        case ToggleAction("forward"):
            preferences = _editable_preferences(session, user_id)
            preferences.show_forward_info = not preferences.show_forward_info
            return session, _mode_panel(session, user_id)
        case ToggleAction("author"):
            preferences = _editable_preferences(session, user_id)
            preferences.show_author_info = not preferences.show_author_info
            return session, _mode_panel(session, user_id)
        case PrivacyAction("user_ids"):
            options = _editable_preferences(session, user_id).privacy_options
            options.mask_user_ids = not options.mask_user_ids
            return session, _privacy_panel(session, user_id)
        case PrivacyAction("chat_ids"):
            options = _editable_preferences(session, user_id).privacy_options
            options.mask_chat_ids = not options.mask_chat_ids
            return session, _privacy_panel(session, user_id)
        case FilterAction("save"):
            return session, (FILTER_SAVED_MESSAGE, None)
        case FilterAction("all"):
            filters = session.message_filters
            filters.respond_to_all = not filters.respond_to_all
            return session, _filter_panel(session)
        case FilterAction(MessageType() as message_type):
            enabled_types = session.message_filters.enabled_types
            enabled_types[message_type] = not enabled_types.get(message_type, True)
            return session, _filter_panel(session)
        case UserPrefsAction("toggle"):
            session.use_per_user_preferences = not session.use_per_user_preferences
            return session, _userprefs_panel(session, user_id)
        case UserPrefsAction("view"):
            return session, _userprefs_view_panel(session, user_id)
        case UserPrefsAction("reset"):
            if user_id is not None:
                session.user_preferences.pop(user_id, None)
            return session, (USERPREFS_RESET_MESSAGE, userprefs_keyboard(session))
        case AdminAction("toggle"):
            session.enabled = not session.enabled
            return session, _admin_panel(session)
        case AdminAction("userprefs"):
            session.use_per_user_preferences = not session.use_per_user_preferences
            return session, _admin_panel(session)
        case AdminAction("filters"):
            return session, _filter_panel(session)
        case AdminAction("export"):
            return session, _export_panel(session)
        case AdminAction("reset"):
            fresh = default_session(chat_type)
            return fresh, (ADMIN_RESET_MESSAGE, admin_keyboard(fresh))
        case _:
            return session, (UNKNOWN_ACTION_ALERT, None)


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle inline keyboard button presses."""
    query = update.callback_query
    if query is None:
        return

    action = parse_callback_data(query.data)
    if action is None:
        logger.warning(f"Unknown callback data: {query.data!r}")
        await query.answer(UNKNOWN_ACTION_ALERT, show_alert=True)
        return

    if _requires_admin(action) and not await can_manage_settings(update, context):
        await query.answer(ADMIN_ONLY_ALERT, show_alert=True)
        return

    chat_type = update.effective_chat.type if update.effective_chat else None
    session = await load_session(update, context)
    session, (text, markup) = apply_action(action, session, _user_id(update), chat_type)
    await save_session(update, context, session)

    await query.answer()
    try:
        await query.edit_message_text(text, parse_mode=ParseMode.HTML, reply_markup=markup)
    except BadRequest as e:
        # Pressing a button that leaves the panel unchanged.
        if "not modified" not in str(e).lower():
            raise
        logger.debug("Panel unchanged after %s", action)


# === MESSAGES ===


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Reply to an ordinary message with its update report.

    Silent when the bot is disabled in the chat or the message type is
    filtered out. Any failure is logged and answered with an apology.
    """
    message = update.effective_message
    chat = update.effective_chat
    if message is None or chat is None:
        return

    try:
        session = await load_session(update, context)
        if not session.enabled:
            return

        payload = update.to_dict()
        message_data = extract_message(payload)

        message_type = detect_message_type(message_data)
        if message_type is not None and not should_process_message_type(session.message_filters, message_type):
            logger.debug("Skipping %s message in chat %s", message_type.value, chat.id)
            return

        user_id = _user_id(update)
        preferences = get_effective_preferences(session, user_id)
        origin = parse_origin(message_data.get("forward_origin"))

        report = update_formatter.render(payload, preferences, author_id=user_id, forward_origin=origin)
        await message.reply_text(report, parse_mode=ParseMode.HTML)

    except Exception as e:
        logger.error(f"Error processing message in chat {chat.id}: {e}", exc_info=True)
        await message.reply_text(GENERIC_ERROR_MESSAGE)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors that escaped a handler."""
    logger.error("Unhandled error while processing an update", exc_info=context.error)
