"""Telegram bot message templates and constants.

Contains all user-facing message templates. Replies are sent with the HTML
parse mode, so every template here is HTML and every value substituted into
one must be escaped first.
"""

# Bot commands and descriptions
START_MESSAGE = (
    "👋 <b>Hi! I show what Telegram sends me about your messages.</b>\n\n"
    "Send or forward any message and I will reply with its IDs, the original "
    "sender of forwards and the raw update JSON.\n\n"
    "Use /help to see all commands."
)

HELP_HEADER = "<b>Available commands</b>"
HELP_LINE = "/{command} - {description}"

# Update report sections
FORWARD_HEADER = "<b>Forward info</b>"
FORWARD_USER_LINE = "Forwarded from user: {name} (<code>{user_id}</code>)"
FORWARD_USERNAME_LINE = "Username: @{username}"
FORWARD_HIDDEN_USER_LINE = "Forwarded from hidden user: <i>{name}</i>"
FORWARD_CHAT_LINE = "Forwarded from chat: {title} (<code>{chat_id}</code>)"
FORWARD_CHANNEL_LINE = "Forwarded from channel: {title} (<code>{chat_id}</code>)"
FORWARD_CHANNEL_MESSAGE_LINE = "Original message ID: <code>{message_id}</code>"
FORWARD_SIGNATURE_LINE = "Signed by: <i>{signature}</i>"
FORWARD_UNKNOWN_LINE = "Forwarded from an unknown origin: <code>{origin_type}</code>"
FORWARD_DATE_LINE = "Original date: <code>{date}</code>"

AUTHOR_HEADER = "<b>Author info</b>"
AUTHOR_LINE = "Your user ID: <code>{user_id}</code>"

COMPACT_TYPE_LINE = "<b>Type:</b> {label}"
COMPACT_CONTENT_LINE = "<b>Content:</b> <i>{content}</i>"
COMPACT_MESSAGE_ID_LINE = "<b>Message ID:</b> <code>{message_id}</code>"
COMPACT_CHAT_ID_LINE = "<b>Chat ID:</b> <code>{chat_id}</code>"
COMPACT_HINT = "<i>Use /mode to switch between compact, full and raw views.</i>"

RAW_HEADER = "<b>Raw update data:</b>"
RAW_BLOCK = '<pre><code class="language-json">{json}</code></pre>'
TRUNCATION_MARK = "…"

# Settings panels
MODE_MESSAGE = (
    "<b>View settings</b> ({scope})\n\n"
    "Display mode: <code>{mode}</code>\n"
    "Forward info: {forward}\n"
    "Author info: {author}"
)
FILTER_MESSAGE = (
    "<b>Message filters</b>\n\n"
    "Respond to all messages: {respond_to_all}\n"
    "When off, only the checked types get a report."
)
FILTER_SAVED_MESSAGE = "✅ Message filters saved."
PRIVACY_MESSAGE = (
    "<b>Privacy</b> ({scope})\n\n"
    "Mask user IDs: {user_ids}\n"
    "Mask chat IDs: {chat_ids}\n"
    "Phone numbers: {phones}"
)
USERPREFS_MESSAGE = (
    "<b>Personal preferences</b>\n\n"
    "Per-user mode in this chat: {mode}\n"
    "You have personal settings: {has_own}"
)
USERPREFS_VIEW_MESSAGE = (
    "<b>Your effective settings</b>\n\n"
    "Display mode: <code>{mode}</code>\n"
    "Forward info: {forward}\n"
    "Author info: {author}\n"
    "Mask user IDs: {user_ids}\n"
    "Mask chat IDs: {chat_ids}"
)
USERPREFS_RESET_MESSAGE = "♻️ Your personal settings were removed; chat defaults apply."
ADMIN_MESSAGE = (
    "<b>Admin panel</b>\n\n"
    "Bot enabled: {enabled}\n"
    "Per-user mode: {per_user}\n"
    "Personal overrides: {overrides}"
)
ADMIN_RESET_MESSAGE = "♻️ Chat settings were reset to defaults."

SCOPE_CHAT = "chat defaults"
SCOPE_PERSONAL = "your personal settings"

STATE_ON = "✅ on"
STATE_OFF = "❌ off"

# Toggle / enable
BOT_ENABLED_MESSAGE = "✅ The bot is now <b>enabled</b> in this chat."
BOT_DISABLED_MESSAGE = "⏸ The bot is now <b>disabled</b> in this chat."

# Export / import
EXPORT_MESSAGE = (
    "<b>Settings export</b>\n\n"
    "Send this command in another chat to copy the settings:\n"
    "<code>{command}</code>"
)
IMPORT_USAGE_MESSAGE = "Usage: <code>/import &lt;token&gt;</code>"
IMPORT_INVALID_MESSAGE = "❌ This token is not a valid settings export."
IMPORT_SUCCESS_MESSAGE = "✅ Settings imported."

# Errors
ADMIN_ONLY_MESSAGE = "⛔ Only chat administrators can do this."
ADMIN_ONLY_ALERT = "Only chat administrators can do this."
GENERIC_ERROR_MESSAGE = "❌ Sorry, something went wrong while processing this message."
UNKNOWN_ACTION_ALERT = "This button is no longer supported."

# Button labels
BUTTON_COMPACT = "Compact"
BUTTON_FULL = "Full"
BUTTON_RAW = "Raw"
BUTTON_FORWARD = "Forward info"
BUTTON_AUTHOR = "Author info"
BUTTON_MASK_USER_IDS = "Mask user IDs"
BUTTON_MASK_CHAT_IDS = "Mask chat IDs"
BUTTON_RESPOND_ALL = "Respond to all"
BUTTON_SAVE = "💾 Save"
BUTTON_USERPREFS_TOGGLE = "Per-user mode"
BUTTON_USERPREFS_VIEW = "👁 My settings"
BUTTON_USERPREFS_RESET = "♻️ Reset mine"
BUTTON_ADMIN_TOGGLE = "Bot enabled"
BUTTON_ADMIN_EXPORT = "📤 Export"
BUTTON_ADMIN_RESET = "♻️ Reset chat"
BUTTON_ADMIN_USERPREFS = "Per-user mode"
BUTTON_ADMIN_FILTERS = "🔎 Filters"
CHECK_ON = "✅"
CHECK_OFF = "⬜"
