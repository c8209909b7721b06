"""Permission checks for chat-wide settings."""

import logging

from telegram import Update
from telegram.constants import ChatMemberStatus, ChatType
from telegram.error import TelegramError
from telegram.ext import ContextTypes

logger = logging.getLogger(__name__)

ADMIN_STATUSES = (ChatMemberStatus.ADMINISTRATOR, ChatMemberStatus.OWNER)


async def is_user_admin(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    """Check whether the sender administers the current group.

    Returns False outside groups and supergroups, and when the member lookup
    fails (for example when the bot lacks rights to query members).
    """
    chat = update.effective_chat
    user = update.effective_user
    if chat is None or user is None:
        return False

    if chat.type not in (ChatType.GROUP, ChatType.SUPERGROUP):
        return False

    try:
        member = await context.bot.get_chat_member(chat.id, user.id)
    except TelegramError as e:
        logger.error(f"Error checking admin status in chat {chat.id}: {e}")
        return False

    return member.status in ADMIN_STATUSES


async def can_manage_settings(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    """Private chats are always manageable; groups need an administrator."""
    chat = update.effective_chat
    if chat is not None and chat.type == ChatType.PRIVATE:
        return True
    return await is_user_admin(update, context)
