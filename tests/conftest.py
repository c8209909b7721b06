"""Global test configuration and fixtures.

Provides shared fixtures for all test levels: sample update payloads, session
records, an in-memory session store and mocked Telegram update/context
objects. Ensures test isolation and consistency.
"""

import os
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from inspector_bot.bot.handlers import SESSION_STORE_KEY
from inspector_bot.services.session_store import MemorySessionStore

# Test constants
TEST_BOT_TOKEN = os.getenv("TEST_BOT_TOKEN", "123456:test_bot_token_placeholder")
TEST_USER_ID = 123456789
TEST_PRIVATE_CHAT_ID = 123456789
TEST_GROUP_CHAT_ID = -1001234567890


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Setup test environment variables for all tests."""
    monkeypatch.setenv("BOT_TOKEN", TEST_BOT_TOKEN)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("WEBHOOK_DOMAIN", raising=False)


@pytest.fixture
def text_update() -> dict[str, Any]:
    """Private chat text message as returned by ``Update.to_dict()``."""
    return {
        "update_id": 500,
        "message": {
            "message_id": 42,
            "date": 1718000000,
            "chat": {"id": TEST_PRIVATE_CHAT_ID, "type": "private", "first_name": "Ada"},
            "from": {"id": TEST_USER_ID, "is_bot": False, "first_name": "Ada"},
            "text": "hello there",
        },
    }


@pytest.fixture
def forwarded_update() -> dict[str, Any]:
    """Group message forwarded from a channel."""
    return {
        "update_id": 501,
        "message": {
            "message_id": 77,
            "date": 1718000100,
            "chat": {"id": TEST_GROUP_CHAT_ID, "type": "supergroup", "title": "Testers"},
            "from": {"id": TEST_USER_ID, "is_bot": False, "first_name": "Ada"},
            "text": "news",
            "forward_origin": {
                "type": "channel",
                "date": 1717999000,
                "chat": {"id": -1009876543210, "type": "channel", "title": "News <daily>"},
                "message_id": 12,
            },
        },
    }


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


def make_update(
    chat_type: str = "private",
    chat_id: int = TEST_PRIVATE_CHAT_ID,
    user_id: int | None = TEST_USER_ID,
    payload: dict[str, Any] | None = None,
    args: list[str] | None = None,
) -> MagicMock:
    """Build a mocked PTB ``Update`` with an effective chat, user and message."""
    update = MagicMock()
    update.effective_chat.id = chat_id
    update.effective_chat.type = chat_type
    if user_id is None:
        update.effective_user = None
    else:
        update.effective_user.id = user_id
    update.effective_message.reply_text = AsyncMock()
    update.to_dict.return_value = payload or {}
    update.callback_query = None
    return update


@pytest.fixture
def mock_context(session_store):
    """Mock handler context holding the in-memory session store."""
    context = MagicMock()
    context.bot_data = {SESSION_STORE_KEY: session_store}
    context.bot.get_chat_member = AsyncMock()
    context.args = []
    return context
