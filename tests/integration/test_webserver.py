"""Integration tests for the webhook HTTP server."""

import asyncio
from unittest.mock import MagicMock

import pytest
from aiohttp import test_utils
from telegram import Update

from inspector_bot.webserver import HEALTH_TEXT, SECRET_HEADER, create_web_app

from tests.conftest import TEST_BOT_TOKEN

WEBHOOK_PATH = f"/{TEST_BOT_TOKEN}"

UPDATE_PAYLOAD = {
    "update_id": 900,
    "message": {
        "message_id": 1,
        "date": 1718000000,
        "chat": {"id": 5, "type": "private", "first_name": "Ada"},
        "text": "hi",
    },
}


def _application() -> MagicMock:
    application = MagicMock()
    application.bot = None
    application.update_queue = asyncio.Queue()
    return application


class TestWebhookServer:
    @pytest.mark.asyncio
    async def test_health_check_on_any_path(self) -> None:
        web_app = create_web_app(_application(), WEBHOOK_PATH)

        async with test_utils.TestClient(test_utils.TestServer(web_app)) as client:
            root = await client.get("/")
            nested = await client.get("/status/live")

            assert root.status == 200
            assert await root.text() == HEALTH_TEXT
            assert nested.status == 200

    @pytest.mark.asyncio
    async def test_update_is_queued(self) -> None:
        application = _application()
        web_app = create_web_app(application, WEBHOOK_PATH)

        async with test_utils.TestClient(test_utils.TestServer(web_app)) as client:
            response = await client.post(WEBHOOK_PATH, json=UPDATE_PAYLOAD)

        assert response.status == 200
        update = application.update_queue.get_nowait()
        assert isinstance(update, Update)
        assert update.update_id == 900
        assert update.message.text == "hi"

    @pytest.mark.asyncio
    async def test_malformed_body_is_rejected(self) -> None:
        application = _application()
        web_app = create_web_app(application, WEBHOOK_PATH)

        async with test_utils.TestClient(test_utils.TestServer(web_app)) as client:
            response = await client.post(WEBHOOK_PATH, data="not json")

        assert response.status == 400
        assert application.update_queue.empty()

    @pytest.mark.asyncio
    async def test_secret_token_is_checked(self) -> None:
        application = _application()
        web_app = create_web_app(application, WEBHOOK_PATH, secret="s3cret")

        async with test_utils.TestClient(test_utils.TestServer(web_app)) as client:
            wrong = await client.post(WEBHOOK_PATH, json=UPDATE_PAYLOAD, headers={SECRET_HEADER: "nope"})
            right = await client.post(WEBHOOK_PATH, json=UPDATE_PAYLOAD, headers={SECRET_HEADER: "s3cret"})

        assert wrong.status == 403
        assert right.status == 200
        assert application.update_queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_other_methods_not_allowed(self) -> None:
        web_app = create_web_app(_application(), WEBHOOK_PATH)

        async with test_utils.TestClient(test_utils.TestServer(web_app)) as client:
            put = await client.put("/")
            stray_post = await client.post("/elsewhere", json=UPDATE_PAYLOAD)

            assert put.status == 405
            assert stray_post.status == 405
