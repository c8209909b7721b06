"""Webhook HTTP server.

A small aiohttp application in front of the PTB ``Application``: Telegram
POSTs updates to the webhook path and a GET on any path answers health checks.
Updates are handed to PTB through its update queue, so dispatch, throttling
and error handling stay inside the framework.
"""

import logging
from typing import Final

from aiohttp import web
from telegram import Update
from telegram.ext import Application

logger = logging.getLogger(__name__)

APPLICATION_KEY: Final = web.AppKey("telegram_application", Application)
SECRET_KEY: Final = web.AppKey("webhook_secret", str)
SECRET_HEADER: Final = "X-Telegram-Bot-Api-Secret-Token"
HEALTH_TEXT: Final = "Bot is running"


async def health_check(request: web.Request) -> web.Response:
    """Answer uptime probes on any path."""
    return web.Response(text=HEALTH_TEXT)


async def receive_update(request: web.Request) -> web.Response:
    """Queue one update posted by Telegram.

    Responds 403 when the secret token does not match and 400 when the body
    is not an update; Telegram does not retry on those.
    """
    secret = request.app[SECRET_KEY]
    if secret and request.headers.get(SECRET_HEADER) != secret:
        logger.warning("Rejected webhook request with a wrong secret token")
        return web.Response(status=403)

    application = request.app[APPLICATION_KEY]
    try:
        payload = await request.json()
        update = Update.de_json(payload, application.bot)
    except Exception as e:
        logger.error(f"Error decoding webhook update: {e}")
        return web.Response(status=400)

    await application.update_queue.put(update)
    return web.Response()


async def method_not_allowed(request: web.Request) -> web.Response:
    return web.Response(status=405, text="Method not allowed")


def create_web_app(application: Application, webhook_path: str, secret: str | None = None) -> web.Application:
    """Build the aiohttp application serving the webhook.

    Args:
        application: Initialized PTB application receiving the updates.
        webhook_path: Path Telegram posts to.
        secret: Expected secret token header, not checked when empty.

    Returns:
        The aiohttp application.
    """
    web_app = web.Application()
    web_app[APPLICATION_KEY] = application
    web_app[SECRET_KEY] = secret or ""

    web_app.router.add_post(webhook_path, receive_update)
    web_app.router.add_get("/{tail:.*}", health_check)
    web_app.router.add_route("*", "/{tail:.*}", method_not_allowed)
    return web_app
