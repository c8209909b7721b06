"""Application entry point.

Main module that initializes and runs the Telegram bot application. Handles
both webhook mode (aiohttp server in front of PTB, for production) and polling
mode (for local development). Configures logging, builds the session store
through the DI container and registers the handlers.
"""

import asyncio
import logging

from aiohttp import web
from telegram import BotCommand, Update
from telegram.ext import AIORateLimiter, Application, CallbackQueryHandler, CommandHandler, MessageHandler, filters

from .bot.handlers import (
    SESSION_STORE_KEY,
    admin_command,
    error_handler,
    export_command,
    filter_command,
    handle_callback,
    handle_message,
    help_command,
    import_command,
    mode_command,
    privacy_command,
    start,
    toggle_command,
    userprefs_command,
)
from .config import Config, config
from .core.container import Container
from .webserver import create_web_app

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Set up root logging; HTTP client logs would leak the token in URLs."""
    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_application(settings: Config) -> Application:
    """Create the PTB application with handlers and the session store.

    Args:
        settings: Loaded configuration.

    Returns:
        Configured, not yet initialized application.
    """
    container = Container()
    container.config.from_dict(settings.as_dict())

    app = Application.builder().token(settings.bot.bot_token).rate_limiter(AIORateLimiter()).build()
    app.bot_data[SESSION_STORE_KEY] = container.session_store()

    async def post_init(application: Application) -> None:
        if settings.commands:
            await application.bot.set_my_commands(
                [BotCommand(item["command"], item["description"]) for item in settings.commands]
            )
            logger.info("Published %d bot commands", len(settings.commands))

    async def post_shutdown(application: Application) -> None:
        await application.bot_data[SESSION_STORE_KEY].close()
        logger.info("Session store closed")

    app.post_init = post_init
    app.post_shutdown = post_shutdown

    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("toggle", toggle_command))
    app.add_handler(CommandHandler("mode", mode_command))
    app.add_handler(CommandHandler("filter", filter_command))
    app.add_handler(CommandHandler("privacy", privacy_command))
    app.add_handler(CommandHandler("userprefs", userprefs_command))
    app.add_handler(CommandHandler("admin", admin_command))
    app.add_handler(CommandHandler("export", export_command))
    app.add_handler(CommandHandler("import", import_command))

    app.add_handler(CallbackQueryHandler(handle_callback))
    app.add_handler(MessageHandler(~filters.COMMAND & ~filters.UpdateType.EDITED, handle_message))

    app.add_error_handler(error_handler)
    return app


async def run_webhook(app: Application, settings: Config) -> None:
    """Serve updates through the aiohttp webhook server until cancelled."""
    webhook_url = f"https://{settings.bot.webhook_domain}{settings.bot.webhook_path}"
    web_app = create_web_app(app, settings.bot.webhook_path, settings.bot.webhook_secret)
    runner = web.AppRunner(web_app)

    async with app:
        if app.post_init:
            await app.post_init(app)
        await app.bot.set_webhook(
            url=webhook_url,
            allowed_updates=Update.ALL_TYPES,
            secret_token=settings.bot.webhook_secret,
        )
        await app.start()
        await runner.setup()
        site = web.TCPSite(runner, host=settings.bot.listen_host, port=settings.bot.port)
        await site.start()
        logger.info("Webhook server listening on %s:%s", settings.bot.listen_host, settings.bot.port)

        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()
            await app.stop()
            if app.post_shutdown:
                await app.post_shutdown(app)


def main() -> None:
    """Main application entry point.

    Raises:
        RuntimeError: If BOT_TOKEN environment variable is not set.
    """
    if not config.bot.bot_token:
        raise RuntimeError("Set BOT_TOKEN environment variable")

    configure_logging(config.bot.log_level)
    app = build_application(config)

    if config.bot.use_webhook:
        logger.info("Starting webhook mode for %s", config.bot.webhook_domain)
        try:
            asyncio.run(run_webhook(app, config))
        except KeyboardInterrupt:
            logger.info("Stopped")
    else:
        logger.warning("No webhook domain configured; falling back to long-polling")
        app.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
