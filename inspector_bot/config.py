"""Configuration management for the inspector bot.

Handles environment variables, the YAML command menu and default settings.
Provides structured configuration classes for the bot transport and for the
session store.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class BotConfig(BaseSettings):
    """Main Telegram bot configuration.

    Attributes:
        bot_token: Telegram bot API token from environment.
        port: Server port for webhook mode.
        listen_host: Interface the webhook server binds to.
        webhook_domain: Public domain for webhooks, polling mode if unset.
        webhook_secret: Secret token Telegram echoes in webhook requests.
        log_level: Root logging level name.
    """
    bot_token: str = Field(default="", validation_alias="BOT_TOKEN")
    port: int = Field(default=8000, validation_alias="PORT")
    listen_host: str = Field(default="127.0.0.1", validation_alias="BOT_LISTEN_HOST")
    webhook_domain: str | None = Field(default=None, validation_alias="WEBHOOK_DOMAIN")
    webhook_secret: str | None = Field(default=None, validation_alias="WEBHOOK_SECRET")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def use_webhook(self) -> bool:
        """Determine if webhook mode should be used.

        Returns:
            True if webhook domain is configured, False for polling mode.
        """
        return bool(self.webhook_domain)

    @property
    def webhook_path(self) -> str:
        """URL path Telegram posts updates to."""
        return f"/{self.bot_token}"


class SessionConfig(BaseSettings):
    """Session store configuration.

    Attributes:
        redis_url: Redis connection URL, in-memory store if unset.
        key_prefix: Prefix of every session key in Redis.
        ttl: Expiry of session records in seconds, 0 keeps them forever.
    """
    redis_url: str | None = Field(default=None, validation_alias="REDIS_URL")
    key_prefix: str = Field(default="inspector_bot:session", validation_alias="SESSION_KEY_PREFIX")
    ttl: int = Field(default=0, validation_alias="SESSION_TTL")


class Config:
    """Application configuration manager.

    Centralizes loading of environment settings and the YAML command menu.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to inspector_bot/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.bot = BotConfig()
        self.session = SessionConfig()

        self.commands = self._load_commands()

    def _load_commands(self) -> list[dict[str, Any]]:
        """Load the bot command menu from YAML configuration.

        Returns:
            List of dictionaries with 'command' and 'description' keys.
        """
        commands_path = self.config_dir / "commands.yml"
        if not commands_path.exists():
            return []

        with open(commands_path) as f:
            data = yaml.safe_load(f) or {}

        return data.get("commands", [])

    def as_dict(self) -> dict[str, Any]:
        """Flatten settings for the DI container's configuration provider."""
        return {
            "bot": self.bot.model_dump(),
            "session": self.session.model_dump(),
        }


# Global configuration instance
config = Config()
