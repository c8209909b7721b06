"""Session storage backends.

The handlers keep one record per chat in a key-value store. Records are stored
in their persisted JSON shape and handed back as plain dictionaries; the
caller completes them with ``ensure_complete_session``. Two backends exist: an
in-process dictionary for development and tests, and Redis for deployments
that need the records to survive restarts.

Writes are last-write-wins. Two updates for the same chat processed at the same
time can overwrite each other's changes.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

import redis.asyncio as redis

from ..models import SessionData

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


def session_key(chat_id: int) -> str:
    """Default key function: one record per chat."""
    return str(chat_id)


class SessionStore(Protocol):
    """Key-value collaborator holding session records."""

    async def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored record for ``key`` or None."""
        ...

    async def put(self, key: str, session: SessionData) -> None:
        """Store ``session`` under ``key``."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...


class MemorySessionStore:
    """Session store backed by a process-local dictionary."""

    def __init__(self) -> None:
        self._records: dict[str, str] = {}

    async def get(self, key: str) -> dict[str, Any] | None:
        raw = self._records.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def put(self, key: str, session: SessionData) -> None:
        # Serialised so callers never share a mutable record with the store.
        self._records[key] = session.model_dump_json(by_alias=True)

    async def close(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class RedisSessionStore:
    """Session store backed by Redis.

    Records are JSON strings under ``<prefix>:<key>``. A positive ``ttl`` lets
    Redis evict chats that have been quiet for that many seconds.
    """

    def __init__(self, client: "Redis", key_prefix: str = "inspector_bot:session", ttl: int = 0):
        """Initialize the store.

        Args:
            client: Connected ``redis.asyncio`` client with decoded responses.
            key_prefix: Namespace for session keys.
            ttl: Record expiry in seconds, 0 disables expiry.
        """
        self._client = client
        self.key_prefix = key_prefix
        self.ttl = ttl

    @classmethod
    def from_url(cls, redis_url: str, key_prefix: str = "inspector_bot:session", ttl: int = 0) -> "RedisSessionStore":
        """Create a store with a client built from ``redis_url``."""
        client = redis.from_url(
            redis_url,
            decode_responses=True,
            retry_on_timeout=True,
            health_check_interval=30,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, key_prefix=key_prefix, ttl=ttl)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def get(self, key: str) -> dict[str, Any] | None:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None

        try:
            record = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable session record for %s", key)
            return None

        if not isinstance(record, dict):
            logger.warning("Discarding non-object session record for %s", key)
            return None
        return record

    async def put(self, key: str, session: SessionData) -> None:
        payload = session.model_dump_json(by_alias=True)
        if self.ttl > 0:
            await self._client.setex(self._key(key), self.ttl, payload)
        else:
            await self._client.set(self._key(key), payload)
        logger.debug("Session stored for %s", key)

    async def close(self) -> None:
        await self._client.aclose()


def create_session_store(redis_url: str | None = None, key_prefix: str = "inspector_bot:session", ttl: int = 0) -> SessionStore:
    """Pick the backend from configuration.

    Args:
        redis_url: Redis URL; the in-memory store is used when empty.
        key_prefix: Namespace for Redis keys.
        ttl: Redis record expiry in seconds.

    Returns:
        A session store instance.
    """
    if redis_url:
        logger.info("Using Redis session store")
        return RedisSessionStore.from_url(redis_url, key_prefix=key_prefix, ttl=ttl or 0)

    logger.warning("REDIS_URL is not set; sessions are kept in memory and lost on restart")
    return MemorySessionStore()
