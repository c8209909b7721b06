"""Tests for session store backends."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from inspector_bot.core.container import Container
from inspector_bot.services.preferences import default_session, ensure_complete_session
from inspector_bot.services.session_store import (
    MemorySessionStore,
    RedisSessionStore,
    create_session_store,
    session_key,
)


@pytest.mark.asyncio
async def test_memory_store_round_trip() -> None:
    store = MemorySessionStore()
    session = default_session("private")
    session.enabled = False

    await store.put(session_key(10), session)
    record = await store.get(session_key(10))

    assert record["enabled"] is False
    assert "viewPreferences" in record
    assert ensure_complete_session(record, "private") == session


@pytest.mark.asyncio
async def test_memory_store_missing_key() -> None:
    assert await MemorySessionStore().get("nope") is None


@pytest.mark.asyncio
async def test_memory_store_does_not_share_instances() -> None:
    store = MemorySessionStore()
    session = default_session("private")
    await store.put("1", session)

    session.enabled = False

    assert (await store.get("1"))["enabled"] is True


@pytest.mark.asyncio
async def test_redis_store_uses_prefixed_keys() -> None:
    client = AsyncMock()
    store = RedisSessionStore(client, key_prefix="test:session")
    session = default_session("group")

    await store.put("-100", session)

    client.set.assert_awaited_once()
    key, payload = client.set.await_args.args
    assert key == "test:session:-100"
    assert json.loads(payload)["enabled"] is False


@pytest.mark.asyncio
async def test_redis_store_ttl_uses_setex() -> None:
    client = AsyncMock()
    store = RedisSessionStore(client, ttl=60)

    await store.put("5", default_session("private"))

    client.setex.assert_awaited_once()
    assert client.setex.await_args.args[1] == 60


@pytest.mark.asyncio
async def test_redis_store_get_decodes_record() -> None:
    session = default_session("private")
    client = AsyncMock()
    client.get.return_value = session.model_dump_json(by_alias=True)
    store = RedisSessionStore(client)

    record = await store.get("5")

    assert ensure_complete_session(record, "private") == session


@pytest.mark.asyncio
async def test_redis_store_discards_garbage() -> None:
    client = AsyncMock()
    client.get.return_value = "{not json"
    store = RedisSessionStore(client)

    assert await store.get("5") is None


def test_factory_defaults_to_memory() -> None:
    assert isinstance(create_session_store(None), MemorySessionStore)


def test_factory_builds_redis_store() -> None:
    with patch("inspector_bot.services.session_store.redis.from_url") as from_url:
        store = create_session_store("redis://localhost:6379/0", key_prefix="p", ttl=5)

    from_url.assert_called_once()
    assert isinstance(store, RedisSessionStore)
    assert store.key_prefix == "p"
    assert store.ttl == 5


def test_container_wires_store_from_config() -> None:
    container = Container()
    container.config.from_dict({"session": {"redis_url": None, "key_prefix": "x", "ttl": 0}})

    store = container.session_store()

    assert isinstance(store, MemorySessionStore)
    assert container.session_store() is store
