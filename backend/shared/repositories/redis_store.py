"""Redis-backed standby queue store.

Usage:
    store = RedisQueueStore.from_url("redis://localhost:6379/0")
    await store.ping()
    ...
    await store.close()
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from shared.models.standby_queue import QueueKey
from shared.repositories.standby_queue import QueueStore, StoreError

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except RedisError as e:
        raise StoreError(f"{operation} failed: {type(e).__name__}: {e}") from e


def _to_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


class RedisQueueStore(QueueStore):
    """One string key per binding, one list per member queue."""

    def __init__(self, client: aioredis.Redis) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> RedisQueueStore:
        client = aioredis.from_url(url, decode_responses=True)
        logger.info("Redis store configured (%s)", url.split("@")[-1] if "@" in url else url)
        return cls(client)

    async def exists(self, key: QueueKey) -> bool:
        with _translate_errors("EXISTS"):
            return bool(await self.client.exists(key.message))

    async def set_message_id(self, key: QueueKey, message_id: int) -> None:
        with _translate_errors("SET message"):
            await self.client.set(key.message, message_id)

    async def get_message_id(self, key: QueueKey) -> int | None:
        with _translate_errors("GET message"):
            return _to_int(await self.client.get(key.message))

    async def set_notification_id(self, key: QueueKey, message_id: int) -> None:
        with _translate_errors("SET notification"):
            await self.client.set(key.notification, message_id)

    async def get_notification_id(self, key: QueueKey) -> int | None:
        with _translate_errors("GET notification"):
            return _to_int(await self.client.get(key.notification))

    async def clear_notification_id(self, key: QueueKey) -> None:
        with _translate_errors("DEL notification"):
            await self.client.delete(key.notification)

    async def append_member(self, key: QueueKey, user_id: str) -> None:
        with _translate_errors("RPUSH"):
            await self.client.rpush(key.members, user_id)

    async def remove_member(self, key: QueueKey, user_id: str) -> None:
        with _translate_errors("LREM"):
            await self.client.lrem(key.members, 0, user_id)

    async def list_members(self, key: QueueKey) -> list[str]:
        with _translate_errors("LRANGE"):
            return list(await self.client.lrange(key.members, 0, -1))

    async def delete_all(self, key: QueueKey) -> None:
        # Single DEL: Redis applies it atomically
        with _translate_errors("DEL queue"):
            await self.client.delete(key.message, key.members, key.notification)

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {type(e).__name__}: {e}")
            return False

    async def close(self) -> None:
        await self.client.aclose()
        logger.info("Redis store closed")
