"""Select and initialize the standby queue store from configuration."""

from __future__ import annotations

import logging

from shared.database import DatabaseManager
from shared.repositories.postgres_store import PostgresQueueStore
from shared.repositories.redis_store import RedisQueueStore
from shared.repositories.standby_queue import InMemoryQueueStore, QueueStore

logger = logging.getLogger(__name__)


async def create_store(redis_url: str = "", database_url: str = "") -> QueueStore:
    """Redis if configured, otherwise PostgreSQL, otherwise in-memory."""
    if redis_url:
        store = RedisQueueStore.from_url(redis_url)
        if not await store.ping():
            logger.warning("Redis is not reachable yet; queue operations will fail until it is")
        return store

    if database_url:
        db = DatabaseManager(database_url)
        await db.connect()
        pg_store = PostgresQueueStore(db)
        await pg_store.ensure_schema()
        return pg_store

    logger.warning("No REDIS_URL or DATABASE_URL set, using in-memory queue store (lost on restart)")
    return InMemoryQueueStore()
