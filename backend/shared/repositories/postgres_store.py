"""PostgreSQL-backed standby queue store (standby_queue_bindings, standby_queue_members)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from shared.database import DatabaseManager
from shared.models.standby_queue import QueueKey
from shared.repositories.standby_queue import QueueStore, StoreError

logger = logging.getLogger(__name__)

_BINDING_MESSAGE = "message"
_BINDING_NOTIFICATION = "notification"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS standby_queue_bindings (
    queue_key  TEXT   NOT NULL,
    kind       TEXT   NOT NULL,
    message_id BIGINT NOT NULL,
    PRIMARY KEY (queue_key, kind)
);

CREATE TABLE IF NOT EXISTS standby_queue_members (
    id        BIGSERIAL PRIMARY KEY,
    queue_key TEXT NOT NULL,
    user_id   TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_standby_queue_members_key
    ON standby_queue_members (queue_key, id);
"""


class PostgresQueueStore(QueueStore):
    """Bindings keyed by (queue_key, kind); member order is the serial id."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[asyncpg.Connection]:
        try:
            async with self.db.pool.acquire() as conn:
                yield conn
        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            raise StoreError(f"{operation} failed: {type(e).__name__}: {e}") from e

    async def ensure_schema(self) -> None:
        """Create the standby queue tables if they do not exist."""
        async with self._connection("ensure_schema") as conn:
            await conn.execute(_SCHEMA)
        logger.info("Standby queue schema ready")

    async def _get_binding(self, key: QueueKey, kind: str) -> int | None:
        async with self._connection(f"get {kind}") as conn:
            return await conn.fetchval(
                "SELECT message_id FROM standby_queue_bindings "
                "WHERE queue_key = $1 AND kind = $2",
                key.message,
                kind,
            )

    async def _set_binding(self, key: QueueKey, kind: str, message_id: int) -> None:
        async with self._connection(f"set {kind}") as conn:
            await conn.execute(
                """
                INSERT INTO standby_queue_bindings (queue_key, kind, message_id)
                VALUES ($1, $2, $3)
                ON CONFLICT (queue_key, kind) DO UPDATE SET message_id = EXCLUDED.message_id
                """,
                key.message,
                kind,
                message_id,
            )

    async def exists(self, key: QueueKey) -> bool:
        return await self._get_binding(key, _BINDING_MESSAGE) is not None

    async def set_message_id(self, key: QueueKey, message_id: int) -> None:
        await self._set_binding(key, _BINDING_MESSAGE, message_id)

    async def get_message_id(self, key: QueueKey) -> int | None:
        return await self._get_binding(key, _BINDING_MESSAGE)

    async def set_notification_id(self, key: QueueKey, message_id: int) -> None:
        await self._set_binding(key, _BINDING_NOTIFICATION, message_id)

    async def get_notification_id(self, key: QueueKey) -> int | None:
        return await self._get_binding(key, _BINDING_NOTIFICATION)

    async def clear_notification_id(self, key: QueueKey) -> None:
        async with self._connection("clear notification") as conn:
            await conn.execute(
                "DELETE FROM standby_queue_bindings WHERE queue_key = $1 AND kind = $2",
                key.message,
                _BINDING_NOTIFICATION,
            )

    async def append_member(self, key: QueueKey, user_id: str) -> None:
        async with self._connection("append member") as conn:
            await conn.execute(
                "INSERT INTO standby_queue_members (queue_key, user_id) VALUES ($1, $2)",
                key.message,
                user_id,
            )

    async def remove_member(self, key: QueueKey, user_id: str) -> None:
        async with self._connection("remove member") as conn:
            await conn.execute(
                "DELETE FROM standby_queue_members WHERE queue_key = $1 AND user_id = $2",
                key.message,
                user_id,
            )

    async def list_members(self, key: QueueKey) -> list[str]:
        async with self._connection("list members") as conn:
            rows = await conn.fetch(
                "SELECT user_id FROM standby_queue_members WHERE queue_key = $1 ORDER BY id ASC",
                key.message,
            )
            return [row["user_id"] for row in rows]

    async def delete_all(self, key: QueueKey) -> None:
        async with self._connection("delete queue") as conn:
            async with conn.transaction():
                await conn.execute(
                    "DELETE FROM standby_queue_members WHERE queue_key = $1", key.message
                )
                await conn.execute(
                    "DELETE FROM standby_queue_bindings WHERE queue_key = $1", key.message
                )

    async def ping(self) -> bool:
        return await self.db.check_health()

    async def close(self) -> None:
        await self.db.disconnect()
