"""PostgreSQL connection pool lifecycle for the standby queue store."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import asyncpg

logger = logging.getLogger(__name__)


@dataclass
class PoolConfig:
    """Database pool configuration with sensible defaults."""

    min_size: int = 1
    max_size: int = 4
    timeout: float = 5.0
    command_timeout: float = 15.0
    max_inactive_connection_lifetime: float = 30.0
    max_retries: int = 3
    retry_delay: float = 3.0


class DatabaseManager:
    """Manages the asyncpg pool: connect with retry, health check, shutdown."""

    def __init__(self, database_url: str, config: PoolConfig | None = None):
        self.database_url = database_url
        self.config = config or PoolConfig()
        self._pool: asyncpg.Pool | None = None

    def _pool_kwargs(self) -> dict[str, Any]:
        cfg = self.config
        return {
            "dsn": self.database_url,
            "min_size": cfg.min_size,
            "max_size": cfg.max_size,
            "timeout": cfg.timeout,
            "command_timeout": cfg.command_timeout,
            "max_inactive_connection_lifetime": cfg.max_inactive_connection_lifetime,
        }

    async def connect(self) -> None:
        """Initialize the connection pool, retrying with exponential backoff."""
        if self._pool is not None:
            logger.warning("Database pool already initialized")
            return

        parsed = urlparse(self.database_url)
        target = f"{parsed.hostname or 'unknown'}:{parsed.port or 5432}"

        cfg = self.config
        for attempt in range(1, cfg.max_retries + 1):
            try:
                self._pool = await asyncpg.create_pool(**self._pool_kwargs())

                async with self._pool.acquire() as conn:
                    await conn.fetchval("SELECT 1")

                logger.info(
                    f"Database pool created and verified ({target}, "
                    f"size={cfg.min_size}-{cfg.max_size})"
                )
                return
            except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
                if self._pool is not None:
                    await self._pool.close()
                    self._pool = None
                if attempt < cfg.max_retries:
                    delay = cfg.retry_delay * (2 ** (attempt - 1))
                    logger.warning(
                        f"Database connection attempt {attempt}/{cfg.max_retries} to {target} failed: "
                        f"{type(e).__name__}: {e or repr(e)}, retrying in {delay}s..."
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.exception(
                        f"Database connection failed after {cfg.max_retries} attempts: "
                        f"{type(e).__name__}: {e or repr(e)}"
                    )
                    raise

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self._pool is None:
            return

        await self._pool.close()
        self._pool = None
        logger.info("Database pool closed")

    async def check_health(self) -> bool:
        """Test if the pool can actually execute a query."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire(timeout=2.0) as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            logger.warning(f"Database health check failed: {type(e).__name__}: {e}")
            return False

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the connection pool. Raises if not initialized."""
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")
        return self._pool
