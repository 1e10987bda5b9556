"""Storage backends for the standby queue."""

from .standby_queue import InMemoryQueueStore, QueueStore, StoreError
from .postgres_store import PostgresQueueStore
from .redis_store import RedisQueueStore
from .factory import create_store

__all__ = [
    "InMemoryQueueStore",
    "PostgresQueueStore",
    "QueueStore",
    "RedisQueueStore",
    "StoreError",
    "create_store",
]
