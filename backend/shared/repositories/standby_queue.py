"""Storage contract for standby queues plus the in-process implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from shared.models.standby_queue import QueueKey

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Any failure reaching the backing store (connectivity, protocol, timeout)."""


class QueueStore(ABC):
    """Ordered member list plus two scalar bindings per queue.

    No business rules live here. Callers serialize access; multi-step
    sequences are not atomic as a unit.
    """

    @abstractmethod
    async def exists(self, key: QueueKey) -> bool:
        """True iff the active message binding is present."""

    @abstractmethod
    async def set_message_id(self, key: QueueKey, message_id: int) -> None: ...

    @abstractmethod
    async def get_message_id(self, key: QueueKey) -> int | None: ...

    @abstractmethod
    async def set_notification_id(self, key: QueueKey, message_id: int) -> None: ...

    @abstractmethod
    async def get_notification_id(self, key: QueueKey) -> int | None: ...

    @abstractmethod
    async def clear_notification_id(self, key: QueueKey) -> None: ...

    @abstractmethod
    async def append_member(self, key: QueueKey, user_id: str) -> None:
        """Append to the end of the member list."""

    @abstractmethod
    async def remove_member(self, key: QueueKey, user_id: str) -> None:
        """Remove every occurrence of *user_id*."""

    @abstractmethod
    async def list_members(self, key: QueueKey) -> list[str]:
        """Full ordered snapshot of the member list."""

    @abstractmethod
    async def delete_all(self, key: QueueKey) -> None:
        """Drop members, message binding and notification binding together.

        Deleting absent records is a success.
        """

    async def ping(self) -> bool:
        """Return True when the store is reachable."""
        return True

    async def close(self) -> None:
        """Release connections held by the store."""


class InMemoryQueueStore(QueueStore):
    """Process-local store. State is lost on restart."""

    def __init__(self) -> None:
        self._messages: dict[str, int] = {}
        self._notifications: dict[str, int] = {}
        self._members: dict[str, list[str]] = {}

    async def exists(self, key: QueueKey) -> bool:
        return key.message in self._messages

    async def set_message_id(self, key: QueueKey, message_id: int) -> None:
        self._messages[key.message] = message_id

    async def get_message_id(self, key: QueueKey) -> int | None:
        return self._messages.get(key.message)

    async def set_notification_id(self, key: QueueKey, message_id: int) -> None:
        self._notifications[key.notification] = message_id

    async def get_notification_id(self, key: QueueKey) -> int | None:
        return self._notifications.get(key.notification)

    async def clear_notification_id(self, key: QueueKey) -> None:
        self._notifications.pop(key.notification, None)

    async def append_member(self, key: QueueKey, user_id: str) -> None:
        self._members.setdefault(key.members, []).append(user_id)

    async def remove_member(self, key: QueueKey, user_id: str) -> None:
        members = self._members.get(key.members)
        if members is None:
            return
        remaining = [m for m in members if m != user_id]
        if remaining:
            self._members[key.members] = remaining
        else:
            # Redis drops empty lists; mirror that
            del self._members[key.members]

    async def list_members(self, key: QueueKey) -> list[str]:
        return list(self._members.get(key.members, []))

    async def delete_all(self, key: QueueKey) -> None:
        self._messages.pop(key.message, None)
        self._members.pop(key.members, None)
        self._notifications.pop(key.notification, None)
