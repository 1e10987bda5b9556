"""Standby queue service: business rules for the 5-stack queue.

Membership is an ordered list; the first ``QUEUE_FULL`` members form the
active set and the rest the waitlist. The split is recomputed on every
read, never stored.

The service holds no locks. Callers must serialize every call globally
(one in-flight operation at a time) because a join's append and the
re-read that follows are separate store calls.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping

from shared.models.standby_queue import (
    QUEUE_ALMOST_FULL,
    QUEUE_FULL,
    AlreadyInQueue,
    NotInQueue,
    OneMore,
    OperationError,
    QueueKey,
    QueueNotification,
    QueueResult,
    Ready,
    Success,
    split_queue,
)
from shared.repositories.standby_queue import QueueStore, StoreError

logger = logging.getLogger(__name__)

Publisher = Callable[[Success], Awaitable[int]]


def resolve_member(members: list[str], fragment: str, names: Mapping[str, str]) -> str | None:
    """Map a display-name fragment to a member id.

    Only current members with a known name are candidates. An exact
    case-insensitive match wins; otherwise the earliest member in queue
    order whose name contains the fragment.
    """
    needle = fragment.strip().lstrip("@").casefold()
    if not needle:
        return None

    candidates = [(m, names[m].casefold()) for m in members if m in names]
    for member_id, name in candidates:
        if name == needle:
            return member_id
    for member_id, name in candidates:
        if needle in name:
            return member_id
    return None


class StandbyQueueService:
    """Queue operations over a :class:`QueueStore`.

    ``last_action`` is kept in memory only and shared across all queues
    handled by this instance.
    """

    def __init__(
        self,
        store: QueueStore,
        *,
        notify_on_leave: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.notify_on_leave = notify_on_leave
        self._clock = clock
        self._last_action: str | None = None

    # ==================== Accessors ====================

    def get_last_action(self) -> str | None:
        return self._last_action

    def _record_action(self, user_id: str, verb: str) -> None:
        self._last_action = f"<@{user_id}> {verb} <t:{int(self._clock())}:R>"

    async def exists(self, guild_id: str, channel_id: str) -> bool:
        return await self.store.exists(QueueKey(guild_id, channel_id))

    async def create(self, guild_id: str, channel_id: str, message_id: int) -> None:
        """Bind the rendered message; the queue exists from here on.

        Call only after the first member joined and while no queue exists.
        """
        await self.store.set_message_id(QueueKey(guild_id, channel_id), message_id)
        logger.info(f"Queue created in {guild_id}/{channel_id} (message {message_id})")

    async def get_message_id(self, guild_id: str, channel_id: str) -> int | None:
        return await self.store.get_message_id(QueueKey(guild_id, channel_id))

    async def is_bound_to(self, guild_id: str, channel_id: str, message_id: int) -> bool:
        """True iff the queue's active message is *message_id*."""
        stored = await self.get_message_id(guild_id, channel_id)
        return stored is not None and stored == message_id

    async def get_notification_id(self, guild_id: str, channel_id: str) -> int | None:
        return await self.store.get_notification_id(QueueKey(guild_id, channel_id))

    async def set_notification_id(self, guild_id: str, channel_id: str, message_id: int) -> None:
        await self.store.set_notification_id(QueueKey(guild_id, channel_id), message_id)

    async def clear_notification_id(self, guild_id: str, channel_id: str) -> None:
        await self.store.clear_notification_id(QueueKey(guild_id, channel_id))

    async def get_state(self, guild_id: str, channel_id: str) -> tuple[list[str], list[str]]:
        """Current (active set, waitlist) for rendering."""
        return split_queue(await self.store.list_members(QueueKey(guild_id, channel_id)))

    # ==================== Membership ====================

    async def join(self, guild_id: str, channel_id: str, user_id: str) -> QueueResult:
        """Append *user_id*; notify when the active set reaches 4 or becomes full."""
        key = QueueKey(guild_id, channel_id)
        try:
            if user_id in await self.store.list_members(key):
                return AlreadyInQueue()
            await self.store.append_member(key, user_id)
            all_users = await self.store.list_members(key)
        except StoreError as e:
            logger.error(f"Join failed for {user_id} in {key.message}: {e}")
            return OperationError(f"Failed to add user: {e}")

        users, waitlist = split_queue(all_users)

        # Keyed on total size so waitlist joins never re-fire
        notification: QueueNotification | None = None
        if len(all_users) == QUEUE_ALMOST_FULL:
            notification = OneMore()
        elif len(all_users) == QUEUE_FULL:
            notification = Ready(users=list(users))

        self._record_action(user_id, "joined")
        logger.debug(f"{user_id} joined {key.message} ({len(users)} queued, {len(waitlist)} waiting)")

        return Success(users=users, waitlist=waitlist, notification=notification, user_id=user_id)

    async def leave(self, guild_id: str, channel_id: str, user_id: str) -> QueueResult:
        """Remove *user_id*, reporting who moved up from the waitlist."""
        return await self._remove(QueueKey(guild_id, channel_id), user_id, "left")

    async def kick(
        self,
        guild_id: str,
        channel_id: str,
        name_fragment: str,
        names: Mapping[str, str],
    ) -> QueueResult:
        """Remove the member whose display name matches *name_fragment*.

        *names* maps member ids to display names; display names live in
        the chat platform, not in the store.
        """
        key = QueueKey(guild_id, channel_id)
        try:
            members = await self.store.list_members(key)
        except StoreError as e:
            logger.error(f"Kick lookup failed in {key.message}: {e}")
            return OperationError(f"Failed to get users: {e}")

        target = resolve_member(members, name_fragment, names)
        if target is None:
            return NotInQueue()
        return await self._remove(key, target, "was removed", members_before=members)

    async def _remove(
        self,
        key: QueueKey,
        user_id: str,
        verb: str,
        members_before: list[str] | None = None,
    ) -> QueueResult:
        try:
            users_before = (
                members_before if members_before is not None else await self.store.list_members(key)
            )
            if user_id not in users_before:
                return NotInQueue()
            position = users_before.index(user_id)
            await self.store.remove_member(key, user_id)
            all_users = await self.store.list_members(key)
        except StoreError as e:
            logger.error(f"Remove failed for {user_id} in {key.message}: {e}")
            return OperationError(f"Failed to remove user: {e}")

        users, waitlist = split_queue(all_users)

        promoted_user = None
        if position < QUEUE_FULL and len(users_before) > QUEUE_FULL and len(users) == QUEUE_FULL:
            promoted_user = users[QUEUE_FULL - 1]

        notification: QueueNotification | None = None
        if self.notify_on_leave and len(users) == QUEUE_ALMOST_FULL:
            notification = OneMore()

        self._record_action(user_id, verb)
        logger.debug(
            f"{user_id} {verb} {key.message} ({len(users)} queued, {len(waitlist)} waiting"
            + (f", promoted {promoted_user})" if promoted_user else ")")
        )

        return Success(
            users=users,
            waitlist=waitlist,
            notification=notification,
            promoted_user=promoted_user,
            user_id=user_id,
        )

    # ==================== Lifecycle ====================

    async def close(self, guild_id: str, channel_id: str) -> None:
        """Delete members and both bindings. Closing an absent queue is a no-op."""
        key = QueueKey(guild_id, channel_id)
        await self.store.delete_all(key)
        logger.info(f"Queue closed in {guild_id}/{channel_id}")

    async def start(
        self,
        guild_id: str,
        channel_id: str,
        user_id: str,
        publish: Publisher,
    ) -> Success | None:
        """Open a queue with *user_id* as its first member.

        *publish* renders the initial state and returns the message id to
        bind. Returns ``None`` when a queue already exists. If anything
        fails after the creator was added, the queue is closed again
        before the error propagates.
        """
        if await self.exists(guild_id, channel_id):
            return None

        # Drop any member list orphaned by an earlier partial failure
        await self.store.delete_all(QueueKey(guild_id, channel_id))

        result = await self.join(guild_id, channel_id, user_id)
        if isinstance(result, OperationError):
            raise StoreError(result.message)
        if not isinstance(result, Success):
            raise StoreError(f"Could not add {user_id} to a fresh queue")

        try:
            message_id = await publish(result)
            await self.create(guild_id, channel_id, message_id)
        except Exception:
            logger.warning(f"Queue start failed in {guild_id}/{channel_id}, rolling back")
            await self.close(guild_id, channel_id)
            raise

        return result
