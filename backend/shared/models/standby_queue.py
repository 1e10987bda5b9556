"""Data models for standby queues: key layout, notifications and operation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Queue size threshold for the "one more needed" notification
QUEUE_ALMOST_FULL = 4
# Size of the active set; everyone past this position is on the waitlist
QUEUE_FULL = 5

KEY_SEPARATOR = "."


@dataclass(frozen=True)
class QueueKey:
    """Identity of a queue: one per (guild, channel) pair.

    Storage layout:
      - ``{guild}.{channel}``              -> active message id
      - ``{guild}.{channel}.queue``        -> ordered member ids
      - ``{guild}.{channel}.notification`` -> notification message id
    """

    guild_id: str
    channel_id: str

    def __post_init__(self) -> None:
        for part in (self.guild_id, self.channel_id):
            if not part or KEY_SEPARATOR in part:
                raise ValueError(f"Invalid queue key component: {part!r}")

    @property
    def message(self) -> str:
        return f"{self.guild_id}{KEY_SEPARATOR}{self.channel_id}"

    @property
    def members(self) -> str:
        return f"{self.message}{KEY_SEPARATOR}queue"

    @property
    def notification(self) -> str:
        return f"{self.message}{KEY_SEPARATOR}notification"


def split_queue(all_users: list[str]) -> tuple[list[str], list[str]]:
    """Split the membership list into (active set, waitlist)."""
    return list(all_users[:QUEUE_FULL]), list(all_users[QUEUE_FULL:])


@dataclass(frozen=True)
class OneMore:
    """Active set has four members, one more needed."""


@dataclass(frozen=True)
class Ready:
    """Active set just became full."""

    users: list[str] = field(default_factory=list)


QueueNotification = Union[OneMore, Ready]


@dataclass(frozen=True)
class Success:
    """Membership changed; carries the recomputed queue state."""

    users: list[str]
    waitlist: list[str]
    notification: QueueNotification | None = None
    promoted_user: str | None = None
    user_id: str | None = None  # member that joined, left or was removed

    @property
    def is_empty(self) -> bool:
        return not self.users and not self.waitlist


@dataclass(frozen=True)
class AlreadyInQueue:
    """Join rejected: user is already a member."""


@dataclass(frozen=True)
class NotInQueue:
    """Leave/kick rejected: no matching member."""


@dataclass(frozen=True)
class OperationError:
    """Store failure during a membership change."""

    message: str


QueueResult = Union[Success, AlreadyInQueue, NotInQueue, OperationError]
