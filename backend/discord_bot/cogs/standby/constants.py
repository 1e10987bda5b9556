"""Standby queue constants and the closed set of queue actions."""

from __future__ import annotations

from enum import Enum

from discord_bot.core.config import COMMAND_KICK, COMMAND_PURGE, COMMAND_STANDBY

QUEUE_TITLE = "5-stack queue"
QUEUE_COLOR_ACTIVE = 0x0099FF
QUEUE_COLOR_CLOSED = 0x808080
QUEUE_THUMBNAIL = (
    "https://static.wikia.nocookie.net/valorant/images/c/c4/"
    "We_Did_It_Team_Spray.png/revision/latest?cb=20240627151137"
)

DISABLED_SUFFIX = "_disabled"


class QueueAction(str, Enum):
    """Every event the coordinator handles; values are command names or button ids."""

    CREATE = COMMAND_STANDBY
    KICK = COMMAND_KICK
    PURGE = COMMAND_PURGE
    JOIN = "join_queue"
    LEAVE = "leave_queue"
    CLOSE = "close_queue"
    REOPEN = "open_queue"

    @property
    def requires_active_message(self) -> bool:
        """Button actions that must target the queue's current message."""
        return self in (QueueAction.JOIN, QueueAction.LEAVE, QueueAction.CLOSE)

    @classmethod
    def from_custom_id(cls, custom_id: str) -> QueueAction | None:
        try:
            return cls(custom_id)
        except ValueError:
            return None
