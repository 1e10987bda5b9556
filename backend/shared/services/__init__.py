"""Business-logic services for the standby queue."""

from .standby_queue import StandbyQueueService, resolve_member

__all__ = ["StandbyQueueService", "resolve_member"]
