"""Shared data models for the standby queue."""

from .standby_queue import (
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

__all__ = [
    "QUEUE_ALMOST_FULL",
    "QUEUE_FULL",
    "AlreadyInQueue",
    "NotInQueue",
    "OneMore",
    "OperationError",
    "QueueKey",
    "QueueNotification",
    "QueueResult",
    "Ready",
    "Success",
    "split_queue",
]
