"""Typed queue events resolved from Discord interactions."""

from __future__ import annotations

from dataclasses import dataclass

import discord

from .constants import QueueAction


@dataclass(frozen=True)
class QueueEvent:
    """One user-triggered event, resolved to queue identity and actor."""

    action: QueueAction
    guild_id: str
    channel_id: str
    user_id: str
    message_id: int | None = None  # clicked message, for button actions
    target: str | None = None  # name fragment, for KICK

    @classmethod
    def from_interaction(
        cls,
        interaction: discord.Interaction,
        action: QueueAction,
        target: str | None = None,
    ) -> QueueEvent:
        if interaction.guild_id is None or interaction.channel_id is None:
            raise ValueError("Standby queues only exist in guild channels")
        return cls(
            action=action,
            guild_id=str(interaction.guild_id),
            channel_id=str(interaction.channel_id),
            user_id=str(interaction.user.id),
            message_id=interaction.message.id if interaction.message else None,
            target=target,
        )
