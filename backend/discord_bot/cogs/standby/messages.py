"""Embeds and channel texts for the standby queue."""

from __future__ import annotations

import random

import discord

from shared.models.standby_queue import OneMore, QueueNotification, Ready

from .constants import QUEUE_COLOR_ACTIVE, QUEUE_COLOR_CLOSED, QUEUE_THUMBNAIL, QUEUE_TITLE
from .translations import random_one_more


def format_mentions(user_ids: list[str], separator: str = "\n") -> str:
    return separator.join(f"<@{user_id}>" for user_id in user_ids)


def queue_description(users: list[str], waitlist: list[str], last_action: str | None) -> str:
    lines: list[str] = []
    if last_action:
        lines.append(last_action)

    if users:
        lines.append(f"### Queued users ({len(users)})\n{format_mentions(users)}")
    else:
        lines.append("No users in queue")

    description = "\n".join(lines)
    if waitlist:
        description += f"\n\n### Waitlist ({len(waitlist)})\n{format_mentions(waitlist)}"
    return description


def build_queue_embed(users: list[str], waitlist: list[str], last_action: str | None) -> discord.Embed:
    embed = discord.Embed(
        title=QUEUE_TITLE,
        description=queue_description(users, waitlist, last_action),
        color=QUEUE_COLOR_ACTIVE,
    )
    embed.set_thumbnail(url=QUEUE_THUMBNAIL)
    return embed


def build_closed_embed() -> discord.Embed:
    embed = discord.Embed(title=QUEUE_TITLE, description="Queue is closed", color=QUEUE_COLOR_CLOSED)
    embed.set_thumbnail(url=QUEUE_THUMBNAIL)
    return embed


def notification_text(notification: QueueNotification, rng: random.Random | None = None) -> str:
    if isinstance(notification, Ready):
        return f"There are enough users for a game!\n{format_mentions(notification.users, ', ')}"
    if isinstance(notification, OneMore):
        phrase, language = random_one_more(rng)
        if language == "English":
            return phrase
        return f"{phrase} ({language})"
    raise TypeError(f"Unknown notification: {notification!r}")


def promotion_text(user_id: str) -> str:
    return f"<@{user_id}> you're up!"
