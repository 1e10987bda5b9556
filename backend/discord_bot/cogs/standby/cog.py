"""Standby queue cog: slash commands, buttons and message rendering.

Every event runs start to finish under one lock shared by all queues,
since the service reads, decides and writes in separate store calls.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import discord
from cachetools import TTLCache  # type: ignore[import-untyped]
from discord import app_commands
from discord.ext import commands

from discord_bot.core.config import (
    COMMAND_KICK,
    COMMAND_KICK_DESC,
    COMMAND_PURGE,
    COMMAND_PURGE_DESC,
    COMMAND_STANDBY,
    COMMAND_STANDBY_DESC,
)
from shared.models.standby_queue import (
    AlreadyInQueue,
    NotInQueue,
    OperationError,
    QueueNotification,
    Success,
)
from shared.repositories.standby_queue import StoreError
from shared.services.standby_queue import StandbyQueueService

from .constants import QueueAction
from .events import QueueEvent
from .messages import (
    build_closed_embed,
    build_queue_embed,
    notification_text,
    promotion_text,
)
from .views import ClosedQueueView, QueueView

if TYPE_CHECKING:
    from discord_bot.bot import StandbyBot

logger = logging.getLogger(__name__)

Handler = Callable[[discord.Interaction, QueueEvent], Awaitable[None]]

ERROR_REPLY = "Something went wrong with the queue, please try again."


class StandbyCog(commands.Cog):
    """5-stack standby queue"""

    def __init__(self, bot: "StandbyBot", service: StandbyQueueService):
        self.bot = bot
        self.service = service
        self._lock = asyncio.Lock()
        # (guild_id, user_id) -> display name
        self._display_names: TTLCache = TTLCache(maxsize=1024, ttl=300)
        self._handlers: dict[QueueAction, Handler] = {
            QueueAction.CREATE: self._on_create,
            QueueAction.JOIN: self._on_join,
            QueueAction.LEAVE: self._on_leave,
            QueueAction.CLOSE: self._on_close,
            QueueAction.REOPEN: self._on_reopen,
            QueueAction.KICK: self._on_kick,
            QueueAction.PURGE: self._on_purge,
        }

    async def cog_load(self) -> None:
        # Buttons on messages sent before a restart keep working
        self.bot.add_view(QueueView(self))
        self.bot.add_view(ClosedQueueView(self))
        logger.info("Standby queue views registered")

    # ==================== Entry points ====================

    @app_commands.command(name=COMMAND_STANDBY, description=COMMAND_STANDBY_DESC)
    @app_commands.guild_only()
    async def standby_command(self, interaction: discord.Interaction) -> None:
        await self.dispatch(interaction, QueueEvent.from_interaction(interaction, QueueAction.CREATE))

    @app_commands.command(name=COMMAND_KICK, description=COMMAND_KICK_DESC)
    @app_commands.describe(name="Display name (or part of it) of the queued user")
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_messages=True)
    @app_commands.checks.has_permissions(manage_messages=True)
    async def kick_command(self, interaction: discord.Interaction, name: str) -> None:
        await interaction.response.defer(ephemeral=True, thinking=True)
        await self.dispatch(
            interaction, QueueEvent.from_interaction(interaction, QueueAction.KICK, target=name)
        )

    @app_commands.command(name=COMMAND_PURGE, description=COMMAND_PURGE_DESC)
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_messages=True)
    @app_commands.checks.has_permissions(manage_messages=True)
    async def purge_command(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(ephemeral=True, thinking=True)
        await self.dispatch(interaction, QueueEvent.from_interaction(interaction, QueueAction.PURGE))

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        if isinstance(error, app_commands.MissingPermissions):
            await self._reply(interaction, "You need Manage Messages to do that.")
            return
        if isinstance(error, app_commands.NoPrivateMessage):
            await self._reply(interaction, "Standby queues only work in servers.")
            return
        logger.error(f"Standby command error: {error}", exc_info=error)
        await self._reply(interaction, ERROR_REPLY)

    async def handle_component(self, interaction: discord.Interaction, action: QueueAction) -> None:
        """Button callback: acknowledge, then run the event."""
        await interaction.response.defer()
        await self.dispatch(interaction, QueueEvent.from_interaction(interaction, action))

    async def dispatch(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        handler = self._handlers[event.action]
        async with self._lock:
            try:
                if event.action.requires_active_message and not await self.service.is_bound_to(
                    event.guild_id, event.channel_id, event.message_id or 0
                ):
                    logger.debug(f"Stale queue message clicked ({event.action.value})")
                    return
                await handler(interaction, event)
            except StoreError as e:
                logger.exception(f"Store error handling {event.action.value}: {e}")
                await self._reply(interaction, ERROR_REPLY)
            except discord.HTTPException as e:
                logger.exception(f"Discord error handling {event.action.value}: {e}")
                await self._reply(interaction, ERROR_REPLY)

    # ==================== Handlers ====================

    async def _on_create(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        async def publish(result: Success) -> int:
            await interaction.response.send_message(
                embed=build_queue_embed(result.users, result.waitlist, self.service.get_last_action()),
                view=QueueView(self),
            )
            message = await interaction.original_response()
            return message.id

        result = await self.service.start(event.guild_id, event.channel_id, event.user_id, publish)
        if result is None:
            await self._reply(interaction, "Queue already exists")

    async def _on_join(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        result = await self.service.join(event.guild_id, event.channel_id, event.user_id)
        if isinstance(result, Success):
            await self._apply(interaction.channel, event, result)
        elif isinstance(result, OperationError):
            logger.error(f"Error adding user to queue: {result.message}")

    async def _on_leave(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        result = await self.service.leave(event.guild_id, event.channel_id, event.user_id)
        if isinstance(result, Success):
            await self._apply(interaction.channel, event, result)
        elif isinstance(result, OperationError):
            logger.error(f"Error removing user from queue: {result.message}")

    async def _on_close(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        await self._close_queue(interaction.channel, event)

    async def _on_reopen(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        channel = interaction.channel
        if interaction.message is not None:
            try:
                await interaction.message.delete()
            except discord.HTTPException as e:
                logger.warning(f"Failed to delete closed queue message: {e}")

        sent: list[discord.Message] = []

        async def publish(result: Success) -> int:
            message = await channel.send(  # type: ignore[union-attr]
                embed=build_queue_embed(result.users, result.waitlist, self.service.get_last_action()),
                view=QueueView(self),
            )
            sent.append(message)
            return message.id

        try:
            result = await self.service.start(event.guild_id, event.channel_id, event.user_id, publish)
        except StoreError:
            # Untracked message would show a queue nobody can use
            for message in sent:
                try:
                    await message.delete()
                except discord.HTTPException as e:
                    logger.warning(f"Failed to delete untracked queue message: {e}")
            raise

        if result is None:
            logger.warning(f"Queue already exists when reopening in {event.channel_id}")

    async def _on_kick(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        if not await self.service.exists(event.guild_id, event.channel_id):
            await self._reply(interaction, "No active queue in this channel")
            return

        users, waitlist = await self.service.get_state(event.guild_id, event.channel_id)
        names = await self._resolve_names(interaction.guild, users + waitlist)
        result = await self.service.kick(event.guild_id, event.channel_id, event.target or "", names)

        if isinstance(result, Success):
            await self._apply(interaction.channel, event, result)
            await self._reply(interaction, f"Removed <@{result.user_id}> from the queue")
        elif isinstance(result, NotInQueue):
            await self._reply(interaction, f"No queued user matches `{event.target}`")
        elif isinstance(result, OperationError):
            logger.error(f"Error kicking from queue: {result.message}")
            await self._reply(interaction, ERROR_REPLY)

    async def _on_purge(self, interaction: discord.Interaction, event: QueueEvent) -> None:
        if not await self.service.exists(event.guild_id, event.channel_id):
            await self._reply(interaction, "No active queue in this channel")
            return
        await self._close_queue(interaction.channel, event)
        await self._reply(interaction, "Queue closed")

    # ==================== Rendering ====================

    async def _apply(self, channel, event: QueueEvent, result: Success) -> None:
        """Render a membership change and its side effects."""
        message_id = await self.service.get_message_id(event.guild_id, event.channel_id)
        if message_id is None:
            logger.warning(f"No message bound for queue in {event.channel_id}")
            return

        # A failed edit must not skip the close below
        try:
            await channel.get_partial_message(message_id).edit(
                embed=build_queue_embed(result.users, result.waitlist, self.service.get_last_action()),
                view=QueueView(self),
            )
        except discord.HTTPException as e:
            logger.warning(f"Failed to update queue message {message_id}: {e}")

        if result.notification is not None:
            await self._notify(channel, event, result.notification)

        if result.promoted_user:
            await channel.send(promotion_text(result.promoted_user))

        if result.is_empty:
            await self._close_queue(channel, event)

    async def _notify(self, channel, event: QueueEvent, notification: QueueNotification) -> None:
        """Replace the previous milestone message with a new one."""
        await self._retract_notification(channel, event)
        message = await channel.send(notification_text(notification))
        await self.service.set_notification_id(event.guild_id, event.channel_id, message.id)

    async def _retract_notification(self, channel, event: QueueEvent) -> None:
        previous = await self.service.get_notification_id(event.guild_id, event.channel_id)
        if previous is None:
            return
        try:
            await channel.get_partial_message(previous).delete()
        except discord.HTTPException as e:
            logger.debug(f"Previous notification already gone: {e}")
        await self.service.clear_notification_id(event.guild_id, event.channel_id)

    async def _close_queue(self, channel, event: QueueEvent) -> None:
        message_id = await self.service.get_message_id(event.guild_id, event.channel_id)
        notification_id = await self.service.get_notification_id(event.guild_id, event.channel_id)

        await self.service.close(event.guild_id, event.channel_id)

        if message_id is not None:
            try:
                await channel.get_partial_message(message_id).edit(
                    embed=build_closed_embed(), view=ClosedQueueView(self)
                )
            except discord.HTTPException as e:
                logger.warning(f"Failed to mark queue message {message_id} closed: {e}")
        if notification_id is not None:
            try:
                await channel.get_partial_message(notification_id).delete()
            except discord.HTTPException as e:
                logger.debug(f"Notification already gone: {e}")

    async def _resolve_names(self, guild: discord.Guild | None, user_ids: list[str]) -> dict[str, str]:
        """Display names for queued users, cached for a few minutes."""
        if guild is None:
            return {}

        names: dict[str, str] = {}
        for user_id in user_ids:
            cache_key = (guild.id, user_id)
            cached = self._display_names.get(cache_key)
            if cached is not None:
                names[user_id] = cached
                continue

            member = guild.get_member(int(user_id))
            if member is None:
                try:
                    member = await guild.fetch_member(int(user_id))
                except discord.NotFound:
                    continue
            self._display_names[cache_key] = member.display_name
            names[user_id] = member.display_name
        return names

    async def _reply(self, interaction: discord.Interaction, text: str) -> None:
        try:
            if interaction.response.is_done():
                await interaction.followup.send(text, ephemeral=True)
            else:
                await interaction.response.send_message(text, ephemeral=True)
        except discord.HTTPException as e:
            logger.warning(f"Failed to reply to interaction: {e}")
