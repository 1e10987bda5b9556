"""Standby queue UI views (persistent buttons)."""

from typing import TYPE_CHECKING

import discord
from discord import ui

from .constants import DISABLED_SUFFIX, QueueAction

if TYPE_CHECKING:
    from .cog import StandbyCog


class QueueView(ui.View):
    """Join / Leave / Close on an active queue message"""

    def __init__(self, cog: "StandbyCog"):
        super().__init__(timeout=None)
        self.cog = cog

    @ui.button(label="Join", style=discord.ButtonStyle.primary, custom_id=QueueAction.JOIN.value)
    async def join_button(self, interaction: discord.Interaction, button: ui.Button["QueueView"]) -> None:
        await self.cog.handle_component(interaction, QueueAction.JOIN)

    @ui.button(label="Leave", style=discord.ButtonStyle.danger, custom_id=QueueAction.LEAVE.value)
    async def leave_button(self, interaction: discord.Interaction, button: ui.Button["QueueView"]) -> None:
        await self.cog.handle_component(interaction, QueueAction.LEAVE)

    @ui.button(label="Close", style=discord.ButtonStyle.secondary, custom_id=QueueAction.CLOSE.value)
    async def close_button(self, interaction: discord.Interaction, button: ui.Button["QueueView"]) -> None:
        await self.cog.handle_component(interaction, QueueAction.CLOSE)


class ClosedQueueView(ui.View):
    """Closed queue: disabled Join / Leave and an Open button"""

    def __init__(self, cog: "StandbyCog"):
        super().__init__(timeout=None)
        self.cog = cog
        self.add_item(
            ui.Button(
                label="Join",
                style=discord.ButtonStyle.primary,
                custom_id=QueueAction.JOIN.value + DISABLED_SUFFIX,
                disabled=True,
                row=0,
            )
        )
        self.add_item(
            ui.Button(
                label="Leave",
                style=discord.ButtonStyle.danger,
                custom_id=QueueAction.LEAVE.value + DISABLED_SUFFIX,
                disabled=True,
                row=0,
            )
        )
        # Keep Open last in the row
        self.remove_item(self.open_button)
        self.add_item(self.open_button)

    @ui.button(label="Open", style=discord.ButtonStyle.success, custom_id=QueueAction.REOPEN.value, row=0)
    async def open_button(self, interaction: discord.Interaction, button: ui.Button["ClosedQueueView"]) -> None:
        await self.cog.handle_component(interaction, QueueAction.REOPEN)
