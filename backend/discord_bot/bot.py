"""
Standby queue Discord bot
discord.py 2.x with slash commands and persistent buttons
"""

import asyncio
import logging

import discord
from discord.ext import commands

from discord_bot.core import BotConfig, HealthCheckServer, setup_logging
from shared.repositories import QueueStore, create_store
from shared.services.standby_queue import StandbyQueueService

logger = logging.getLogger("discord_bot")


class StandbyBot(commands.Bot):
    """Standby queue bot client"""

    def __init__(self):
        intents = discord.Intents.default()
        intents.members = True  # display names for /standby-kick

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.initial_extensions = [
            "discord_bot.cogs.standby",
        ]

        self.store: QueueStore | None = None
        self.queue_service: StandbyQueueService | None = None
        self.health_server = HealthCheckServer(self)

    async def setup_hook(self):
        """Connect storage, load cogs, sync slash commands"""
        self.store = await create_store(BotConfig.REDIS_URL, BotConfig.DATABASE_URL)
        self.queue_service = StandbyQueueService(
            self.store, notify_on_leave=BotConfig.NOTIFY_ON_LEAVE
        )
        self.health_server.store = self.store
        await self.health_server.start()

        for extension in self.initial_extensions:
            await self.load_extension(extension)
        logger.info(f"Loaded extensions: {', '.join(self.initial_extensions)}")

        logger.info("Syncing slash commands...")
        if BotConfig.GUILD_ID:
            # Guild sync is instant, global sync can take up to an hour
            guild = discord.Object(id=int(BotConfig.GUILD_ID))
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            logger.info(f"Slash commands synced to guild {BotConfig.GUILD_ID}")
        else:
            await self.tree.sync()
            logger.info("Slash commands synced globally")

    async def on_ready(self):
        await self.change_presence(
            status=BotConfig.get_status(), activity=BotConfig.get_activity()
        )
        logger.info(f"Bot ready: {self.user} (ID: {self.user.id if self.user else '?'})")
        logger.info(f"Connected to {len(self.guilds)} guilds | discord.py {discord.__version__}")

    async def close(self):
        await self.health_server.stop()
        if self.store is not None:
            await self.store.close()
        await super().close()


async def main():
    """Bot entry point"""
    setup_logging()

    token = BotConfig.TOKEN
    if not token:
        logger.error("DISCORD_BOT_TOKEN is not set")
        logger.error("Set it in the environment or in discord_bot/.env: DISCORD_BOT_TOKEN=your_token_here")
        return

    async with StandbyBot() as bot:
        await bot.start(token)


def run() -> None:
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped manually")


if __name__ == "__main__":
    run()
