"""Standby queue feature module."""

from .cog import StandbyCog

__all__ = ["StandbyCog", "setup"]


async def setup(bot):
    """Extension entry point."""
    await bot.add_cog(StandbyCog(bot, bot.queue_service))
