"""Core modules for Discord bot."""

from .config import BOT_NAME, BOT_VERSION, DISCORD_DIR, BotConfig
from .health_server import HealthCheckServer
from .logging import setup_logging

__all__ = [
    # Config
    "BotConfig",
    "BOT_NAME",
    "BOT_VERSION",
    # Paths
    "DISCORD_DIR",
    # Services
    "HealthCheckServer",
    # Logging
    "setup_logging",
]
