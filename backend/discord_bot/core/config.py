"""Discord Bot configuration"""

import logging
import os
from pathlib import Path

import discord
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DISCORD_DIR = Path(__file__).resolve().parent.parent

BOT_NAME = "standby-bot"
BOT_VERSION = "2.0.0"

# .env next to the bot package; process environment wins
load_dotenv(dotenv_path=DISCORD_DIR / ".env", encoding="utf-8")

COMMAND_STANDBY = "standby"
COMMAND_STANDBY_DESC = "Start a standby queue"
COMMAND_KICK = "standby-kick"
COMMAND_KICK_DESC = "Remove someone from the standby queue"
COMMAND_PURGE = "standby-purge"
COMMAND_PURGE_DESC = "Close the standby queue in this channel"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BotConfig:
    TOKEN: str = os.getenv("DISCORD_BOT_TOKEN", "")
    GUILD_ID: str = os.getenv("DISCORD_GUILD_ID", "")

    REDIS_URL: str = os.getenv("REDIS_URL", "")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    STATUS: str = os.getenv("DISCORD_STATUS", "online")
    ACTIVITY_NAME: str = os.getenv("DISCORD_ACTIVITY_NAME", "Type /standby to join")

    NOTIFY_ON_LEAVE: bool = _env_flag("STANDBY_NOTIFY_ON_LEAVE")

    HEALTH_PORT: int = int(os.getenv("PORT", "8000"))

    @classmethod
    def get_status(cls) -> discord.Status:
        status_map = {
            "online": discord.Status.online,
            "idle": discord.Status.idle,
            "dnd": discord.Status.dnd,
            "invisible": discord.Status.invisible,
        }
        return status_map.get(cls.STATUS.lower(), discord.Status.online)

    @classmethod
    def get_activity(cls) -> discord.CustomActivity | None:
        """Presence text shown under the bot name (custom status)."""
        if not cls.ACTIVITY_NAME:
            return None
        return discord.CustomActivity(name=cls.ACTIVITY_NAME)
