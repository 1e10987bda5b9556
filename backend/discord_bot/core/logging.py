"""Logging configuration"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def setup_logging() -> None:
    """Configure application logging with Rich handler"""
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    try:
        console = Console(force_terminal=True, width=120)

        rich_handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            tracebacks_width=120,
        )
        rich_handler.setFormatter(
            logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%Y-%m-%d %H:%M:%S]")
        )

        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%Y-%m-%d %H:%M:%S]",
            handlers=[rich_handler],
            force=True,
        )
    except (OSError, ValueError) as e:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )
        logging.getLogger(__name__).warning(
            f"Rich logging setup failed: {e}, using standard logging"
        )

    # Reduce discord.py log noise
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
