import logging

import pytest
from rich.logging import RichHandler

from discord_bot.core import logging as bot_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_uses_rich_handler(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")

    bot_logging.setup_logging()

    assert any(isinstance(h, RichHandler) for h in restore_root_logger.handlers)
    assert restore_root_logger.level == logging.DEBUG
    assert logging.getLogger("discord").level == logging.WARNING


def test_falls_back_to_plain_handler(restore_root_logger, monkeypatch):
    def broken_handler(*args, **kwargs):
        raise ValueError("unsupported console")

    monkeypatch.setattr(bot_logging, "RichHandler", broken_handler)

    bot_logging.setup_logging()

    assert restore_root_logger.handlers
    assert not any(isinstance(h, RichHandler) for h in restore_root_logger.handlers)
