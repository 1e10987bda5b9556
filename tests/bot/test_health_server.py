import json
from types import SimpleNamespace

import pytest

from discord_bot.core.health_server import HealthCheckServer
from shared.repositories import InMemoryQueueStore


class FakeBot:
    def __init__(self, ready: bool):
        self.ready = ready
        self.user = SimpleNamespace(id=123)
        self.guilds = [object(), object()]

    def is_ready(self) -> bool:
        return self.ready


@pytest.mark.asyncio
async def test_health_reports_starting_until_ready():
    server = HealthCheckServer(FakeBot(ready=False), port=0)

    response = await server.handle_health(None)  # type: ignore[arg-type]

    assert response.status == 200
    assert json.loads(response.text) == {"status": "starting", "ready": False}


@pytest.mark.asyncio
async def test_status_includes_store_reachability():
    server = HealthCheckServer(FakeBot(ready=True), InMemoryQueueStore(), port=0)

    body = json.loads((await server.handle_status(None)).text)  # type: ignore[arg-type]

    assert body["bot_id"] == "123"
    assert body["connected_guilds"] == 2
    assert body["store"] == "InMemoryQueueStore"
    assert body["store_reachable"] is True


@pytest.mark.asyncio
async def test_ping():
    server = HealthCheckServer(port=0)

    assert (await server.handle_ping(None)).text == "pong"  # type: ignore[arg-type]
