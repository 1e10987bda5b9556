"""StandbyCog event handling with fake Discord objects."""

from types import SimpleNamespace

import discord
import pytest

from discord_bot.cogs.standby.cog import ERROR_REPLY, StandbyCog
from discord_bot.cogs.standby.constants import QUEUE_COLOR_ACTIVE, QUEUE_COLOR_CLOSED, QueueAction
from discord_bot.cogs.standby.events import QueueEvent
from discord_bot.cogs.standby.views import ClosedQueueView, QueueView
from shared.repositories.standby_queue import InMemoryQueueStore, StoreError
from shared.services.standby_queue import StandbyQueueService

GUILD_ID = 10
CHANNEL_ID = 20


def not_found() -> discord.NotFound:
    return discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Message")


class FakeMessage:
    def __init__(self, channel: "FakeChannel", message_id: int, content=None, embed=None, view=None):
        self.channel = channel
        self.id = message_id
        self.content = content
        self.embed = embed
        self.view = view
        self.deleted = False
        self.fail = False

    async def edit(self, *, embed=None, view=None):
        if self.fail:
            raise not_found()
        self.embed = embed
        self.view = view

    async def delete(self):
        if self.fail:
            raise not_found()
        self.deleted = True


class FakeChannel:
    def __init__(self) -> None:
        self.messages: dict[int, FakeMessage] = {}
        self.sent: list[FakeMessage] = []
        self._next_id = 1000
        self.fail_send = False
        self.sent_fail = False

    def add(self, content=None, embed=None, view=None) -> FakeMessage:
        self._next_id += 1
        message = FakeMessage(self, self._next_id, content, embed, view)
        self.messages[message.id] = message
        return message

    async def send(self, content=None, *, embed=None, view=None):
        if self.fail_send:
            raise not_found()
        message = self.add(content, embed, view)
        message.fail = self.sent_fail
        self.sent.append(message)
        return message

    def get_partial_message(self, message_id: int) -> FakeMessage:
        return self.messages[message_id]


class FakeResponse:
    def __init__(self, interaction: "FakeInteraction") -> None:
        self.interaction = interaction
        self.done = False
        self.ephemeral: list[str] = []

    def is_done(self) -> bool:
        return self.done

    async def defer(self, **kwargs):
        self.done = True

    async def send_message(self, content=None, *, embed=None, view=None, ephemeral=False):
        self.done = True
        if ephemeral:
            self.ephemeral.append(content)
            return
        self.interaction.original = self.interaction.channel.add(content, embed, view)


class FakeFollowup:
    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, content, ephemeral=False):
        self.sent.append(content)


class FakeInteraction:
    def __init__(self, channel: FakeChannel, user_id: int, message: FakeMessage | None = None):
        self.channel = channel
        self.guild_id = GUILD_ID
        self.channel_id = CHANNEL_ID
        self.guild = None
        self.user = SimpleNamespace(id=user_id)
        self.message = message
        self.response = FakeResponse(self)
        self.followup = FakeFollowup()
        self.original: FakeMessage | None = None

    async def original_response(self):
        return self.original


@pytest.fixture
def service() -> StandbyQueueService:
    return StandbyQueueService(InMemoryQueueStore())


@pytest.fixture
def cog(service) -> StandbyCog:
    bot = SimpleNamespace(add_view=lambda view: None)
    return StandbyCog(bot, service)  # type: ignore[arg-type]


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


async def create_queue(cog: StandbyCog, channel: FakeChannel, user_id: int = 1) -> FakeMessage:
    interaction = FakeInteraction(channel, user_id)
    await cog.dispatch(interaction, QueueEvent.from_interaction(interaction, QueueAction.CREATE))
    assert interaction.original is not None
    return interaction.original


async def click(cog: StandbyCog, channel: FakeChannel, message: FakeMessage, user_id: int, action: QueueAction):
    interaction = FakeInteraction(channel, user_id, message)
    await cog.handle_component(interaction, action)
    return interaction


@pytest.mark.asyncio
async def test_create_renders_and_binds_queue(cog, service, channel):
    message = await create_queue(cog, channel)

    assert await service.is_bound_to(str(GUILD_ID), str(CHANNEL_ID), message.id)
    assert message.embed.color.value == QUEUE_COLOR_ACTIVE
    assert "<@1>" in message.embed.description
    assert isinstance(message.view, QueueView)


@pytest.mark.asyncio
async def test_second_create_is_rejected(cog, channel):
    await create_queue(cog, channel)

    interaction = FakeInteraction(channel, 2)
    await cog.dispatch(interaction, QueueEvent.from_interaction(interaction, QueueAction.CREATE))

    assert interaction.response.ephemeral == ["Queue already exists"]


@pytest.mark.asyncio
async def test_join_to_full_posts_and_replaces_notifications(cog, channel):
    message = await create_queue(cog, channel)

    for user_id in (2, 3, 4):
        await click(cog, channel, message, user_id, QueueAction.JOIN)
    one_more = channel.sent[-1]

    await click(cog, channel, message, 5, QueueAction.JOIN)
    ready = channel.sent[-1]

    assert one_more.deleted
    assert ready.content.startswith("There are enough users for a game!")
    assert "Queued users (5)" in message.embed.description


@pytest.mark.asyncio
async def test_leave_announces_promotion(cog, channel):
    message = await create_queue(cog, channel)
    for user_id in range(2, 7):
        await click(cog, channel, message, user_id, QueueAction.JOIN)

    await click(cog, channel, message, 1, QueueAction.LEAVE)

    assert channel.sent[-1].content == "<@6> you're up!"
    assert "Waitlist" not in message.embed.description


@pytest.mark.asyncio
async def test_last_leave_closes_queue(cog, service, channel):
    message = await create_queue(cog, channel)

    await click(cog, channel, message, 1, QueueAction.LEAVE)

    assert not await service.exists(str(GUILD_ID), str(CHANNEL_ID))
    assert message.embed.color.value == QUEUE_COLOR_CLOSED
    assert isinstance(message.view, ClosedQueueView)


@pytest.mark.asyncio
async def test_stale_clicks_are_ignored(cog, service, channel):
    message = await create_queue(cog, channel)
    stale = channel.add("old queue")

    await click(cog, channel, stale, 2, QueueAction.JOIN)

    users, _ = await service.get_state(str(GUILD_ID), str(CHANNEL_ID))
    assert users == ["1"]
    assert message.id != stale.id


@pytest.mark.asyncio
async def test_close_then_reopen_binds_new_message(cog, service, channel):
    message = await create_queue(cog, channel)
    await click(cog, channel, message, 1, QueueAction.CLOSE)
    assert isinstance(message.view, ClosedQueueView)

    await click(cog, channel, message, 3, QueueAction.REOPEN)

    assert message.deleted
    reopened = channel.sent[-1]
    assert await service.is_bound_to(str(GUILD_ID), str(CHANNEL_ID), reopened.id)
    assert not await service.is_bound_to(str(GUILD_ID), str(CHANNEL_ID), message.id)
    users, _ = await service.get_state(str(GUILD_ID), str(CHANNEL_ID))
    assert users == ["3"]


@pytest.mark.asyncio
async def test_purge_without_queue(cog, channel):
    interaction = FakeInteraction(channel, 1)
    await interaction.response.defer()

    await cog.dispatch(interaction, QueueEvent.from_interaction(interaction, QueueAction.PURGE))

    assert interaction.followup.sent == ["No active queue in this channel"]


def test_event_requires_guild_channel(channel):
    interaction = FakeInteraction(channel, 1)
    interaction.guild_id = None

    with pytest.raises(ValueError):
        QueueEvent.from_interaction(interaction, QueueAction.CREATE)  # type: ignore[arg-type]


def test_custom_id_lookup():
    assert QueueAction.from_custom_id("join_queue") is QueueAction.JOIN
    assert QueueAction.from_custom_id("join_queue_disabled") is None
    assert QueueAction.REOPEN.requires_active_message is False


@pytest.mark.asyncio
async def test_last_leave_closes_even_when_edit_fails(cog, service, channel):
    message = await create_queue(cog, channel)
    message.fail = True

    await click(cog, channel, message, 1, QueueAction.LEAVE)

    assert not await service.exists(str(GUILD_ID), str(CHANNEL_ID))
    assert await service.get_state(str(GUILD_ID), str(CHANNEL_ID)) == ([], [])


@pytest.mark.asyncio
async def test_purge_retracts_notification_when_edit_fails(cog, service, channel):
    message = await create_queue(cog, channel)
    for user_id in (2, 3, 4):
        await click(cog, channel, message, user_id, QueueAction.JOIN)
    one_more = channel.sent[-1]
    message.fail = True

    interaction = FakeInteraction(channel, 9)
    await interaction.response.defer()
    await cog.dispatch(interaction, QueueEvent.from_interaction(interaction, QueueAction.PURGE))

    assert one_more.deleted
    assert interaction.followup.sent == ["Queue closed"]
    assert not await service.exists(str(GUILD_ID), str(CHANNEL_ID))


@pytest.mark.asyncio
async def test_send_failure_replies_with_error(cog, channel):
    message = await create_queue(cog, channel)
    await click(cog, channel, message, 2, QueueAction.JOIN)
    await click(cog, channel, message, 3, QueueAction.JOIN)
    channel.fail_send = True

    interaction = await click(cog, channel, message, 4, QueueAction.JOIN)

    assert interaction.followup.sent == [ERROR_REPLY]


@pytest.mark.asyncio
async def test_reopen_rollback_keeps_store_error_reply(cog, service, channel, monkeypatch):
    message = await create_queue(cog, channel)
    await click(cog, channel, message, 1, QueueAction.CLOSE)

    async def broken_bind(key, message_id):
        raise StoreError("SET failed: connection refused")

    monkeypatch.setattr(service.store, "set_message_id", broken_bind)
    channel.sent_fail = True

    interaction = await click(cog, channel, message, 3, QueueAction.REOPEN)

    assert interaction.followup.sent == [ERROR_REPLY]
    assert not await service.exists(str(GUILD_ID), str(CHANNEL_ID))
    assert await service.get_state(str(GUILD_ID), str(CHANNEL_ID)) == ([], [])
