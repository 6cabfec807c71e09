from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from grayban.bot.cogs import events_listener, message_listener
from grayban.moderation.moderation_pipeline import PipelineOutcome


def test_setup_registers_cogs():
    captured = []
    fake_bot = SimpleNamespace(add_cog=captured.append)
    pipeline = SimpleNamespace()

    events_listener.setup(fake_bot)
    message_listener.setup(fake_bot, pipeline)

    assert isinstance(captured[0], events_listener.EventsListenerCog)
    assert isinstance(captured[1], message_listener.MessageListenerCog)
    assert captured[1].pipeline is pipeline


@pytest.mark.asyncio
async def test_on_message_runs_pipeline():
    pipeline = SimpleNamespace(process=AsyncMock(return_value=PipelineOutcome.FORWARDED))
    cog = message_listener.MessageListenerCog(SimpleNamespace(), pipeline)
    message = SimpleNamespace(id=1, author="someone")

    await cog.on_message(message)

    pipeline.process.assert_awaited_once_with(message)


@pytest.mark.asyncio
async def test_on_message_swallows_pipeline_errors():
    pipeline = SimpleNamespace(process=AsyncMock(side_effect=RuntimeError("boom")))
    cog = message_listener.MessageListenerCog(SimpleNamespace(), pipeline)

    await cog.on_message(SimpleNamespace(id=1, author="someone"))


@pytest.mark.asyncio
async def test_on_ready_sets_presence():
    bot = SimpleNamespace(user=SimpleNamespace(id=5), change_presence=AsyncMock())
    cog = events_listener.EventsListenerCog(bot)

    await cog.on_ready()

    bot.change_presence.assert_awaited_once_with(
        status=events_listener.PRESENCE_STATUS,
        activity=events_listener.PRESENCE_ACTIVITY,
    )


@pytest.mark.asyncio
async def test_on_ready_without_user_skips_presence():
    bot = SimpleNamespace(user=None, change_presence=AsyncMock())
    cog = events_listener.EventsListenerCog(bot)

    await cog.on_ready()

    bot.change_presence.assert_not_awaited()
