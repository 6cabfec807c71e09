"""Tests for the discord helper functions."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import discord
import pytest

from grayban.util import discord_utils

from conftest import make_member, make_message


def http_error(cls, status: int):
    return cls(MagicMock(status=status, reason="error"), "error")


def test_is_ignored_author():
    assert discord_utils.is_ignored_author(make_member(bot=True))
    assert not discord_utils.is_ignored_author(make_member(bot=False))
    assert not discord_utils.is_ignored_author(SimpleNamespace())


def test_is_administrator():
    assert discord_utils.is_administrator(make_member(administrator=True))
    assert not discord_utils.is_administrator(make_member(administrator=False))


def test_plain_user_is_not_administrator():
    user = MagicMock(spec=discord.User)
    assert not discord_utils.is_administrator(user)


@pytest.mark.asyncio
async def test_safe_delete_success():
    message = make_message("x")
    assert await discord_utils.safe_delete(message) is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        http_error(discord.NotFound, 404),
        http_error(discord.Forbidden, 403),
        http_error(discord.HTTPException, 500),
    ],
)
async def test_safe_delete_swallows_http_errors(error):
    message = make_message("x")
    message.delete = AsyncMock(side_effect=error)
    assert await discord_utils.safe_delete(message) is False


@pytest.mark.asyncio
async def test_safe_delete_propagates_unexpected_errors():
    message = make_message("x")
    message.delete = AsyncMock(side_effect=RuntimeError("bug"))
    with pytest.raises(RuntimeError):
        await discord_utils.safe_delete(message)


@pytest.mark.asyncio
async def test_safe_send_and_reply_return_none_on_failure():
    message = make_message("x")
    message.reply = AsyncMock(side_effect=http_error(discord.Forbidden, 403))
    message.channel.send = AsyncMock(side_effect=http_error(discord.HTTPException, 500))

    assert await discord_utils.safe_reply(message, content="hi") is None
    assert await discord_utils.safe_send(message.channel, content="hi") is None


@pytest.mark.asyncio
async def test_fetch_attachment_failure_returns_none(monkeypatch):
    class FailingSession:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        def get(self, url):
            raise aiohttp.ClientConnectionError("offline")

    monkeypatch.setattr(discord_utils.aiohttp, "ClientSession", FailingSession)

    assert await discord_utils.fetch_attachment("https://example.invalid/x.png", "x.png") is None


@pytest.mark.asyncio
async def test_fetch_attachment_wraps_payload(monkeypatch):
    class Response:
        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        def raise_for_status(self):
            pass

        async def read(self):
            return b"\x89PNG"

    class Session:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        def get(self, url):
            return Response()

    monkeypatch.setattr(discord_utils.aiohttp, "ClientSession", Session)

    attachment = await discord_utils.fetch_attachment("https://example.com/x.png", "cursed_image.png")

    assert isinstance(attachment, discord.File)
    assert attachment.filename == "cursed_image.png"
