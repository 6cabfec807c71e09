"""
Small helpers around discord objects used by the pipeline and dispatcher.

The send/delete helpers swallow Discord API failures after logging them so a
single bad message cannot stop the bot from handling the next one.
"""

from __future__ import annotations

import io
from typing import Any, Optional, Union

import aiohttp
import discord

from grayban.util.logger import get_logger

logger = get_logger("discord_utils")

ATTACHMENT_FETCH_TIMEOUT = aiohttp.ClientTimeout(total=10)


def is_ignored_author(author: Union[discord.User, discord.Member]) -> bool:
    """
    Check if a message author should be ignored (any bot account, including ourselves).

    Args:
        author (discord.User | discord.Member): The message author.

    Returns:
        bool: True if the author is a bot.
    """
    return bool(getattr(author, "bot", False))


def is_administrator(author: Union[discord.User, discord.Member]) -> bool:
    """
    Check if the author holds the Administrator permission in the guild.

    Users outside a guild (DMs) are never administrators.
    """
    if not isinstance(author, discord.Member):
        return False
    return bool(author.guild_permissions.administrator)


async def safe_delete(message: discord.Message) -> bool:
    """Delete ``message``; log and return False if Discord refuses."""
    try:
        await message.delete()
        return True
    except discord.NotFound:
        logger.warning("[DISCORD] Message %s was already deleted", message.id)
    except discord.Forbidden:
        logger.error("[DISCORD] Missing permission to delete message %s in channel %s", message.id, message.channel.id)
    except discord.HTTPException as exc:
        logger.error("[DISCORD] Failed to delete message %s: %s", message.id, exc)
    return False


async def safe_send(channel: discord.abc.Messageable, **kwargs: Any) -> Optional[discord.Message]:
    """Send to ``channel``; log and return None on failure."""
    try:
        return await channel.send(**kwargs)
    except discord.HTTPException as exc:
        logger.error("[DISCORD] Failed to send message to %s: %s", getattr(channel, "id", channel), exc)
        return None


async def safe_reply(message: discord.Message, **kwargs: Any) -> Optional[discord.Message]:
    """Reply to ``message``; log and return None on failure."""
    try:
        return await message.reply(**kwargs)
    except discord.HTTPException as exc:
        logger.error("[DISCORD] Failed to reply to message %s: %s", message.id, exc)
        return None


async def fetch_attachment(url: str, filename: str) -> Optional[discord.File]:
    """
    Download ``url`` and wrap it as a :class:`discord.File` named ``filename``.

    Returns:
        discord.File | None: The file, or None if the download failed.
    """
    try:
        async with aiohttp.ClientSession(timeout=ATTACHMENT_FETCH_TIMEOUT) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                payload = await response.read()
    except (aiohttp.ClientError, TimeoutError) as exc:
        logger.warning("[DISCORD] Could not fetch attachment %s: %s", url, exc)
        return None
    return discord.File(io.BytesIO(payload), filename=filename)
