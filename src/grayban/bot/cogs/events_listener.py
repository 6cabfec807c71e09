"""Event listener Cog for Grayban.

This cog handles bot lifecycle events (on_ready). Message events are handled
by the MessageListenerCog.
"""

import discord
from discord.ext import commands

from grayban.util.logger import get_logger

logger = get_logger("events_listener_cog")

PRESENCE_STATUS = discord.Status.dnd
PRESENCE_ACTIVITY = discord.Activity(
    type=discord.ActivityType.listening,
    name="the Screams of the Damned",
)


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle handlers."""

    def __init__(self, discord_bot_instance):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        """
        self.bot = discord_bot_instance
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name='on_ready')
    async def on_ready(self):
        """Refresh presence and log the connected identity."""
        if not self.bot.user:
            logger.warning("Bot partially connected, but user information not yet available.")
            return

        await self.bot.change_presence(status=PRESENCE_STATUS, activity=PRESENCE_ACTIVITY)
        logger.info(f"🩸 Bot online as {self.bot.user} (ID: {self.bot.user.id}) - Ready to Feast on Souls")
        logger.info("--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--")


def setup(discord_bot_instance):
    """Register the EventsListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    """
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance))
