"""Message listener Cog for Grayban.

Feeds every ``on_message`` event into the moderation pipeline. The pipeline
is built at startup and injected here; the cog owns no state of its own.
"""

import discord
from discord.ext import commands

from grayban.moderation.moderation_pipeline import ModerationPipeline
from grayban.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for handling message creation events."""

    def __init__(self, discord_bot_instance, pipeline: ModerationPipeline):
        """
        Initialize the message listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        pipeline:
            Moderation pipeline every message is routed through.
        """
        self.bot = discord_bot_instance
        self.pipeline = pipeline
        logger.info("Message listener cog loaded")

    @commands.Cog.listener(name='on_message')
    async def on_message(self, message: discord.Message):
        """Route a new message through the moderation pipeline."""
        try:
            outcome = await self.pipeline.process(message)
        except Exception as e:
            logger.error(f"Error processing message {message.id}: {e}", exc_info=True)
            return
        logger.debug(f"Message {message.id} from {message.author}: {outcome.value}")


def setup(discord_bot_instance, pipeline: ModerationPipeline):
    """
    Register the MessageListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    pipeline:
        Moderation pipeline shared with the rest of the runtime.
    """
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance, pipeline))
