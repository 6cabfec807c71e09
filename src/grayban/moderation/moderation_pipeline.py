"""
Per-message moderation pipeline.

Every guild message goes through the same steps, in order:

1. Messages from bots (including Grayban itself) and DMs are ignored.
2. A body equal to the trigger word (case-insensitive, trimmed) gets the
   fixed attachment reply and nothing else happens.
3. The report blocklist is loaded once and the text is scanned for
   ``[digits]`` ids.
4. If any scanned id is report-banned, the message is deleted and the author
   is told why. Enforcement wins over command handling.
5. Otherwise the message is parsed and handed to the command dispatcher with
   the snapshot from step 3.

Discord failures while deleting or replying are logged by the helpers in
:mod:`grayban.util.discord_utils` and never propagate out of
:meth:`ModerationPipeline.process`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import discord

from grayban.moderation.command_dispatcher import CommandDispatcher, load_report_ids
from grayban.moderation.command_parser import parse_command
from grayban.moderation.pattern_scanner import find_blocked_ids
from grayban.repositories.blocklist_repo import ReportStore
from grayban.ui import responses
from grayban.util import discord_utils
from grayban.util.logger import get_logger

logger = get_logger("moderation_pipeline")


class PipelineOutcome(Enum):
    """Terminal state reached for one message."""
    IGNORED = "ignored"
    TRIGGERED = "triggered"
    ENFORCED = "enforced"
    FORWARDED = "forwarded"


@dataclass(frozen=True)
class TriggerReply:
    """Fixed reply for the trigger word."""
    word: str = "uwu"
    image_url: str = responses.HELP_THUMBNAIL_URL
    filename: str = "cursed_image.png"
    text: str = "**🩸 The Dark Ones Whisper...**"

    def matches(self, content: str | None) -> bool:
        return (content or "").strip().lower() == self.word.strip().lower()


class ModerationPipeline:
    """Routes each inbound message to the trigger reply, enforcement, or a command."""

    def __init__(
        self,
        report_store: ReportStore,
        dispatcher: CommandDispatcher,
        *,
        prefix: str = "!",
        trigger: TriggerReply | None = None,
    ) -> None:
        self.report_store = report_store
        self.dispatcher = dispatcher
        self.prefix = prefix
        self.trigger = trigger or TriggerReply()

    async def process(self, message: discord.Message) -> PipelineOutcome:
        """Run one message through the pipeline and return where it ended."""
        if message.guild is None or discord_utils.is_ignored_author(message.author):
            return PipelineOutcome.IGNORED

        if self.trigger.matches(message.content):
            await self.send_trigger_reply(message.channel)
            return PipelineOutcome.TRIGGERED

        report_ids = await load_report_ids(self.report_store)

        blocked = find_blocked_ids(message.content, report_ids)
        if blocked:
            await self.enforce(message, blocked)
            return PipelineOutcome.ENFORCED

        parsed = parse_command(message.content, self.prefix)
        if parsed.is_known:
            await self.dispatcher.dispatch(message, parsed, report_ids)
        return PipelineOutcome.FORWARDED

    async def enforce(self, message: discord.Message, blocked: list[str]) -> None:
        """Delete ``message`` and post a notice addressed to its author."""
        logger.info(
            "[PIPELINE] Removing message %s from %s in channel %s (cursed ids: %s)",
            message.id, message.author, message.channel.id, ", ".join(blocked),
        )
        await discord_utils.safe_delete(message)
        await discord_utils.safe_send(
            message.channel, content=responses.enforcement_notice(message.author.mention)
        )

    async def send_trigger_reply(self, channel: discord.abc.Messageable) -> None:
        attachment = await discord_utils.fetch_attachment(self.trigger.image_url, self.trigger.filename)
        if attachment is None:
            await discord_utils.safe_send(channel, content=f"{self.trigger.text}\n{self.trigger.image_url}")
            return
        await discord_utils.safe_send(channel, content=self.trigger.text, file=attachment)
