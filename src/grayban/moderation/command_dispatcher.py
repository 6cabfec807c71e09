"""
Command dispatcher: turns a parsed chat command into store calls and a reply.

Each command has one handler. Handlers raise a :class:`CommandError`
subclass to reject a request; :meth:`CommandDispatcher.handle` converts that
into the reply text in one place, so no rejection ever escapes to the caller.

Mutating commands (``ban-report``, ``unban-report``, ``ban``, ``unban``)
require the Administrator permission. :meth:`CommandDispatcher.handle`
checks it before the handler runs, so no handler repeats the check.

Quick usage example
    dispatcher = CommandDispatcher(report_store, person_store, prefix="!")
    parsed = parse_command(message.content, "!")
    await dispatcher.dispatch(message, parsed)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Union

import discord

from grayban.datatypes.blocklist_datatypes import BanLevel, PersonEntry
from grayban.errors import (
    AuthorizationError,
    CommandError,
    DuplicateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from grayban.moderation.command_parser import CommandName, ParsedCommand
from grayban.repositories.blocklist_repo import BlocklistStore, PersonStore, ReportStore
from grayban.ui import responses
from grayban.util import discord_utils
from grayban.util.logger import get_logger

logger = get_logger("command_dispatcher")

Author = Union[discord.User, discord.Member]


@dataclass
class CommandReply:
    """What to send back to the invoking message."""
    content: Optional[str] = None
    embed: Optional[discord.Embed] = None
    mention_author: bool = True

    def to_kwargs(self) -> dict:
        kwargs: dict = {"mention_author": self.mention_author}
        if self.content is not None:
            kwargs["content"] = self.content
        if self.embed is not None:
            kwargs["embed"] = self.embed
        return kwargs


@dataclass
class CommandContext:
    """Everything a handler needs for one invocation."""
    parsed: ParsedCommand
    author: Author
    report_ids: Sequence[str]


Handler = Callable[[CommandContext], Awaitable[CommandReply]]

# Rejection sent to non-administrators, per command that needs the permission.
ADMIN_REJECTIONS: Dict[CommandName, str] = {
    CommandName.BAN_REPORT: responses.NOT_ADMIN_BAN_REPORT,
    CommandName.UNBAN_REPORT: responses.NOT_ADMIN_UNBAN_REPORT,
    CommandName.BAN: responses.NOT_ADMIN_BAN,
    CommandName.UNBAN: responses.NOT_ADMIN_UNBAN,
}


def is_valid_id(value: Optional[str]) -> bool:
    """An id is a non-empty run of ASCII digits."""
    return bool(value) and value.isascii() and value.isdigit()


class CommandDispatcher:
    """Maps :class:`CommandName` values to handlers over the two stores."""

    def __init__(self, report_store: ReportStore, person_store: PersonStore, prefix: str = "!") -> None:
        self.report_store = report_store
        self.person_store = person_store
        self.prefix = prefix
        self._handlers: Dict[CommandName, Handler] = {
            CommandName.BAN_REPORT: self.ban_report,
            CommandName.UNBAN_REPORT: self.unban_report,
            CommandName.CHECK_REPORT: self.check_report,
            CommandName.LIST_REPORT: self.list_report,
            CommandName.BAN: self.ban_person,
            CommandName.UNBAN: self.unban_person,
            CommandName.CHECK: self.check_person,
            CommandName.LIST: self.list_persons,
            CommandName.HELP: self.show_help,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def dispatch(
        self,
        message: discord.Message,
        parsed: ParsedCommand,
        report_ids: Optional[Sequence[str]] = None,
    ) -> Optional[CommandReply]:
        """Handle ``parsed`` for ``message`` and reply to it.

        ``report_ids`` is the report snapshot the caller already loaded; it is
        loaded here when omitted. Returns the reply that was sent, or None for
        an unrecognised command.
        """
        if report_ids is None:
            report_ids = await load_report_ids(self.report_store)

        reply = await self.handle(parsed, message.author, report_ids)
        if reply is not None:
            await discord_utils.safe_reply(message, **reply.to_kwargs())
        return reply

    async def handle(
        self,
        parsed: ParsedCommand,
        author: Author,
        report_ids: Sequence[str],
    ) -> Optional[CommandReply]:
        """Run the handler for ``parsed`` and return the reply without sending it."""
        handler = self._handlers.get(parsed.name)
        if handler is None:
            logger.debug("[DISPATCHER] Ignoring unrecognised command %r", parsed.token)
            return None

        context = CommandContext(parsed=parsed, author=author, report_ids=report_ids)
        try:
            if parsed.name.requires_admin:
                require_admin(author, ADMIN_REJECTIONS[parsed.name])
            return await handler(context)
        except CommandError as exc:
            logger.debug("[DISPATCHER] %s rejected for %s: %s", parsed.name.value, author, type(exc).__name__)
            return CommandReply(content=exc.reply)

    # ------------------------------------------------------------------
    # Report blocklist
    # ------------------------------------------------------------------

    async def ban_report(self, ctx: CommandContext) -> CommandReply:
        entry_id = ctx.parsed.arg(0)
        if not is_valid_id(entry_id):
            raise ValidationError(responses.INVALID_ID)
        if entry_id in ctx.report_ids:
            raise DuplicateError(responses.ALREADY_BANNED)

        if not await self.report_store.add(entry_id):
            return await insert_failure(self.report_store, entry_id)

        logger.info("[DISPATCHER] %s report-banned id %s", ctx.author, entry_id)
        return CommandReply(content=responses.report_banned(entry_id))

    async def unban_report(self, ctx: CommandContext) -> CommandReply:
        entry_id = require_id(ctx.parsed)
        if entry_id not in ctx.report_ids:
            raise NotFoundError(responses.NOT_FOUND)

        if not await self.report_store.remove(entry_id):
            return await delete_failure(self.report_store, entry_id)

        logger.info("[DISPATCHER] %s lifted report ban on id %s", ctx.author, entry_id)
        return CommandReply(content=responses.report_unbanned(entry_id))

    async def check_report(self, ctx: CommandContext) -> CommandReply:
        entry_id = require_id(ctx.parsed)
        return CommandReply(content=responses.report_status(entry_id, entry_id in ctx.report_ids))

    async def list_report(self, ctx: CommandContext) -> CommandReply:
        if not ctx.report_ids:
            return CommandReply(content=responses.EMPTY_REPORTS)
        return CommandReply(content=responses.report_list(ctx.report_ids))

    # ------------------------------------------------------------------
    # Person blocklist
    # ------------------------------------------------------------------

    async def ban_person(self, ctx: CommandContext) -> CommandReply:
        entry_id = ctx.parsed.arg(0)
        if not is_valid_id(entry_id):
            raise ValidationError(responses.INVALID_ID)
        try:
            level = BanLevel.parse(ctx.parsed.arg(1))
        except ValueError:
            raise ValidationError(responses.INVALID_LEVEL) from None

        persons = await load_persons(self.person_store)
        if any(person.id == entry_id for person in persons):
            raise DuplicateError(responses.ALREADY_BANNED)

        if not await self.person_store.add(entry_id, level):
            return await insert_failure(self.person_store, entry_id)

        logger.info("[DISPATCHER] %s banned id %s at level %d", ctx.author, entry_id, level)
        return CommandReply(content=responses.person_banned(entry_id, int(level)))

    async def unban_person(self, ctx: CommandContext) -> CommandReply:
        entry_id = require_id(ctx.parsed)

        persons = await load_persons(self.person_store)
        if not any(person.id == entry_id for person in persons):
            raise NotFoundError(responses.NOT_FOUND)

        if not await self.person_store.remove(entry_id):
            return await delete_failure(self.person_store, entry_id)

        logger.info("[DISPATCHER] %s unbanned id %s", ctx.author, entry_id)
        return CommandReply(content=responses.person_unbanned(entry_id))

    async def check_person(self, ctx: CommandContext) -> CommandReply:
        entry_id = require_id(ctx.parsed)
        entry = await lookup_person(self.person_store, entry_id)
        return CommandReply(content=responses.person_status(entry_id, entry))

    async def list_persons(self, ctx: CommandContext) -> CommandReply:
        persons = await load_persons(self.person_store)
        if not persons:
            return CommandReply(content=responses.EMPTY_PERSONS)
        return CommandReply(content=responses.person_list(persons))

    # ------------------------------------------------------------------
    # Misc
    # ------------------------------------------------------------------

    async def show_help(self, ctx: CommandContext) -> CommandReply:
        return CommandReply(embed=responses.build_help_embed(self.prefix), mention_author=False)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def require_admin(author: Author, reply: str) -> None:
    if not discord_utils.is_administrator(author):
        raise AuthorizationError(reply)


def require_id(parsed: ParsedCommand) -> str:
    entry_id = parsed.arg(0)
    if entry_id is None:
        raise ValidationError(responses.MISSING_ID)
    return entry_id


async def load_report_ids(store: ReportStore) -> List[str]:
    """Report snapshot, or an empty list when the store cannot be read."""
    try:
        return await store.list_ids()
    except StorageError as exc:
        logger.error("[DISPATCHER] Report blocklist unavailable, treating as empty: %s", exc)
        return []


async def load_persons(store: PersonStore) -> List[PersonEntry]:
    """Person snapshot, or an empty list when the store cannot be read."""
    try:
        return await store.list_all()
    except StorageError as exc:
        logger.error("[DISPATCHER] Person blocklist unavailable, treating as empty: %s", exc)
        return []


async def lookup_person(store: PersonStore, entry_id: str) -> Optional[PersonEntry]:
    """Stored entry for ``entry_id``, or None when absent or the store cannot be read."""
    try:
        return await store.get(entry_id)
    except StorageError as exc:
        logger.error("[DISPATCHER] Person blocklist unavailable, treating %s as free: %s", entry_id, exc)
        return None


async def insert_failure(store: BlocklistStore, entry_id: str) -> CommandReply:
    """Explain a failed ``add``: the PRIMARY KEY may have beaten our presence check."""
    try:
        stored = await store.contains(entry_id)
    except StorageError as exc:
        logger.error("[DISPATCHER] Could not confirm id %s after failed insert: %s", entry_id, exc)
        return CommandReply(content=responses.STORAGE_FAILURE)
    if stored:
        raise DuplicateError(responses.ALREADY_BANNED)
    return CommandReply(content=responses.STORAGE_FAILURE)


async def delete_failure(store: BlocklistStore, entry_id: str) -> CommandReply:
    """Explain a failed ``remove``: the row may already be gone."""
    try:
        stored = await store.contains(entry_id)
    except StorageError as exc:
        logger.error("[DISPATCHER] Could not confirm id %s after failed delete: %s", entry_id, exc)
        return CommandReply(content=responses.STORAGE_FAILURE)
    if not stored:
        raise NotFoundError(responses.NOT_FOUND)
    return CommandReply(content=responses.STORAGE_FAILURE)
