"""Tests for the chat command dispatcher."""

from unittest.mock import AsyncMock

import pytest

from grayban.moderation.command_dispatcher import ADMIN_REJECTIONS, CommandDispatcher, is_valid_id
from grayban.moderation.command_parser import CommandName, parse_command
from grayban.ui import responses

from conftest import make_member, make_message


async def run(dispatcher: CommandDispatcher, text: str, author, report_ids=None):
    """Handle ``text`` and return the reply content (or embed)."""
    if report_ids is None:
        report_ids = await dispatcher.report_store.list_ids()
    reply = await dispatcher.handle(parse_command(text), author, report_ids)
    return reply


class TestIsValidId:
    def test_digits_are_valid(self):
        assert is_valid_id("123456789")

    @pytest.mark.parametrize("value", [None, "", "abc", "12a", "-5", "1.5", "١٢٣"])
    def test_everything_else_is_invalid(self, value):
        assert not is_valid_id(value)


class TestReportCommands:
    """ban-report / unban-report / check-report / list-report."""

    async def test_ban_report_then_check_and_list(self, dispatcher, admin, member):
        reply = await run(dispatcher, "!ban-report 999", admin)
        assert reply.content == responses.report_banned("999")

        reply = await run(dispatcher, "!check-report 999", member)
        assert reply.content == responses.report_status("999", True)

        reply = await run(dispatcher, "!list-report", member)
        assert reply.content == "📋 Cursed IDs: 999"

    async def test_ban_report_twice_is_duplicate(self, dispatcher, admin):
        await run(dispatcher, "!ban-report 999", admin)
        reply = await run(dispatcher, "!ban-report 999", admin)
        assert reply.content == responses.ALREADY_BANNED
        assert await dispatcher.report_store.count() == 1

    async def test_ban_report_rejects_non_numeric(self, dispatcher, admin):
        reply = await run(dispatcher, "!ban-report abc", admin)
        assert reply.content == responses.INVALID_ID
        assert await dispatcher.report_store.count() == 0

    async def test_ban_report_rejects_missing_id(self, dispatcher, admin):
        reply = await run(dispatcher, "!ban-report", admin)
        assert reply.content == responses.INVALID_ID

    async def test_unban_report(self, dispatcher, admin, member):
        await run(dispatcher, "!ban-report 999", admin)
        reply = await run(dispatcher, "!unban-report 999", admin)
        assert reply.content == responses.report_unbanned("999")

        reply = await run(dispatcher, "!check-report 999", member)
        assert reply.content == responses.free_status("999")

    async def test_unban_report_missing_entry(self, dispatcher, admin):
        reply = await run(dispatcher, "!unban-report 5", admin)
        assert reply.content == responses.NOT_FOUND

    async def test_unban_report_requires_id(self, dispatcher, admin):
        reply = await run(dispatcher, "!unban-report", admin)
        assert reply.content == responses.MISSING_ID

    async def test_check_report_requires_id(self, dispatcher, member):
        reply = await run(dispatcher, "!check-report", member)
        assert reply.content == responses.MISSING_ID

    async def test_list_report_empty(self, dispatcher, member):
        reply = await run(dispatcher, "!list-report", member)
        assert reply.content == responses.EMPTY_REPORTS

    async def test_list_report_joins_ids(self, dispatcher, admin):
        reply = await run(dispatcher, "!list-report", admin, report_ids=["1", "2"])
        assert reply.content == "📋 Cursed IDs: 1, 2"

    async def test_legacy_spelling_works(self, dispatcher, admin):
        reply = await run(dispatcher, "!banreport 77", admin)
        assert reply.content == responses.report_banned("77")


class TestPersonCommands:
    """ban / unban / check / list."""

    async def test_ban_defaults_to_level_one(self, dispatcher, admin, member):
        reply = await run(dispatcher, "!ban 42", admin)
        assert reply.content == responses.person_banned("42", 1)

        reply = await run(dispatcher, "!check 42", member)
        assert reply.content == "❌ The ID 42 remains banished with level 1!"

    async def test_ban_with_level_two(self, dispatcher, admin, member):
        await run(dispatcher, "!ban 42 2", admin)
        reply = await run(dispatcher, "!list", member)
        assert reply.content == "📋 Banished Persons: 42 (Level 2)"

    @pytest.mark.parametrize("level", ["3", "0", "x", "-1", "+2", "٢"])
    async def test_ban_rejects_bad_level(self, dispatcher, admin, level):
        reply = await run(dispatcher, f"!ban 42 {level}", admin)
        assert reply.content == responses.INVALID_LEVEL
        assert await dispatcher.person_store.list_all() == []

    async def test_ban_checks_id_before_level(self, dispatcher, admin):
        reply = await run(dispatcher, "!ban abc 3", admin)
        assert reply.content == responses.INVALID_ID

    async def test_ban_twice_is_duplicate(self, dispatcher, admin):
        await run(dispatcher, "!ban 42 1", admin)
        reply = await run(dispatcher, "!ban 42 2", admin)
        assert reply.content == responses.ALREADY_BANNED
        assert (await dispatcher.person_store.get("42")).level == 1

    async def test_unban(self, dispatcher, admin, member):
        await run(dispatcher, "!ban 42", admin)
        reply = await run(dispatcher, "!unban 42", admin)
        assert reply.content == responses.person_unbanned("42")

        reply = await run(dispatcher, "!checkban 42", member)
        assert reply.content == responses.free_status("42")

    async def test_unban_missing(self, dispatcher, admin):
        reply = await run(dispatcher, "!unban 42", admin)
        assert reply.content == responses.NOT_FOUND

    async def test_check_requires_id(self, dispatcher, member):
        reply = await run(dispatcher, "!check", member)
        assert reply.content == responses.MISSING_ID

    async def test_check_with_unreadable_store_is_free(self, dispatcher, member):
        await dispatcher.person_store.close()
        reply = await run(dispatcher, "!check 42", member, report_ids=[])
        assert reply.content == responses.free_status("42")

    async def test_list_empty(self, dispatcher, member):
        reply = await run(dispatcher, "!list", member)
        assert reply.content == responses.EMPTY_PERSONS

    async def test_person_and_report_lists_are_separate(self, dispatcher, admin, member):
        await run(dispatcher, "!ban 42", admin)
        reply = await run(dispatcher, "!check-report 42", member)
        assert reply.content == responses.free_status("42")


class TestAuthorization:
    """Mutating commands require Administrator."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("!ban-report 1", responses.NOT_ADMIN_BAN_REPORT),
            ("!unban-report 1", responses.NOT_ADMIN_UNBAN_REPORT),
            ("!ban 1 2", responses.NOT_ADMIN_BAN),
            ("!unban 1", responses.NOT_ADMIN_UNBAN),
        ],
    )
    async def test_non_admin_is_rejected_without_mutation(self, dispatcher, member, text, expected):
        await dispatcher.report_store.add("1")
        await dispatcher.person_store.add("1", 1)

        reply = await run(dispatcher, text, member)

        assert reply.content == expected
        assert await dispatcher.report_store.list_ids() == ["1"]
        assert [p.id for p in await dispatcher.person_store.list_all()] == ["1"]

    async def test_gate_runs_before_validation(self, dispatcher, member):
        reply = await run(dispatcher, "!ban-report not-a-number", member)
        assert reply.content == responses.NOT_ADMIN_BAN_REPORT

    async def test_dm_author_is_never_admin(self, dispatcher):
        user = object()
        reply = await run(dispatcher, "!ban 1", user, report_ids=[])
        assert reply.content == responses.NOT_ADMIN_BAN

    async def test_handler_never_runs_for_non_admin(self, dispatcher, member):
        handler = AsyncMock()
        dispatcher._handlers[CommandName.UNBAN] = handler

        reply = await run(dispatcher, "!unban 1", member, report_ids=[])

        assert reply.content == responses.NOT_ADMIN_UNBAN
        handler.assert_not_awaited()

    async def test_every_admin_command_has_a_rejection(self):
        for name in CommandName:
            assert (name in ADMIN_REJECTIONS) == name.requires_admin

    async def test_read_commands_need_no_admin(self, dispatcher, member):
        assert (await run(dispatcher, "!list", member)).content == responses.EMPTY_PERSONS
        assert (await run(dispatcher, "!list-report", member)).content == responses.EMPTY_REPORTS


class TestStorageRaces:
    """The PRIMARY KEY stays the authority when the snapshot is stale."""

    async def test_stale_snapshot_duplicate_is_reported(self, dispatcher, admin):
        await dispatcher.report_store.add("5")
        reply = await run(dispatcher, "!ban-report 5", admin, report_ids=[])
        assert reply.content == responses.ALREADY_BANNED
        assert await dispatcher.report_store.count() == 1

    async def test_stale_snapshot_missing_row_is_not_found(self, dispatcher, admin):
        reply = await run(dispatcher, "!unban-report 5", admin, report_ids=["5"])
        assert reply.content == responses.NOT_FOUND

    async def test_failed_insert_gives_storage_failure(self, dispatcher, admin, monkeypatch):
        monkeypatch.setattr(dispatcher.person_store, "add", AsyncMock(return_value=False))
        reply = await run(dispatcher, "!ban 9", admin)
        assert reply.content == responses.STORAGE_FAILURE


class TestMisc:
    async def test_unknown_command_has_no_reply(self, dispatcher, member):
        assert await run(dispatcher, "!dance", member) is None
        assert await run(dispatcher, "hello there", member) is None

    async def test_help_is_embed_without_mention(self, dispatcher, member):
        reply = await run(dispatcher, "!help", member)
        assert reply.content is None
        assert reply.embed.footer.text == responses.HELP_FOOTER
        assert reply.mention_author is False
        assert len(reply.embed.fields) == 3

    async def test_dispatch_replies_to_message(self, dispatcher, admin):
        message = make_message("!ban-report 31", author=admin)
        reply = await dispatcher.dispatch(message, parse_command(message.content))
        message.reply.assert_awaited_once_with(content=reply.content, mention_author=True)
        assert await dispatcher.report_store.contains("31")

    async def test_dispatch_unknown_sends_nothing(self, dispatcher):
        message = make_message("!nope", author=make_member())
        assert await dispatcher.dispatch(message, parse_command(message.content), []) is None
        message.reply.assert_not_awaited()
