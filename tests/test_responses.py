import discord

from grayban.datatypes.blocklist_datatypes import BanLevel, PersonEntry
from grayban.ui import responses


def test_help_embed_lists_every_command():
    embed = responses.build_help_embed("!")

    assert len(embed.fields) == 3
    report_field, person_field, _ = embed.fields
    for name in ("ban-report", "unban-report", "check-report", "list-report"):
        assert f"!{name}" in report_field.value
    for name in ("ban <ID> [level]", "unban <ID>", "check <ID>", "list`"):
        assert f"!{name}" in person_field.value
    assert embed.footer.text == responses.HELP_FOOTER
    assert embed.thumbnail.url == responses.HELP_THUMBNAIL_URL
    assert embed.color == discord.Color.from_rgb(0, 0, 0)


def test_help_embed_uses_configured_prefix():
    embed = responses.build_help_embed("?")
    assert "`?ban-report <ID>`" in embed.fields[0].value


def test_report_list_keeps_order():
    assert responses.report_list(["3", "1", "2"]) == "📋 Cursed IDs: 3, 1, 2"


def test_person_list_shows_levels():
    entries = [PersonEntry("42", BanLevel.EXTENDED), PersonEntry("7", BanLevel.STANDARD)]
    assert responses.person_list(entries) == "📋 Banished Persons: 42 (Level 2), 7 (Level 1)"


def test_status_texts():
    assert responses.report_status("5", True) == "❌ The ID 5 remains banished from this realm!"
    assert responses.report_status("5", False) == "✅ The ID 5 is free... for now."
    assert responses.person_status("5", PersonEntry("5", 2)) == "❌ The ID 5 remains banished with level 2!"
    assert responses.person_status("5", None) == responses.free_status("5")


def test_confirmations_carry_id():
    assert "ID 99 has been sacrificed" in responses.report_banned("99")
    assert "ID 99 emerges" in responses.report_unbanned("99")
    assert responses.person_banned("99", 2) == "✅ The ID 99 has been banished with level 2!"
    assert responses.person_unbanned("99") == "✅ The ID 99 has been released from its curse!"


def test_enforcement_notice_mentions_author():
    assert responses.enforcement_notice("<@1>").startswith("<@1>, your message has been obliterated")
