"""Tests for the chat command parser."""

import pytest

from grayban.moderation.command_parser import CommandName, ParsedCommand, parse_command


class TestParseCommand:
    """Tests for parse_command."""

    def test_empty_message_is_unknown(self):
        parsed = parse_command("")
        assert parsed.name is CommandName.UNKNOWN
        assert parsed.token == ""
        assert parsed.args == []

    def test_whitespace_only_message_is_unknown(self):
        assert parse_command("   \t ").name is CommandName.UNKNOWN

    def test_command_is_lower_cased(self):
        parsed = parse_command("!BAN-Report 123")
        assert parsed.name is CommandName.BAN_REPORT
        assert parsed.token == "!ban-report"
        assert parsed.args == ["123"]

    def test_splits_on_any_whitespace(self):
        parsed = parse_command("!ban\t42   2\n")
        assert parsed.name is CommandName.BAN
        assert parsed.args == ["42", "2"]

    def test_missing_prefix_is_unknown(self):
        parsed = parse_command("ban 42")
        assert parsed.name is CommandName.UNKNOWN
        assert parsed.token == "ban"
        assert parsed.args == ["42"]

    def test_unrecognised_command_is_unknown(self):
        parsed = parse_command("!dance now")
        assert parsed.name is CommandName.UNKNOWN
        assert not parsed.is_known

    def test_custom_prefix(self):
        assert parse_command("?list", prefix="?").name is CommandName.LIST
        assert parse_command("!list", prefix="?").name is CommandName.UNKNOWN

    @pytest.mark.parametrize(
        "word, expected",
        [
            ("banreport", CommandName.BAN_REPORT),
            ("unbanreport", CommandName.UNBAN_REPORT),
            ("checkbanreport", CommandName.CHECK_REPORT),
            ("listbanreport", CommandName.LIST_REPORT),
            ("checkban", CommandName.CHECK),
            ("listban", CommandName.LIST),
        ],
    )
    def test_legacy_spellings(self, word, expected):
        assert parse_command(f"!{word}").name is expected


class TestParsedCommand:
    """Tests for ParsedCommand helpers."""

    def test_arg_returns_none_when_absent(self):
        parsed = ParsedCommand(name=CommandName.CHECK, token="!check", args=[])
        assert parsed.arg(0) is None

    def test_arg_strips_whitespace(self):
        parsed = ParsedCommand(name=CommandName.CHECK, token="!check", args=[" 42 "])
        assert parsed.arg(0) == "42"

    def test_admin_flags(self):
        assert CommandName.BAN.requires_admin
        assert CommandName.UNBAN_REPORT.requires_admin
        assert not CommandName.CHECK.requires_admin
        assert not CommandName.HELP.requires_admin
        assert not CommandName.UNKNOWN.requires_admin
