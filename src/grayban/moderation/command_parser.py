"""
Split chat messages into a command word and its arguments.

The parser knows the closed set of commands Grayban answers to. Anything
else, including messages that do not start with the prefix, parses to
``CommandName.UNKNOWN`` so callers can stop explicitly instead of falling
through a chain of ``if`` checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class CommandName(Enum):
    """Every chat command Grayban recognises."""

    BAN_REPORT = "ban-report"
    UNBAN_REPORT = "unban-report"
    CHECK_REPORT = "check-report"
    LIST_REPORT = "list-report"
    BAN = "ban"
    UNBAN = "unban"
    CHECK = "check"
    LIST = "list"
    HELP = "help"
    UNKNOWN = "unknown"

    @property
    def requires_admin(self) -> bool:
        return self in ADMIN_COMMANDS


ADMIN_COMMANDS = frozenset({
    CommandName.BAN_REPORT,
    CommandName.UNBAN_REPORT,
    CommandName.BAN,
    CommandName.UNBAN,
})

# Command words accepted after the prefix. The unhyphenated spellings are the
# names the bot originally shipped with.
COMMAND_ALIASES: Dict[str, CommandName] = {
    "ban-report": CommandName.BAN_REPORT,
    "banreport": CommandName.BAN_REPORT,
    "unban-report": CommandName.UNBAN_REPORT,
    "unbanreport": CommandName.UNBAN_REPORT,
    "check-report": CommandName.CHECK_REPORT,
    "checkbanreport": CommandName.CHECK_REPORT,
    "list-report": CommandName.LIST_REPORT,
    "listbanreport": CommandName.LIST_REPORT,
    "ban": CommandName.BAN,
    "unban": CommandName.UNBAN,
    "check": CommandName.CHECK,
    "checkban": CommandName.CHECK,
    "list": CommandName.LIST,
    "listban": CommandName.LIST,
    "help": CommandName.HELP,
}


@dataclass(frozen=True)
class ParsedCommand:
    """Result of parsing one message.

    Attributes:
        name: The recognised command, or ``CommandName.UNKNOWN``.
        token: The lower-cased first word exactly as typed (prefix included).
        args: The remaining whitespace-separated words.
    """
    name: CommandName
    token: str = ""
    args: List[str] = field(default_factory=list)

    @property
    def is_known(self) -> bool:
        return self.name is not CommandName.UNKNOWN

    def arg(self, index: int) -> Optional[str]:
        """Return argument ``index`` stripped of whitespace, or ``None`` if absent or blank."""
        if index >= len(self.args):
            return None
        value = self.args[index].strip()
        return value or None


def parse_command(text: str, prefix: str = "!") -> ParsedCommand:
    """Parse raw message text into a :class:`ParsedCommand`.

    The first whitespace-separated token, lower-cased, is the command token;
    the rest are arguments. There is no quoting, so an argument can never
    contain whitespace. An empty message yields an empty token.
    """
    tokens = (text or "").split()
    if not tokens:
        return ParsedCommand(name=CommandName.UNKNOWN)

    token = tokens[0].lower()
    args = tokens[1:]

    if not prefix or not token.startswith(prefix):
        return ParsedCommand(name=CommandName.UNKNOWN, token=token, args=args)

    name = COMMAND_ALIASES.get(token[len(prefix):], CommandName.UNKNOWN)
    return ParsedCommand(name=name, token=token, args=args)
