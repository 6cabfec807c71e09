"""
Error taxonomy for Grayban.

``StorageError`` signals that a blocklist could not be read; callers degrade
to an empty snapshot. The remaining errors are raised by command handlers and
carry the reply shown to the invoking user.
"""

from __future__ import annotations


class GraybanError(Exception):
    """Base class for every error raised by Grayban."""


class StorageError(GraybanError):
    """The backing SQLite file could not be opened or queried."""


class CommandError(GraybanError):
    """A chat command was rejected; ``reply`` is sent back to the invoker."""

    def __init__(self, reply: str) -> None:
        super().__init__(reply)
        self.reply = reply


class ValidationError(CommandError):
    """A required argument is missing or malformed."""


class AuthorizationError(CommandError):
    """The invoker lacks the administrator permission."""


class DuplicateError(CommandError):
    """The id is already on the target blocklist."""


class NotFoundError(CommandError):
    """The id is not on the target blocklist."""
