"""
Row types for the two blocklists.

Ids are external (Roblox) identifiers kept as strings exactly as the admin
typed them, so ``"007"`` and ``"7"`` are different entries.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import IntEnum
from typing import Any, Dict


class BanLevel(IntEnum):
    """Severity attached to a person ban."""

    STANDARD = 1
    EXTENDED = 2

    @classmethod
    def parse(cls, raw: str | None) -> "BanLevel":
        """Parse a level argument; ``None`` means the default level.

        Raises:
            ValueError: If ``raw`` is not ``"1"`` or ``"2"`` in ASCII digits.
        """
        if raw is None:
            return cls.STANDARD
        raw = raw.strip()
        if not (raw.isascii() and raw.isdigit()):
            raise ValueError(f"ban level must be 1 or 2, got {raw!r}")
        return cls(int(raw))


@dataclass(frozen=True)
class ReportEntry:
    """A single row of the ``banned_ids`` table."""
    id: str


@dataclass(frozen=True)
class PersonEntry:
    """A single row of the ``banned_persons`` table."""
    id: str
    level: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
