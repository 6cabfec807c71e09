"""Find bracketed numeric ids such as ``[123456]`` in free-form text."""

from __future__ import annotations

import re
from typing import Iterable, List

BRACKETED_ID_PATTERN = re.compile(r"\[(\d+)\]", re.ASCII)


def extract_bracketed_ids(text: str | None) -> List[str]:
    """Return the digits of every ``[digits]`` group, in order of appearance.

    Only the shape is checked; the values are not validated any further.
    """
    if not text:
        return []
    return BRACKETED_ID_PATTERN.findall(text)


def find_blocked_ids(text: str | None, blocked: Iterable[str]) -> List[str]:
    """Return the bracketed ids in ``text`` that are present in ``blocked``."""
    blocked_set = set(blocked)
    return [found for found in extract_bracketed_ids(text) if found in blocked_set]
