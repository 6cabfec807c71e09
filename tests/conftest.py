"""
Pytest configuration and fixtures for Grayban tests.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import discord
import pytest

from grayban.database.db_connection import ConnectionManager
from grayban.moderation.command_dispatcher import CommandDispatcher
from grayban.repositories.blocklist_repo import PersonStore, ReportStore


def make_member(*, administrator: bool = False, bot: bool = False, member_id: int = 1) -> MagicMock:
    """A guild member double that passes ``isinstance(x, discord.Member)``."""
    member = MagicMock(spec=discord.Member)
    member.id = member_id
    member.bot = bot
    member.mention = f"<@{member_id}>"
    member.guild_permissions = SimpleNamespace(administrator=administrator)
    member.__str__.return_value = f"member#{member_id}"
    return member


def make_message(content: str, author=None, *, guild=True, message_id: int = 100) -> SimpleNamespace:
    """A message double with awaitable delete/reply and channel.send."""
    return SimpleNamespace(
        id=message_id,
        content=content,
        author=author if author is not None else make_member(),
        guild=SimpleNamespace(id=1) if guild else None,
        channel=SimpleNamespace(id=10, send=AsyncMock()),
        delete=AsyncMock(),
        reply=AsyncMock(),
    )


@pytest.fixture
def admin():
    return make_member(administrator=True, member_id=7)


@pytest.fixture
def member():
    return make_member(administrator=False, member_id=8)


@pytest.fixture
async def report_store(tmp_path):
    store = ReportStore(ConnectionManager(tmp_path / "banned_ids.db"))
    assert await store.open()
    yield store
    await store.close()


@pytest.fixture
async def person_store(tmp_path):
    store = PersonStore(ConnectionManager(tmp_path / "banned_persons.db"))
    assert await store.open()
    yield store
    await store.close()


@pytest.fixture
def dispatcher(report_store, person_store):
    return CommandDispatcher(report_store, person_store, prefix="!")
