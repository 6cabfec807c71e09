"""
Persistent storage for the report and person blocklists.

Both stores share one contract:

* ``list_all()`` returns every row and raises :class:`StorageError` when the
  file cannot be read. Callers treat that as an empty list.
* ``add()`` and ``remove()`` return ``True``/``False`` and never raise. A
  duplicate key, a missing key and an I/O failure all come back as ``False``.

The table's PRIMARY KEY is the only authority on uniqueness; callers may
check presence first to give a nicer reply, but ``add`` stays correct without
that check.
"""

from __future__ import annotations

from typing import List, Optional

import aiosqlite

from grayban.database.db_connection import ConnectionManager
from grayban.database.db_schema import PERSONS_TABLE, REPORTS_TABLE, SchemaManager
from grayban.datatypes.blocklist_datatypes import BanLevel, PersonEntry, ReportEntry
from grayban.errors import StorageError
from grayban.util.logger import get_logger

logger = get_logger("blocklist_storage")


class BlocklistStore:
    """Shared lifecycle and write helpers for a single-table blocklist."""

    table: str = ""
    label: str = "BLOCKLIST"

    def __init__(self, connection: ConnectionManager) -> None:
        self.connection = connection

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> bool:
        """Open the backing file and create the table if absent.

        Failure is logged and reported as ``False``; the store stays usable in
        a degraded state where reads raise ``StorageError`` and writes fail.
        """
        try:
            await self.connection.open()
            async with self.connection.read() as conn:
                await SchemaManager.initialize_schema(conn, self.table)
        except (aiosqlite.Error, OSError, StorageError) as exc:
            logger.critical("[%s] Could not open %s: %s", self.label, self.connection.path, exc)
            await self.connection.close()
            return False
        logger.info("[%s] Connected to %s", self.label, self.connection.path)
        return True

    async def close(self) -> None:
        await self.connection.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fetch(self, query: str, params: tuple = ()) -> List[aiosqlite.Row]:
        try:
            async with self.connection.read() as conn:
                cursor = await conn.execute(query, params)
                return list(await cursor.fetchall())
        except aiosqlite.Error as exc:
            logger.error("[%s] Read failed: %s", self.label, exc)
            raise StorageError(str(exc)) from exc

    async def _write(self, query: str, params: tuple, *, require_row: bool = False) -> bool:
        try:
            async with self.connection.transaction() as conn:
                cursor = await conn.execute(query, params)
                changed = cursor.rowcount
        except aiosqlite.IntegrityError as exc:
            logger.info("[%s] Constraint rejected write %r: %s", self.label, params, exc)
            return False
        except (aiosqlite.Error, StorageError) as exc:
            logger.error("[%s] Write failed %r: %s", self.label, params, exc)
            return False
        return changed > 0 if require_row else True

    async def remove(self, entry_id: str) -> bool:
        """Delete ``entry_id``; ``False`` when it was not stored or on I/O failure."""
        removed = await self._write(
            f"DELETE FROM {self.table} WHERE id = ?", (entry_id,), require_row=True
        )
        if removed:
            logger.info("[%s] Removed id %s", self.label, entry_id)
        return removed

    async def contains(self, entry_id: str) -> bool:
        """Return True if ``entry_id`` is stored.

        Raises:
            StorageError: If the table cannot be read.
        """
        rows = await self._fetch(f"SELECT 1 FROM {self.table} WHERE id = ? LIMIT 1", (entry_id,))
        return bool(rows)

    async def count(self) -> int:
        """Number of stored rows.

        Raises:
            StorageError: If the table cannot be read.
        """
        rows = await self._fetch(f"SELECT COUNT(*) FROM {self.table}")
        return int(rows[0][0])


class ReportStore(BlocklistStore):
    """Ids flagged by community reports (``banned_ids``)."""

    table = REPORTS_TABLE
    label = "REPORT STORE"

    async def list_all(self) -> List[ReportEntry]:
        rows = await self._fetch("SELECT id FROM banned_ids")
        return [ReportEntry(id=str(row[0])) for row in rows]

    async def list_ids(self) -> List[str]:
        """Convenience over :meth:`list_all` returning only the ids."""
        return [entry.id for entry in await self.list_all()]

    async def add(self, entry_id: str) -> bool:
        """Insert ``entry_id``; ``False`` on duplicate key or I/O failure."""
        added = await self._write("INSERT INTO banned_ids (id) VALUES (?)", (entry_id,))
        if added:
            logger.info("[%s] Added id %s", self.label, entry_id)
        return added


class PersonStore(BlocklistStore):
    """Ids banned by an admin with an explicit level (``banned_persons``)."""

    table = PERSONS_TABLE
    label = "PERSON STORE"

    async def list_all(self) -> List[PersonEntry]:
        rows = await self._fetch("SELECT id, level FROM banned_persons")
        return [PersonEntry(id=str(row[0]), level=int(row[1])) for row in rows]

    async def get(self, entry_id: str) -> Optional[PersonEntry]:
        """Return the stored entry for ``entry_id`` or ``None``.

        Raises:
            StorageError: If the table cannot be read.
        """
        rows = await self._fetch(
            "SELECT id, level FROM banned_persons WHERE id = ? LIMIT 1", (entry_id,)
        )
        if not rows:
            return None
        return PersonEntry(id=str(rows[0][0]), level=int(rows[0][1]))

    async def add(self, entry_id: str, level: int = BanLevel.STANDARD) -> bool:
        """Insert ``entry_id`` with ``level``; ``False`` on duplicate key or I/O failure."""
        added = await self._write(
            "INSERT INTO banned_persons (id, level) VALUES (?, ?)", (entry_id, int(level))
        )
        if added:
            logger.info("[%s] Added id %s at level %d", self.label, entry_id, int(level))
        return added
