"""
Database connection management: one long-lived connection per SQLite file.

Each blocklist lives in its own file, so each store owns its own
``ConnectionManager``. The manager is created at startup, opened once and
closed on shutdown; it is never a module-level singleton.

Usage
-----
    manager = ConnectionManager(Path("./data/banned_ids.db"))
    await manager.open()

    async with manager.read() as conn:
        cursor = await conn.execute("SELECT id FROM banned_ids")

    async with manager.transaction() as conn:
        await conn.execute("INSERT INTO banned_ids (id) VALUES (?)", ("1",))

    await manager.close()
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from grayban.errors import StorageError
from grayban.util.logger import get_logger

logger = get_logger("database_connection")

# ── Pragmas applied once when the connection is opened ──────────────────────
_PRAGMAS = [
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",    # safe with WAL; faster than FULL
    "PRAGMA temp_store = MEMORY",
]


class ConnectionManager:
    """
    Wrapper around a single aiosqlite connection to one database file.

    * Reads:  ``async with read()``; WAL allows concurrent readers.
    * Writes: ``async with transaction()``; serialised by ``_write_sem``,
      committed on clean exit and rolled back on error.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._conn: aiosqlite.Connection | None = None
        self._write_sem = asyncio.Semaphore(1)   # one writer at a time

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self) -> None:
        """
        Open the database file and apply pragmas.

        Raises:
            aiosqlite.Error | OSError: If the file cannot be created or opened.
        """
        if self._conn is not None:
            logger.warning("[DB CONNECTION] open() called but %s is already open, ignoring", self.path)
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(self.path)
        try:
            conn.row_factory = aiosqlite.Row
            for pragma in _PRAGMAS:
                await conn.execute(pragma)
            await conn.commit()
        except Exception:
            await conn.close()
            raise

        self._conn = conn
        logger.info("[DB CONNECTION] Opened connection to %s", self.path)

    async def close(self) -> None:
        """Flush the WAL and close the connection. Safe to call when closed."""
        if self._conn is None:
            return

        try:
            await self._conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")
            await self._conn.commit()
        except aiosqlite.Error:
            logger.exception("[DB CONNECTION] WAL checkpoint failed during close of %s", self.path)
        finally:
            await self._conn.close()
            self._conn = None
            logger.info("[DB CONNECTION] Connection to %s closed", self.path)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def connection(self) -> aiosqlite.Connection:
        """
        The raw connection.

        Raises:
            StorageError: If the connection was never opened (or failed to open).
        """
        if self._conn is None:
            raise StorageError(f"database {self.path} is not open")
        return self._conn

    @asynccontextmanager
    async def read(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield the connection for a read; no semaphore is taken."""
        yield self.connection

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Yield the connection inside a serialised write transaction.

        Commits on clean exit; rolls back and re-raises on any exception.
        """
        conn = self.connection

        async with self._write_sem:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise
