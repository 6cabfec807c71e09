"""
Schema creation for the blocklist tables.

Each table lives in its own database file and is created on first run.
"""

import aiosqlite
from grayban.util.logger import get_logger

logger = get_logger("database_schema")

REPORTS_TABLE = "banned_ids"
PERSONS_TABLE = "banned_persons"

_TABLE_DDL = {
    REPORTS_TABLE: "CREATE TABLE IF NOT EXISTS banned_ids (id TEXT PRIMARY KEY)",
    PERSONS_TABLE: "CREATE TABLE IF NOT EXISTS banned_persons (id TEXT PRIMARY KEY, level INTEGER)",
}


class SchemaManager:
    """Creates the blocklist tables if they are absent."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection, table: str) -> None:
        """
        Create ``table`` if it does not exist yet.

        Args:
            db: Open database connection
            table: One of ``REPORTS_TABLE`` or ``PERSONS_TABLE``

        Raises:
            KeyError: If ``table`` is not a known blocklist table.
        """
        await db.execute(_TABLE_DDL[table])
        await db.commit()
        logger.info("[SCHEMA] Table %s ready", table)
