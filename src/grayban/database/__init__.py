"""
Database package for Grayban.

- **db_connection.py**: One long-lived aiosqlite connection per database file
  with serialised write transactions.
- **db_schema.py**: Creates the ``banned_ids`` and ``banned_persons`` tables.
"""
