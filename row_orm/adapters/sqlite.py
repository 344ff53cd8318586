"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from typing import Any

from row_orm.core.connection import ConnectionConfig
from row_orm.core.exceptions import PoolError


class SqliteAdapter:
    """Synchronous SQLite adapter.

    Each pooled connection to ``:memory:`` is its own database, so in-memory
    stores should use ``pool_size=1``.
    """

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> list[sqlite3.Connection]:
        """Create a 'pool' (list of connections) for SQLite."""
        pool: list[sqlite3.Connection] = []
        for _ in range(config.pool_size):
            conn = sqlite3.connect(config.database, timeout=config.pool_timeout)
            conn.row_factory = sqlite3.Row
            if config.database != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL")
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[sqlite3.Connection]) -> sqlite3.Connection:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(
        self, connection: sqlite3.Connection, pool: list[sqlite3.Connection]
    ) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[sqlite3.Connection]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        return connection.execute(sql, params or {})

    def quote_identifier(self, name: str) -> str:
        # SQLite falls back to a string literal for an unknown "name"; `name` never does
        return "`" + name.replace("`", "``") + "`"

    def limit_clause(self, limit: int | None, offset: int | None) -> str:
        if limit is None and offset is None:
            return ""
        # SQLite only accepts OFFSET after a LIMIT; -1 means unbounded
        clause = f" LIMIT {limit if limit is not None else -1}"
        if offset is not None:
            clause += f" OFFSET {offset}"
        return clause

    def insert_returning_id(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any],
        id_column: str,
    ) -> Any:
        cursor = connection.execute(sql, params)
        return cursor.lastrowid
