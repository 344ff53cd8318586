"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from row_orm.core.connection import ConnectionConfig
from row_orm.core.exceptions import PoolError

# MySQL has no OFFSET without LIMIT; this is the documented "all rows" value
_MYSQL_MAX_LIMIT = 18446744073709551615


class MysqlAdapter:
    """Synchronous MySQL adapter returning dict rows."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        """Create a pool (list of connections) for MySQL."""
        import mysql.connector

        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = mysql.connector.connect(
                host=config.host,
                port=config.port,
                user=config.user,
                password=config.password,
                database=config.database,
                connection_timeout=config.pool_timeout,
                **config.extra,
            )
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor with dictionary results."""
        cursor = connection.cursor(dictionary=True, buffered=True)
        cursor.execute(sql, params or None)
        return cursor

    def quote_identifier(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"

    def limit_clause(self, limit: int | None, offset: int | None) -> str:
        if limit is None and offset is None:
            return ""
        clause = f" LIMIT {limit if limit is not None else _MYSQL_MAX_LIMIT}"
        if offset is not None:
            clause += f" OFFSET {offset}"
        return clause

    def insert_returning_id(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any],
        id_column: str,
    ) -> Any:
        cursor = self.execute(connection, sql, params)
        return cursor.lastrowid
