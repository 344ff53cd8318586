"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from row_orm.core.connection import ConnectionConfig
from row_orm.core.exceptions import PoolError


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    parts.append(f"connect_timeout={config.pool_timeout}")
    return " ".join(parts)


class PostgresqlAdapter:
    """Synchronous PostgreSQL adapter returning dict rows."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = psycopg.connect(conninfo, row_factory=psycopg.rows.dict_row, **config.extra)
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
        return connection.execute(sql, params or None)

    def quote_identifier(self, name: str) -> str:
        return '"' + name.replace('"', '""') + '"'

    def limit_clause(self, limit: int | None, offset: int | None) -> str:
        clause = ""
        if limit is not None:
            clause += f" LIMIT {limit}"
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
        cursor = connection.execute(
            f"{sql} RETURNING {self.quote_identifier(id_column)}", params
        )
        row = cursor.fetchone()
        return None if row is None else row[id_column]
