"""Row store boundary and its SQL implementation.

Tables talk to a RowStore using physical names only. Reads go to the
endpoint named by ``read_mode``; writes always go to the primary.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from row_orm.core.conditions import Condition, MatchAll
from row_orm.core.connection import ConnectionManager, StoreConfig
from row_orm.core.enums import ReadMode
from row_orm.core.exceptions import QueryExecutionError
from row_orm.core.options import QueryOptions
from row_orm.core.sql import CompiledStatement, SQLCompiler

logger = logging.getLogger(__name__)


@runtime_checkable
class RowStore(Protocol):
    """What a Table needs from the storage layer."""

    def select(
        self,
        table: str,
        columns: Sequence[str] | Mapping[str, str],
        conditions: Sequence[Condition],
        options: QueryOptions,
        *,
        read_mode: ReadMode = ReadMode.REPLICA,
        caller: str | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Return a forward-only iterator of physical-name → value rows."""
        ...

    def select_row(
        self,
        table: str,
        columns: Sequence[str] | Mapping[str, str],
        conditions: Sequence[Condition],
        options: QueryOptions,
        *,
        read_mode: ReadMode = ReadMode.REPLICA,
        caller: str | None = None,
    ) -> dict[str, Any] | None:
        """Return the first matching row, or None."""
        ...

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        conditions: Sequence[Condition] | MatchAll,
        *,
        caller: str | None = None,
    ) -> bool:
        """Update matching rows. False only when the statement itself fails."""
        ...

    def delete(
        self,
        table: str,
        conditions: Sequence[Condition] | MatchAll,
        *,
        caller: str | None = None,
    ) -> bool:
        """Delete matching rows. False only when the statement itself fails."""
        ...

    def insert(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        id_column: str,
        caller: str | None = None,
    ) -> Any:
        """Insert one row and return its id, or None on failure."""
        ...


def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]

    # sqlite3.Row and plain tuples both zip with the description
    return [dict(zip(columns, tuple(row), strict=True)) for row in rows]


class SQLStore:
    """RowStore backed by SQL adapters.

    Args:
        primary: Connection manager for the primary endpoint.
        replica: Optional connection manager for replica reads.
    """

    def __init__(
        self,
        primary: ConnectionManager,
        replica: ConnectionManager | None = None,
    ) -> None:
        self._primary = primary
        self._replica = replica
        self._compiler = SQLCompiler(primary.adapter)
        self._replica_compiler = SQLCompiler(replica.adapter) if replica is not None else None

    @classmethod
    def from_config(cls, config: StoreConfig) -> SQLStore:
        """Create an SQLStore from a StoreConfig."""
        replica = ConnectionManager(config.replica) if config.replica is not None else None
        return cls(ConnectionManager(config.primary), replica)

    def _reader(self, read_mode: ReadMode) -> tuple[ConnectionManager, SQLCompiler]:
        if read_mode is ReadMode.REPLICA and self._replica is not None:
            assert self._replica_compiler is not None
            return self._replica, self._replica_compiler
        return self._primary, self._compiler

    def _read(
        self,
        manager: ConnectionManager,
        statement: CompiledStatement,
        caller: str | None,
    ) -> list[dict[str, Any]]:
        logger.debug("read %s %s", statement.sql, statement.params)
        with manager.get_connection() as conn:
            try:
                cursor = manager.adapter.execute(conn, statement.sql, statement.params)
                rows = _rows_to_dicts(cursor)
            except Exception as e:
                conn.rollback()
                raise QueryExecutionError(caller or "<select>", str(e)) from e
            # End the read transaction so the pooled connection drops its snapshot
            conn.rollback()
        return rows

    def _write(self, statement: CompiledStatement, caller: str | None) -> bool:
        logger.debug("write %s %s", statement.sql, statement.params)
        with self._primary.get_connection() as conn:
            try:
                self._primary.adapter.execute(conn, statement.sql, statement.params)
                conn.commit()
            except Exception:
                conn.rollback()
                logger.error("Write for '%s' failed: %s", caller, statement.sql, exc_info=True)
                return False
        return True

    def select(
        self,
        table: str,
        columns: Sequence[str] | Mapping[str, str],
        conditions: Sequence[Condition],
        options: QueryOptions,
        *,
        read_mode: ReadMode = ReadMode.REPLICA,
        caller: str | None = None,
    ) -> Iterator[dict[str, Any]]:
        manager, compiler = self._reader(read_mode)
        statement = compiler.select(table, columns, conditions, options, caller)
        # Rows are buffered so the connection goes back to the pool before
        # the caller starts writing while it iterates.
        return iter(self._read(manager, statement, caller))

    def select_row(
        self,
        table: str,
        columns: Sequence[str] | Mapping[str, str],
        conditions: Sequence[Condition],
        options: QueryOptions,
        *,
        read_mode: ReadMode = ReadMode.REPLICA,
        caller: str | None = None,
    ) -> dict[str, Any] | None:
        manager, compiler = self._reader(read_mode)
        statement = compiler.select(table, columns, conditions, options.with_limit(1), caller)
        rows = self._read(manager, statement, caller)
        return rows[0] if rows else None

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        conditions: Sequence[Condition] | MatchAll,
        *,
        caller: str | None = None,
    ) -> bool:
        return self._write(self._compiler.update(table, values, conditions, caller), caller)

    def delete(
        self,
        table: str,
        conditions: Sequence[Condition] | MatchAll,
        *,
        caller: str | None = None,
    ) -> bool:
        return self._write(self._compiler.delete(table, conditions, caller), caller)

    def insert(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        id_column: str,
        caller: str | None = None,
    ) -> Any:
        statement = self._compiler.insert(table, values, caller)
        logger.debug("insert %s %s", statement.sql, statement.params)
        adapter = self._primary.adapter
        with self._primary.get_connection() as conn:
            try:
                new_id = adapter.insert_returning_id(
                    conn, statement.sql, statement.params, id_column
                )
                conn.commit()
            except Exception:
                conn.rollback()
                logger.error("Insert for '%s' failed: %s", caller, statement.sql, exc_info=True)
                return None
        return new_id

    def close(self) -> None:
        """Close the pools of both endpoints."""
        self._primary.close_pool()
        if self._replica is not None:
            self._replica.close_pool()
