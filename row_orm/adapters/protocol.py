"""Database adapter protocol.

Every adapter module MUST implement this protocol. Besides the connection
lifecycle, adapters own the dialect details the SQL compiler cannot
assume: identifier quoting, LIMIT/OFFSET syntax and how an inserted id is
returned.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_orm.core.connection import ConnectionConfig


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Create a connection pool."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Acquire a connection from the pool."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close the pool and release all connections."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...

    def quote_identifier(self, name: str) -> str:
        """Quote a table or column name."""
        ...

    def limit_clause(self, limit: int | None, offset: int | None) -> str:
        """Return the LIMIT/OFFSET tail for a select, or an empty string."""
        ...

    def insert_returning_id(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any],
        id_column: str,
    ) -> Any:
        """Run an INSERT and return the id the database assigned."""
        ...
