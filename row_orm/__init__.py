"""RowORM - table-to-object mapping over prefixed SQL tables."""

from __future__ import annotations

from row_orm.core.conditions import MATCH_ALL, Equals, In, MatchAll, RawFragment
from row_orm.core.connection import ConnectionConfig, ConnectionManager, StoreConfig
from row_orm.core.context import primary_reads, read_mode_scope
from row_orm.core.enums import DatabaseBackend, FieldType, ReadMode
from row_orm.core.exceptions import (
    AdapterError,
    ColumnMismatchError,
    ConditionError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    FieldError,
    FieldNotSetError,
    MappingError,
    MissingFieldError,
    PoolError,
    PrefixMismatchError,
    QueryExecutionError,
    RegistryError,
    ResultConsumedError,
    RowORMError,
    StoreNotConfiguredError,
    TableDefinitionError,
    UnknownFieldError,
)
from row_orm.core.options import QueryOptions
from row_orm.core.registry import TableRegistry, configure, get_default_registry
from row_orm.core.store import RowStore, SQLStore
from row_orm.mapping.result import ORMResult
from row_orm.mapping.row import Row
from row_orm.table.base import Table

__all__ = [
    # Connection
    "ConnectionConfig",
    "StoreConfig",
    "ConnectionManager",
    # Store
    "RowStore",
    "SQLStore",
    # Tables
    "Table",
    "Row",
    "ORMResult",
    "TableRegistry",
    "configure",
    "get_default_registry",
    # Conditions & options
    "Equals",
    "In",
    "RawFragment",
    "MatchAll",
    "MATCH_ALL",
    "QueryOptions",
    # Read mode
    "primary_reads",
    "read_mode_scope",
    # Enums
    "DatabaseBackend",
    "FieldType",
    "ReadMode",
    # Exceptions
    "RowORMError",
    "TableDefinitionError",
    "RegistryError",
    "StoreNotConfiguredError",
    "FieldError",
    "UnknownFieldError",
    "PrefixMismatchError",
    "FieldNotSetError",
    "MissingFieldError",
    "ConditionError",
    "ExecutionError",
    "QueryExecutionError",
    "MappingError",
    "ColumnMismatchError",
    "ResultConsumedError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
