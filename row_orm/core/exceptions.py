"""RowORM exception hierarchy.

Not-found is never an exception: single-row lookups return ``None``.
Driver exceptions raised by reads are chained onto ``QueryExecutionError``.
"""

from __future__ import annotations


class RowORMError(Exception):
    """Base exception for all RowORM errors."""


# --- Table definition ---


class TableDefinitionError(RowORMError):
    """Raised when a Table subclass declares an inconsistent field set."""

    def __init__(self, table_class: str, detail: str) -> None:
        self.table_class = table_class
        super().__init__(f"Invalid table definition {table_class}: {detail}")


# --- Registry ---


class RegistryError(RowORMError):
    """Base for table registry errors."""


class StoreNotConfiguredError(RegistryError):
    """Raised when the default registry is used before configure()."""

    def __init__(self) -> None:
        super().__init__(
            "No default store configured; call row_orm.configure(store) "
            "or use an explicit TableRegistry"
        )


# --- Fields ---


class FieldError(RowORMError):
    """Base for field name and field value errors."""


class UnknownFieldError(FieldError):
    """Raised when a field name is not declared by the table."""

    def __init__(self, table: str, field: str) -> None:
        self.table = table
        self.field = field
        super().__init__(f"Table '{table}' has no field '{field}'")


class PrefixMismatchError(FieldError):
    """Raised when unprefixing a column that does not carry the prefix."""

    def __init__(self, prefix: str, column: str) -> None:
        self.prefix = prefix
        self.column = column
        super().__init__(f"Column '{column}' does not start with prefix '{prefix}'")


class FieldNotSetError(FieldError):
    """Raised when reading a field the row does not hold."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Attempted to get not-set field '{field}'")


class MissingFieldError(FieldError):
    """Raised when a new row lacks fields that have no default."""

    def __init__(self, row_class: str, missing_fields: list[str]) -> None:
        self.row_class = row_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot create {row_class}: missing fields {missing_fields}")


# --- Conditions ---


class ConditionError(RowORMError):
    """Raised for condition maps the translator cannot represent."""


# --- Execution ---


class ExecutionError(RowORMError):
    """Base for query execution errors."""


class QueryExecutionError(ExecutionError):
    """Raised when the store fails to run a read query."""

    def __init__(self, caller: str, detail: str) -> None:
        self.caller = caller
        super().__init__(f"Query for '{caller}' failed: {detail}")


# --- Mapping ---


class MappingError(RowORMError):
    """Base for row mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when result rows of one query do not share a column layout."""

    def __init__(self, table: str, expected: int, actual: int) -> None:
        self.table = table
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Rows selected from '{table}' have inconsistent widths: "
            f"expected {expected} columns, got {actual}"
        )


class ResultConsumedError(MappingError):
    """Raised when a lazy result is iterated a second time."""

    def __init__(self) -> None:
        super().__init__("ORMResult is forward-only and has already been iterated")


# --- Adapter ---


class AdapterError(RowORMError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
