"""Field types, read modes and database backends."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"


class ReadMode(Enum):
    """Which physical endpoint a read is sent to."""

    PRIMARY = "primary"
    REPLICA = "replica"


class FieldType(Enum):
    """Closed set of field types a table can declare.

    The type decides how a value is written to and read back from the
    store. ``None`` always passes through untouched (SQL NULL).
    """

    ID = "id"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"
    ARRAY = "array"
    BLOB = "blob"

    def to_storage(self, value: Any) -> Any:
        """Convert a Python value into its column representation."""
        if value is None:
            return None
        if self in (FieldType.ID, FieldType.INT):
            return int(value)
        if self is FieldType.FLOAT:
            return float(value)
        if self is FieldType.STR:
            return str(value)
        if self is FieldType.BOOL:
            # Drivers map bool onto their boolean column type (0/1 for SQLite and MySQL)
            return bool(value)
        if self is FieldType.ARRAY:
            return json.dumps(list(value))
        return value

    def from_storage(self, value: Any) -> Any:
        """Convert a column value back into its Python representation."""
        if value is None:
            return None
        if self is FieldType.BOOL:
            return bool(value)
        if self is FieldType.ARRAY:
            if isinstance(value, (bytes, bytearray)):
                value = value.decode("utf-8")
            if isinstance(value, str):
                return json.loads(value) if value else []
            return list(value)
        return value
