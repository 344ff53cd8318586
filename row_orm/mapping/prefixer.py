"""Field name prefixing.

Tables address columns as ``prefix + field``. Callers only ever see the
logical field name; the store only ever sees the column name.
"""

from __future__ import annotations

from collections.abc import Iterable

from row_orm.core.exceptions import PrefixMismatchError


class FieldPrefixer:
    """Adds and strips one table's field prefix."""

    __slots__ = ("_prefix",)

    def __init__(self, prefix: str) -> None:
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def prefix_field(self, field: str) -> str:
        return self._prefix + field

    def prefix_fields(self, fields: Iterable[str]) -> list[str]:
        return [self._prefix + field for field in fields]

    def unprefix_field(self, column: str) -> str:
        """Strip the prefix from a column name.

        Raises:
            PrefixMismatchError: If ``column`` does not start with the prefix.
        """
        if not column.startswith(self._prefix):
            raise PrefixMismatchError(self._prefix, column)
        return column[len(self._prefix) :]

    def unprefix_fields(self, columns: Iterable[str]) -> list[str]:
        return [self.unprefix_field(column) for column in columns]

    def __repr__(self) -> str:
        return f"FieldPrefixer({self._prefix!r})"
