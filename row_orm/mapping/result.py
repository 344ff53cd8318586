"""Physical row → logical field map conversion and lazy row results."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from row_orm.core.enums import FieldType
from row_orm.core.exceptions import ResultConsumedError
from row_orm.mapping.prefixer import FieldPrefixer

if TYPE_CHECKING:
    from row_orm.table.base import Table

R = TypeVar("R")

_MISSING: Any = object()


class ResultMapper:
    """Turns a store row into a logical field map.

    Every key is unprefixed; values of declared fields are decoded with
    their FieldType. Columns the table does not declare keep their value.
    """

    def __init__(self, prefixer: FieldPrefixer, fields: Mapping[str, FieldType]) -> None:
        self._prefixer = prefixer
        self._fields = fields

    def to_fields(self, row: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for column, value in row.items():
            name = self._prefixer.unprefix_field(column)
            field_type = self._fields.get(name)
            result[name] = field_type.from_storage(value) if field_type is not None else value
        return result

    def to_fields_many(self, rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        return [self.to_fields(row) for row in rows]


class ORMResult(Generic[R]):
    """Lazy, forward-only sequence of row objects over a store cursor.

    Each raw row is turned into a row object only when iteration reaches
    it. ``is_empty()`` and ``current()`` look at the next unconsumed row
    without consuming it. The result can be iterated once.
    """

    def __init__(self, table: Table, cursor: Iterable[Mapping[str, Any]]) -> None:
        self._table = table
        self._cursor = iter(cursor)
        self._head: Any = _MISSING
        self._consumed = False

    def _peek(self) -> Any:
        if self._head is _MISSING:
            self._head = next(self._cursor, None)
        return self._head

    def is_empty(self) -> bool:
        return self._peek() is None

    def current(self) -> R | None:
        """Return the next row object without advancing, or None."""
        head = self._peek()
        if head is None:
            return None
        return self._table.new_row_from_db_result(head)  # type: ignore[no-any-return]

    def __iter__(self) -> Iterator[R]:
        if self._consumed:
            raise ResultConsumedError()
        self._consumed = True
        return self._iterate()

    def _iterate(self) -> Iterator[R]:
        while True:
            head = self._peek()
            if head is None:
                return
            # Hand the row out and let the next peek fetch its successor
            self._head = _MISSING
            yield self._table.new_row_from_db_result(head)

    def __bool__(self) -> bool:
        return not self.is_empty()
