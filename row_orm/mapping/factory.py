"""Row object construction."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from row_orm.table.base import Table


class RowFactory:
    """Builds row objects of a table's row class from logical field maps.

    Args:
        table: Table the rows belong to.
        row_class: Class constructed as ``row_class(table, fields, load_defaults)``.
    """

    def __init__(self, table: Table, row_class: type[Any]) -> None:
        self._table = table
        self._row_class = row_class

    @property
    def row_class(self) -> type[Any]:
        return self._row_class

    def with_defaults(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Fill fields absent from ``data`` with the table's defaults."""
        merged = dict(data)
        for field, default in self._table.defaults.items():
            if field not in merged:
                # Mutable defaults (array fields) must not be shared between rows
                merged[field] = copy.copy(default)
        return merged

    def build(self, data: Mapping[str, Any], load_defaults: bool = False) -> Any:
        fields = self.with_defaults(data) if load_defaults else dict(data)
        return self._row_class(self._table, fields, load_defaults)
