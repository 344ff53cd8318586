"""Row objects: one materialized record of a table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from row_orm.core.enums import ReadMode
from row_orm.core.exceptions import FieldNotSetError, MissingFieldError, UnknownFieldError

if TYPE_CHECKING:
    from row_orm.table.base import Table

_MISSING: Any = object()


class Row:
    """A record of a Table, holding logical field values.

    Rows keep a back-reference to their table for prefixing, defaults and
    persistence; the table does not track the rows it hands out.

    Args:
        table: Owning table.
        fields: Initial logical field values.
        load_defaults: The row is new and should be complete once the table
            defaults are applied. Fields without a default (other than the
            id and summary fields) must then be present.

    Raises:
        UnknownFieldError: If ``fields`` names a field the table lacks.
        MissingFieldError: If ``load_defaults`` is set and required fields are absent.
    """

    def __init__(
        self,
        table: Table,
        fields: Mapping[str, Any] | None = None,
        load_defaults: bool = False,
    ) -> None:
        self._table = table
        self._fields: dict[str, Any] = {}
        self._summary_mode = False
        self._recomputed: set[str] = set()

        if fields:
            self.set_fields(fields)
        if load_defaults:
            self._check_required()

    def _check_required(self) -> None:
        table = self._table
        optional = set(table.defaults) | set(table.summary_fields) | {table.id_field}
        missing = [f for f in table.fields if f not in optional and f not in self._fields]
        if missing:
            raise MissingFieldError(type(self).__name__, missing)

    @property
    def table(self) -> Table:
        return self._table

    # --- Field access ---

    def get_field(self, name: str, default: Any = _MISSING) -> Any:
        """Return a field value.

        Raises:
            FieldNotSetError: If the field is not set and no default is given.
        """
        if name in self._fields:
            return self._fields[name]
        if default is not _MISSING:
            return default
        raise FieldNotSetError(name)

    def set_field(self, name: str, value: Any) -> None:
        if not self._table.can_have_field(name):
            raise UnknownFieldError(self._table.name, name)
        self._fields[name] = value

    def set_fields(self, fields: Mapping[str, Any], override: bool = True) -> None:
        for name, value in fields.items():
            if override or name not in self._fields:
                self.set_field(name, value)

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def remove_field(self, name: str) -> None:
        self._fields.pop(name, None)

    def get_fields(self) -> dict[str, Any]:
        return dict(self._fields)

    def load_defaults(self, override: bool = True) -> None:
        self.set_fields(self._table.get_defaults(), override)

    # --- Identity ---

    def get_id(self) -> Any:
        return self.get_field(self._table.id_field, None)

    def set_id(self, value: Any) -> None:
        self.set_field(self._table.id_field, value)

    def has_id_field(self) -> bool:
        return self.get_id() is not None

    # --- Summary fields ---

    def get_summary_fields(self) -> tuple[str, ...]:
        return tuple(self._table.summary_fields)

    def load_summary_fields(self, summary_fields: str | Iterable[str] | None = None) -> None:
        """Recompute summary fields via compute_summary_field().

        Args:
            summary_fields: One name, several names, or None for all of them.
        """
        if summary_fields is None:
            names: Iterable[str] = self._table.summary_fields
        elif isinstance(summary_fields, str):
            names = (summary_fields,)
        else:
            names = summary_fields

        for name in names:
            if name not in self._table.summary_fields:
                raise UnknownFieldError(self._table.name, name)
            self.set_field(name, self.compute_summary_field(name))
            self._recomputed.add(name)

    def compute_summary_field(self, name: str) -> Any:
        """Compute the current value of summary field ``name``.

        Row classes of tables that declare summary fields override this.
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not compute summary field '{name}'"
        )

    @property
    def in_summary_mode(self) -> bool:
        return self._summary_mode

    def set_summary_mode(self, summary_mode: bool) -> None:
        """Switch summary-only saving on or off.

        In summary mode, save() on an existing row only writes the summary
        fields recomputed by load_summary_fields().
        """
        self._summary_mode = summary_mode

    # --- Persistence ---

    def get_write_values(self) -> dict[str, Any]:
        """Logical values save() would write, without the id field."""
        id_field = self._table.id_field
        values = {k: v for k, v in self._fields.items() if k != id_field}
        if self._summary_mode and self.has_id_field():
            values = {k: v for k, v in values.items() if k in self._recomputed}
        return values

    def save(self) -> bool:
        """Update the row when it has an id, insert it otherwise."""
        if self.has_id_field():
            return self._update_in_db()
        return self._insert_into_db()

    def _update_in_db(self) -> bool:
        values = self.get_write_values()
        if not values:
            return True
        success = self._table.update(values, {self._table.id_field: self.get_id()})
        if success and self._summary_mode:
            self._recomputed.clear()
        return success

    def _insert_into_db(self) -> bool:
        new_id = self._table.insert(self.get_write_values())
        if new_id is None:
            return False
        self.set_id(new_id)
        return True

    def remove(self) -> bool:
        """Delete this row from the table and forget its id."""
        if not self.has_id_field():
            return False
        success = self._table.delete({self._table.id_field: self.get_id()})
        if success:
            self.remove_field(self._table.id_field)
        return success

    def load_fields(
        self,
        fields: str | Iterable[str] | None = None,
        override: bool = True,
        skip_loaded: bool = False,
    ) -> bool:
        """(Re)load fields of this row from the primary store.

        Returns False when the row has no id or no longer exists.
        """
        if not self.has_id_field():
            return False

        if fields is None:
            names = self._table.get_field_names()
        elif isinstance(fields, str):
            names = [fields]
        else:
            names = list(fields)
        if skip_loaded:
            names = [name for name in names if name not in self._fields]
        if not names:
            return True

        result = self._table.select_fields_row(
            names,
            {self._table.id_field: self.get_id()},
            collapse=False,
            read_mode=ReadMode.PRIMARY,
        )
        if result is None:
            return False
        self.set_fields(result, override)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._table.name!r}, {self._fields!r})"
