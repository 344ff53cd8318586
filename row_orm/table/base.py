"""Table base class.

Subclass once per logical table and declare its layout::

    class UserTable(Table):
        name = "users"
        field_prefix = "user_"
        fields = {"id": FieldType.ID, "name": FieldType.STR, "active": FieldType.BOOL}
        defaults = {"active": True}

Callers use logical field names (``name``); the table prefixes them into
column names (``user_name``) for the store and strips the prefix again
from every row it reads.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, ClassVar

from row_orm.core.conditions import (
    MATCH_ALL,
    Condition,
    ConditionInput,
    MatchAll,
    translate_conditions,
    translate_values,
)
from row_orm.core.context import current_read_mode_override, read_mode_scope
from row_orm.core.enums import FieldType, ReadMode
from row_orm.core.exceptions import (
    ColumnMismatchError,
    ConditionError,
    TableDefinitionError,
    UnknownFieldError,
)
from row_orm.core.options import QueryOptions
from row_orm.core.registry import get_default_registry
from row_orm.core.store import RowStore
from row_orm.mapping.factory import RowFactory
from row_orm.mapping.prefixer import FieldPrefixer
from row_orm.mapping.protocol import RowLike
from row_orm.mapping.result import ORMResult, ResultMapper
from row_orm.mapping.row import Row

logger = logging.getLogger(__name__)

Fields = str | Iterable[str] | None
Options = QueryOptions | Mapping[str, Any] | None


def _validate_definition(cls: type[Table]) -> None:
    """Normalize and check the class-level table layout."""
    if not cls.fields:
        raise TableDefinitionError(cls.__name__, "no fields declared")
    try:
        cls.fields = {name: FieldType(kind) for name, kind in cls.fields.items()}
    except ValueError as e:
        raise TableDefinitionError(cls.__name__, str(e)) from e
    cls.summary_fields = tuple(cls.summary_fields)

    if cls.id_field not in cls.fields:
        raise TableDefinitionError(cls.__name__, f"id field '{cls.id_field}' is not declared")
    for label, names in (
        ("default", cls.defaults),
        ("summary field", cls.summary_fields),
        ("field description", cls.field_descriptions),
    ):
        unknown = [name for name in names if name not in cls.fields]
        if unknown:
            raise TableDefinitionError(cls.__name__, f"{label} for undeclared fields {unknown}")


class Table:
    """Maps one physical table onto row objects.

    Args:
        store: Store the table reads from and writes to.
        read_mode: Endpoint used by reads unless a call or an enclosing
            read-mode scope says otherwise.
    """

    name: ClassVar[str] = ""
    field_prefix: ClassVar[str] = ""
    fields: ClassVar[Mapping[str, FieldType]] = {}
    defaults: ClassVar[Mapping[str, Any]] = {}
    summary_fields: ClassVar[tuple[str, ...]] = ()
    field_descriptions: ClassVar[Mapping[str, str]] = {}
    id_field: ClassVar[str] = "id"
    row_class: ClassVar[type[RowLike]] = Row

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Abstract intermediate classes leave the name empty
        if cls.name:
            _validate_definition(cls)

    def __init__(self, store: RowStore, *, read_mode: ReadMode = ReadMode.REPLICA) -> None:
        if not self.name:
            raise TableDefinitionError(type(self).__name__, "no table name declared")
        self._store = store
        self._read_mode = read_mode
        self._prefixer = FieldPrefixer(self.field_prefix)
        self._result_mapper = ResultMapper(self._prefixer, self.fields)
        self._row_factory = RowFactory(self, self.row_class)

    @classmethod
    def singleton(cls) -> Table:
        """Return the shared instance from the default registry."""
        return get_default_registry().get(cls)

    @property
    def store(self) -> RowStore:
        return self._store

    def _caller(self, operation: str) -> str:
        return f"{type(self).__name__}.{operation}"

    # --- Read mode ---

    @property
    def read_mode(self) -> ReadMode:
        """Instance default endpoint for reads."""
        return self._read_mode

    @read_mode.setter
    def read_mode(self, mode: ReadMode) -> None:
        self._read_mode = mode

    def get_read_mode(self, read_mode: ReadMode | None = None) -> ReadMode:
        """Endpoint a read would use: explicit argument, then scope, then default."""
        if read_mode is not None:
            return read_mode
        override = current_read_mode_override()
        return override if override is not None else self._read_mode

    @contextmanager
    def reading_from(self, mode: ReadMode) -> Iterator[Table]:
        """Scope in which reads of the current thread or task use ``mode``."""
        with read_mode_scope(mode):
            yield self

    # --- Metadata ---

    def get_fields(self) -> dict[str, FieldType]:
        return dict(self.fields)

    def get_field_names(self) -> list[str]:
        return list(self.fields)

    def can_have_field(self, name: str) -> bool:
        return name in self.fields

    def get_defaults(self) -> dict[str, Any]:
        return dict(self.defaults)

    def get_summary_fields(self) -> tuple[str, ...]:
        return self.summary_fields

    def get_field_descriptions(self) -> dict[str, str]:
        return dict(self.field_descriptions)

    # --- Prefixing ---

    def get_prefixed_field(self, field: str) -> str:
        """Return the column name of a declared field.

        Raises:
            UnknownFieldError: If the table does not declare ``field``.
        """
        if field not in self.fields:
            raise UnknownFieldError(self.name, field)
        return self._prefixer.prefix_field(field)

    def get_prefixed_fields(self, fields: Iterable[str]) -> list[str]:
        return [self.get_prefixed_field(field) for field in fields]

    def get_prefixed_values(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return translate_values(values, self.get_prefixed_field)

    def get_prefixed_conditions(self, conditions: ConditionInput) -> list[Condition]:
        return translate_conditions(conditions, self.get_prefixed_field)

    def unprefix_field_name(self, column: str) -> str:
        return self._prefixer.unprefix_field(column)

    def unprefix_field_names(self, columns: Iterable[str]) -> list[str]:
        return self._prefixer.unprefix_fields(columns)

    def _resolve_fields(self, fields: Fields) -> list[str]:
        if fields is None:
            return self.get_field_names()
        if isinstance(fields, str):
            return [fields]
        return list(fields)

    def _prefixed_options(self, options: Options) -> QueryOptions:
        return QueryOptions.coerce(options).prefixed(self.get_prefixed_field)

    def _storage_values(self, values: Mapping[str, Any]) -> dict[str, Any]:
        encoded = {}
        for field, value in values.items():
            if field not in self.fields:
                raise UnknownFieldError(self.name, field)
            encoded[field] = self.fields[field].to_storage(value)
        return self.get_prefixed_values(encoded)

    # --- Reads ---

    def raw_select(
        self,
        fields: Fields = None,
        conditions: ConditionInput = None,
        options: Options = None,
        caller: str | None = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Run the select and return the store's raw cursor (physical names).

        ``fields=None`` selects every declared field.
        """
        return self._store.select(
            self.name,
            self.get_prefixed_fields(self._resolve_fields(fields)),
            self.get_prefixed_conditions(conditions),
            self._prefixed_options(options),
            read_mode=self.get_read_mode(read_mode),
            caller=caller or self._caller("raw_select"),
        )

    def select(
        self,
        fields: Fields = None,
        conditions: ConditionInput = None,
        options: Options = None,
        caller: str | None = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> ORMResult[Any]:
        """Select matching records as a lazy, single-pass result of row objects."""
        cursor = self.raw_select(
            fields,
            conditions,
            options,
            caller or self._caller("select"),
            read_mode=read_mode,
        )
        return ORMResult(self, cursor)

    def select_objects(
        self,
        fields: Fields = None,
        conditions: ConditionInput = None,
        options: Options = None,
        caller: str | None = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> list[Any]:
        """Select matching records as an eagerly built list of row objects."""
        records = self.select_fields(
            fields,
            conditions,
            options,
            collapse=False,
            caller=caller or self._caller("select_objects"),
            read_mode=read_mode,
        )
        return [self.new_row(record) for record in records]

    def select_fields(
        self,
        fields: Fields = None,
        conditions: ConditionInput = None,
        options: Options = None,
        collapse: bool = True,
        caller: str | None = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> list[Any] | dict[Any, Any]:
        """Select matching records as logical field maps.

        When ``collapse`` is true the shape depends on the number of columns
        in the produced rows:

        * one column: a list of that column's values;
        * two columns: a dict mapping the first column to the second
          (the last row wins on duplicate keys);
        * more columns: a list of field maps, as with ``collapse=False``.

        Raises:
            ColumnMismatchError: If the rows do not all have the same width.
        """
        field_list = self._resolve_fields(fields)
        cursor = self.raw_select(
            field_list,
            conditions,
            options,
            caller or self._caller("select_fields"),
            read_mode=read_mode,
        )
        records = [self.get_fields_from_db_result(row) for row in cursor]

        if not collapse:
            return records

        width = self._result_width(records, len(field_list))
        if width == 1:
            return [next(iter(record.values())) for record in records]
        if width == 2:
            pairs: dict[Any, Any] = {}
            for record in records:
                key, value = record.values()
                pairs[key] = value
            return pairs
        return records

    def _result_width(self, records: list[dict[str, Any]], requested: int) -> int:
        if not records:
            return requested
        width = len(records[0])
        for record in records:
            if len(record) != width:
                raise ColumnMismatchError(self.name, width, len(record))
        return width

    def select_row(
        self,
        fields: Fields = None,
        conditions: ConditionInput = None,
        options: Options = None,
        caller: str | None = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> Any | None:
        """Return the first matching row object, or None."""
        result = self.select(
            fields,
            conditions,
            QueryOptions.coerce(options).with_limit(1),
            caller or self._caller("select_row"),
            read_mode=read_mode,
        )
        return None if result.is_empty() else result.current()

    def select_fields_row(
        self,
        fields: Fields = None,
        conditions: ConditionInput = None,
        options: Options = None,
        collapse: bool = True,
        caller: str | None = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> Any | None:
        """Return the first matching record as select_fields() shapes it, or None.

        A two-column collapsed projection comes back as a one-entry dict.
        """
        records = self.select_fields(
            fields,
            conditions,
            QueryOptions.coerce(options).with_limit(1),
            collapse,
            caller or self._caller("select_fields_row"),
            read_mode=read_mode,
        )
        if not records:
            return None
        if isinstance(records, dict):
            return records
        return records[0]

    def raw_select_row(
        self,
        columns: Iterable[str] | Mapping[str, str],
        conditions: ConditionInput = None,
        options: Options = None,
        caller: str | None = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> dict[str, Any] | None:
        """Select the first matching row without any prefixing.

        ``columns`` and condition keys are used as column names verbatim.
        A mapping of alias → expression selects computed columns.
        """
        if not isinstance(columns, Mapping):
            columns = list(columns)
        return self._store.select_row(
            self.name,
            columns,
            translate_conditions(conditions),
            QueryOptions.coerce(options),
            read_mode=self.get_read_mode(read_mode),
            caller=caller or self._caller("raw_select_row"),
        )

    def has(self, conditions: ConditionInput = None, *, read_mode: ReadMode | None = None) -> bool:
        """Return True if at least one record matches."""
        probe = self.select_fields_row(
            self.id_field,
            conditions,
            collapse=False,
            caller=self._caller("has"),
            read_mode=read_mode,
        )
        return probe is not None

    def count(
        self,
        conditions: ConditionInput = None,
        options: Options = None,
        *,
        read_mode: ReadMode | None = None,
    ) -> int:
        """Return the number of matching records.

        The store runs ``COUNT(*)``, which can be expensive on large tables;
        use the database's row estimate when an approximate number will do.
        """
        row = self._store.select_row(
            self.name,
            {"rowcount": "COUNT(*)"},
            self.get_prefixed_conditions(conditions),
            self._prefixed_options(options),
            read_mode=self.get_read_mode(read_mode),
            caller=self._caller("count"),
        )
        return 0 if row is None else int(row["rowcount"])

    # --- Writes ---

    def update(
        self,
        values: Mapping[str, Any],
        conditions: ConditionInput | MatchAll = None,
        caller: str | None = None,
    ) -> bool:
        """Set ``values`` on every matching record.

        No conditions (or MATCH_ALL) updates every record. Returns False only
        when the store fails to run the statement; matching zero records is
        a success.
        """
        physical: list[Condition] | MatchAll = (
            MATCH_ALL if isinstance(conditions, MatchAll) else self.get_prefixed_conditions(conditions)
        )
        return self._store.update(
            self.name,
            self._storage_values(values),
            physical,
            caller=caller or self._caller("update"),
        )

    def delete(self, conditions: ConditionInput | MatchAll, caller: str | None = None) -> bool:
        """Delete matching records.

        Deleting every record needs the explicit MATCH_ALL marker.

        Raises:
            ConditionError: If ``conditions`` is empty.
        """
        if isinstance(conditions, MatchAll):
            physical: list[Condition] | MatchAll = MATCH_ALL
        else:
            physical = self.get_prefixed_conditions(conditions)
            if not physical:
                raise ConditionError(
                    f"Refusing to delete from '{self.name}' without conditions; "
                    "pass MATCH_ALL to delete every row"
                )
        return self._store.delete(self.name, physical, caller=caller or self._caller("delete"))

    def insert(self, values: Mapping[str, Any], caller: str | None = None) -> Any:
        """Insert one record and return its id, or None when the insert fails."""
        return self._store.insert(
            self.name,
            self._storage_values(values),
            id_column=self._prefixer.prefix_field(self.id_field),
            caller=caller or self._caller("insert"),
        )

    def update_summary_fields(
        self,
        summary_fields: str | Iterable[str] | None = None,
        conditions: ConditionInput = None,
    ) -> int:
        """Recompute and save summary fields of every matching record.

        Reads inside the batch go to the primary so freshly written inputs
        are visible; the previous read mode is back in place afterwards,
        also when a row raises. Rows saved before a failure stay saved.

        Returns:
            Number of rows saved successfully.
        """
        saved = 0
        failed = 0
        with self.reading_from(ReadMode.PRIMARY):
            for row in self.select(None, conditions, caller=self._caller("update_summary_fields")):
                row.load_summary_fields(summary_fields)
                row.set_summary_mode(True)
                if row.save():
                    saved += 1
                else:
                    failed += 1
                    logger.warning(
                        "Saving summary fields of %s row %r failed", self.name, row.get_id()
                    )
        logger.info(
            "Recomputed summary fields of %s: %d saved, %d failed", self.name, saved, failed
        )
        return saved

    # --- Row materialization ---

    def get_fields_from_db_result(self, result: Mapping[str, Any]) -> dict[str, Any]:
        """Turn a store row into a logical field map."""
        return self._result_mapper.to_fields(result)

    def new_row_from_db_result(self, result: Mapping[str, Any]) -> Any:
        return self.new_row(self.get_fields_from_db_result(result))

    def new_row(self, data: Mapping[str, Any], load_defaults: bool = False) -> Any:
        """Build a row object; ``load_defaults`` fills absent fields from the defaults."""
        return self._row_factory.build(data, load_defaults)

    def new_from_db_result(self, result: Mapping[str, Any]) -> Any:
        """Deprecated alias of new_row_from_db_result()."""
        warnings.warn(
            "new_from_db_result() is deprecated, use new_row_from_db_result()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.new_row_from_db_result(result)

    def new_from_array(self, data: Mapping[str, Any], load_defaults: bool = False) -> Any:
        """Deprecated alias of new_row()."""
        warnings.warn(
            "new_from_array() is deprecated, use new_row()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.new_row(data, load_defaults)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, prefix={self.field_prefix!r})"
