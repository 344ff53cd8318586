"""SQL statement compilation.

Statements are built with ``:name`` placeholders and converted to the
adapter's paramstyle at the end. Identifier quoting and LIMIT syntax are
delegated to the adapter.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from row_orm.core.conditions import Condition, Equals, In, MatchAll, RawFragment
from row_orm.core.exceptions import ConditionError
from row_orm.core.options import QueryOptions
from row_orm.core.params import escape_percent, normalize_params


@dataclass(frozen=True)
class CompiledStatement:
    """SQL text in the driver's paramstyle plus its bind parameters."""

    sql: str
    params: dict[str, Any]


class _Params:
    """Collects bind values under generated names."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}

    def add(self, value: Any) -> str:
        name = f"p{len(self.values)}"
        self.values[name] = value
        return f":{name}"


def _caller_comment(caller: str | None) -> str:
    if not caller:
        return ""
    return "/* " + caller.replace("*/", "* /") + " */ "


class SQLCompiler:
    """Compiles physical table operations into SQL for one adapter."""

    def __init__(self, adapter: Any) -> None:
        self._adapter = adapter

    def _quote(self, name: str) -> str:
        return self._adapter.quote_identifier(name)

    def _finish(self, sql: str, params: _Params) -> CompiledStatement:
        paramstyle = self._adapter.paramstyle
        sql = escape_percent(sql, paramstyle, bool(params.values))
        return CompiledStatement(normalize_params(sql, paramstyle), params.values)

    def _where(
        self,
        conditions: Sequence[Condition] | MatchAll,
        params: _Params,
    ) -> str:
        if isinstance(conditions, MatchAll) or not conditions:
            return ""

        clauses: list[str] = []
        for condition in conditions:
            if isinstance(condition, Equals):
                column = self._quote(condition.field)
                if condition.value is None:
                    clauses.append(f"{column} IS NULL")
                else:
                    clauses.append(f"{column} = {params.add(condition.value)}")
            elif isinstance(condition, In):
                if not condition.values:
                    clauses.append("1 = 0")
                else:
                    placeholders = ", ".join(params.add(v) for v in condition.values)
                    clauses.append(f"{self._quote(condition.field)} IN ({placeholders})")
            elif isinstance(condition, RawFragment):
                clauses.append(f"({condition.text})")
            else:
                raise ConditionError(f"Cannot compile condition {condition!r}")
        return " WHERE " + " AND ".join(clauses)

    def _columns(self, columns: Sequence[str] | Mapping[str, str]) -> str:
        if isinstance(columns, Mapping):
            return ", ".join(f"{expr} AS {self._quote(alias)}" for alias, expr in columns.items())
        return ", ".join(self._quote(column) for column in columns)

    def _order_by(self, order_by: Sequence[str]) -> str:
        if not order_by:
            return ""
        entries = []
        for entry in order_by:
            column, _, direction = entry.partition(" ")
            entry_sql = self._quote(column)
            if direction.strip():
                entry_sql += " " + direction.strip().upper()
            entries.append(entry_sql)
        return " ORDER BY " + ", ".join(entries)

    def select(
        self,
        table: str,
        columns: Sequence[str] | Mapping[str, str],
        conditions: Sequence[Condition],
        options: QueryOptions,
        caller: str | None = None,
    ) -> CompiledStatement:
        params = _Params()
        distinct = "DISTINCT " if options.distinct else ""
        sql = (
            f"{_caller_comment(caller)}SELECT {distinct}{self._columns(columns)} "
            f"FROM {self._quote(table)}"
            f"{self._where(conditions, params)}"
            f"{self._order_by(options.order_by)}"
            f"{self._adapter.limit_clause(options.limit, options.offset)}"
        )
        return self._finish(sql, params)

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        conditions: Sequence[Condition] | MatchAll,
        caller: str | None = None,
    ) -> CompiledStatement:
        if not values:
            raise ConditionError("An update needs at least one value to set")
        params = _Params()
        assignments = ", ".join(
            f"{self._quote(column)} = {params.add(value)}" for column, value in values.items()
        )
        sql = (
            f"{_caller_comment(caller)}UPDATE {self._quote(table)} SET {assignments}"
            f"{self._where(conditions, params)}"
        )
        return self._finish(sql, params)

    def delete(
        self,
        table: str,
        conditions: Sequence[Condition] | MatchAll,
        caller: str | None = None,
    ) -> CompiledStatement:
        params = _Params()
        sql = (
            f"{_caller_comment(caller)}DELETE FROM {self._quote(table)}"
            f"{self._where(conditions, params)}"
        )
        return self._finish(sql, params)

    def insert(
        self,
        table: str,
        values: Mapping[str, Any],
        caller: str | None = None,
    ) -> CompiledStatement:
        params = _Params()
        if values:
            columns = ", ".join(self._quote(column) for column in values)
            placeholders = ", ".join(params.add(value) for value in values.values())
            body = f"({columns}) VALUES ({placeholders})"
        else:
            body = "DEFAULT VALUES"
        sql = f"{_caller_comment(caller)}INSERT INTO {self._quote(table)} {body}"
        return self._finish(sql, params)
