"""Table instance registry.

A TableRegistry hands out one shared instance per Table subclass, created
on first request and bound to the registry's store. Prefer passing a
registry (or the tables themselves) explicitly; the process-wide default
registry only backs ``Table.singleton()``.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, TypeVar

from row_orm.core.exceptions import StoreNotConfiguredError

if TYPE_CHECKING:
    from row_orm.core.store import RowStore
    from row_orm.table.base import Table

TableT = TypeVar("TableT", bound="Table")


class TableRegistry:
    """Caches one instance per concrete Table class.

    Args:
        store: Store every created table is bound to.
    """

    def __init__(self, store: RowStore) -> None:
        self._store = store
        self._instances: dict[type[Any], Any] = {}
        self._lock = threading.Lock()

    @property
    def store(self) -> RowStore:
        return self._store

    def get(self, table_class: type[TableT]) -> TableT:
        """Return the shared instance of ``table_class``, creating it if needed."""
        with self._lock:
            instance = self._instances.get(table_class)
            if instance is None:
                instance = table_class(self._store)
                self._instances[table_class] = instance
            return instance  # type: ignore[no-any-return]

    def has(self, table_class: type[Any]) -> bool:
        """Check if an instance for ``table_class`` was already created."""
        return table_class in self._instances

    def clear(self) -> None:
        """Drop every cached instance."""
        with self._lock:
            self._instances.clear()

    def __len__(self) -> int:
        return len(self._instances)


_default_registry: TableRegistry | None = None
_default_lock = threading.Lock()


def configure(store: RowStore) -> TableRegistry:
    """Install a fresh process-wide default registry bound to ``store``."""
    global _default_registry
    with _default_lock:
        _default_registry = TableRegistry(store)
        return _default_registry


def get_default_registry() -> TableRegistry:
    """Return the default registry.

    Raises:
        StoreNotConfiguredError: If configure() has not been called.
    """
    registry = _default_registry
    if registry is None:
        raise StoreNotConfiguredError()
    return registry


def reset_default_registry() -> None:
    """Forget the default registry (used by tests and at shutdown)."""
    global _default_registry
    with _default_lock:
        _default_registry = None
