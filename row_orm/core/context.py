"""Scoped read-mode override.

The override lives in a ContextVar, so it is private to the current thread
or asyncio task and is always reset when the scope exits.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar

from row_orm.core.enums import ReadMode

_read_mode_override: ContextVar[ReadMode | None] = ContextVar(
    "row_orm_read_mode_override", default=None
)


def current_read_mode_override() -> ReadMode | None:
    """Return the read mode forced by an enclosing scope, if any."""
    return _read_mode_override.get()


@contextmanager
def read_mode_scope(mode: ReadMode) -> Iterator[ReadMode]:
    """Force every table read in this context to use ``mode``."""
    token = _read_mode_override.set(mode)
    try:
        yield mode
    finally:
        _read_mode_override.reset(token)


def primary_reads() -> AbstractContextManager[ReadMode]:
    """Scope in which reads hit the primary, e.g. right after writing."""
    return read_mode_scope(ReadMode.PRIMARY)
