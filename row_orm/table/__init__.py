"""Table layer - one Table subclass per logical table."""

from __future__ import annotations

from row_orm.table.base import Table

__all__ = [
    "Table",
]
