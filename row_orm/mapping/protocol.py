"""Row object protocol.

The contract a Table relies on when it materializes and re-saves rows.
``Row`` implements it; custom row classes may implement it from scratch.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from row_orm.table.base import Table


@runtime_checkable
class RowLike(Protocol):
    """Base row protocol."""

    def __init__(
        self,
        table: Table,
        fields: Mapping[str, Any] | None = None,
        load_defaults: bool = False,
    ) -> None: ...

    def get_summary_fields(self) -> tuple[str, ...]:
        """Names of the fields this row caches computed values in."""
        ...

    def load_summary_fields(self, summary_fields: str | Iterable[str] | None = None) -> None:
        """Recompute the given summary fields (all of them when None)."""
        ...

    def set_summary_mode(self, summary_mode: bool) -> None:
        """Switch summary-only saving on or off."""
        ...

    def save(self) -> bool:
        """Persist the row. Returns the success of the write."""
        ...
