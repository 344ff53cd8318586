"""Select options.

Accepts the lower-case keyword form as well as the upper-case keys
(``LIMIT``, ``OFFSET``, ``ORDER BY``, ``DISTINCT``) used by older callers.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from row_orm.core.conditions import prefix_fragment

_UPPER_KEYS = {
    "LIMIT": "limit",
    "OFFSET": "offset",
    "ORDER BY": "order_by",
    "DISTINCT": "distinct",
}

_DIRECTIONS = ("ASC", "DESC")


class QueryOptions(BaseModel):
    """Options applied to a select."""

    model_config = {"frozen": True, "extra": "forbid"}

    limit: int | None = Field(default=None, ge=1)
    offset: int | None = Field(default=None, ge=0)
    order_by: tuple[str, ...] = ()
    distinct: bool = False

    @field_validator("order_by", mode="before")
    @classmethod
    def _split_order_by(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("order_by")
    @classmethod
    def _check_direction(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for entry in value:
            parts = entry.split()
            if len(parts) > 2 or (len(parts) == 2 and parts[1].upper() not in _DIRECTIONS):
                raise ValueError(f"order_by entry must be 'field' or 'field ASC|DESC': {entry!r}")
        return value

    @classmethod
    def coerce(cls, options: QueryOptions | Mapping[str, Any] | None) -> QueryOptions:
        """Build options from None, a mapping, or an existing instance."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        normalized = {_UPPER_KEYS.get(key, key): value for key, value in options.items()}
        return cls.model_validate(normalized)

    def with_limit(self, limit: int) -> QueryOptions:
        return self.model_copy(update={"limit": limit})

    def prefixed(self, prefix_field: Callable[[str], str]) -> QueryOptions:
        """Return a copy whose order_by entries name physical columns."""
        if not self.order_by:
            return self
        return self.model_copy(
            update={"order_by": tuple(prefix_fragment(e, prefix_field) for e in self.order_by)}
        )
