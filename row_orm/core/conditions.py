"""Condition variants and the logical → physical condition translator.

A condition map is what callers write::

    {"status": "active", "id": [1, 2, 3], 0: "age > 18", 1: ("team", 4)}

String keys are field names: a scalar value means equality, a collection
means ``IN``. Positional (int) keys carry either a ``(field, value)`` pair,
handled like a string key, or a raw SQL fragment whose first token is a
field name. Raw fragments are kept as their own condition kind so the store
can AND them verbatim.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from row_orm.core.exceptions import ConditionError

_COLLECTION_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class Equals:
    """``field = value``, or ``field IS NULL`` when value is None."""

    field: str
    value: Any


@dataclass(frozen=True)
class In:
    """``field IN (values)``. An empty value tuple matches no rows."""

    field: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class RawFragment:
    """A SQL fragment ANDed verbatim into the WHERE clause."""

    text: str


class MatchAll:
    """Marker selecting every row of the table.

    Write operations that would otherwise refuse an empty condition map
    accept this marker as an explicit opt-in.
    """

    _instance: MatchAll | None = None

    def __new__(cls) -> MatchAll:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MATCH_ALL"


MATCH_ALL = MatchAll()

Condition = Union[Equals, In, RawFragment]
ConditionInput = Union[Mapping[Any, Any], Iterable[Condition], None]


def _identity(field: str) -> str:
    return field


def _structured(field: str, value: Any) -> Condition:
    if isinstance(value, _COLLECTION_TYPES):
        return In(field, tuple(value))
    return Equals(field, value)


def prefix_fragment(fragment: str, prefix_field: Callable[[str], str]) -> str:
    """Prefix the leading field token of ``"field rest-of-fragment"``."""
    head, sep, rest = fragment.strip().partition(" ")
    if not head:
        raise ConditionError("Raw condition fragment is empty")
    return prefix_field(head) + sep + rest


def _translate_condition(condition: Condition, prefix_field: Callable[[str], str]) -> Condition:
    if isinstance(condition, Equals):
        return Equals(prefix_field(condition.field), condition.value)
    if isinstance(condition, In):
        return In(prefix_field(condition.field), condition.values)
    return RawFragment(prefix_fragment(condition.text, prefix_field))


def _translate_positional(value: Any, prefix_field: Callable[[str], str]) -> Condition:
    if isinstance(value, (Equals, In, RawFragment)):
        return _translate_condition(value, prefix_field)
    if isinstance(value, str):
        return RawFragment(prefix_fragment(value, prefix_field))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        field, field_value = value
        if not isinstance(field, str):
            raise ConditionError(f"Condition pair needs a field name first, got {field!r}")
        return _structured(prefix_field(field), field_value)
    raise ConditionError(
        f"Positional condition must be a raw fragment, a (field, value) pair "
        f"or a Condition, got {value!r}"
    )


def translate_conditions(
    conditions: ConditionInput,
    prefix_field: Callable[[str], str] | None = None,
) -> list[Condition]:
    """Translate a logical condition map into physical conditions.

    Args:
        conditions: A condition map, an iterable of Condition objects, or None.
        prefix_field: Maps (and validates) a logical field name to its column.
            Defaults to the identity, for conditions that are already physical.

    Returns:
        Physical conditions in input order. An empty list means no WHERE clause.

    Raises:
        ConditionError: If an entry has a shape the translator cannot represent.
    """
    if prefix_field is None:
        prefix_field = _identity
    if conditions is None:
        return []
    if isinstance(conditions, MatchAll):
        raise ConditionError("MATCH_ALL is only accepted by delete and update")

    translated: list[Condition] = []
    if isinstance(conditions, Mapping):
        for key, value in conditions.items():
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                raise ConditionError(f"Invalid condition key {key!r}")
            if isinstance(key, int):
                translated.append(_translate_positional(value, prefix_field))
            else:
                translated.append(_structured(prefix_field(key), value))
        return translated

    for condition in conditions:
        if not isinstance(condition, (Equals, In, RawFragment)):
            raise ConditionError(f"Expected a Condition object, got {condition!r}")
        translated.append(_translate_condition(condition, prefix_field))
    return translated


def translate_values(
    values: Mapping[str, Any],
    prefix_field: Callable[[str], str],
) -> dict[str, Any]:
    """Prefix the keys of a field → value map used for writes."""
    prefixed: dict[str, Any] = {}
    for field, value in values.items():
        if not isinstance(field, str):
            raise ConditionError(f"Write values need field names as keys, got {field!r}")
        prefixed[prefix_field(field)] = value
    return prefixed
