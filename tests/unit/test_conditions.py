"""Unit tests for condition translation."""

from __future__ import annotations

import pytest

from row_orm.core.conditions import (
    MATCH_ALL,
    Equals,
    In,
    MatchAll,
    RawFragment,
    prefix_fragment,
    translate_conditions,
    translate_values,
)
from row_orm.core.exceptions import ConditionError, UnknownFieldError

KNOWN = {"id", "name", "age", "team"}


def prefix(field: str) -> str:
    if field not in KNOWN:
        raise UnknownFieldError("users", field)
    return "user_" + field


class TestTranslateConditions:
    def test_none_is_empty(self) -> None:
        assert translate_conditions(None, prefix) == []

    def test_empty_mapping_is_empty(self) -> None:
        assert translate_conditions({}, prefix) == []

    def test_scalar_becomes_equals(self) -> None:
        assert translate_conditions({"name": "ann"}, prefix) == [Equals("user_name", "ann")]

    def test_none_value_becomes_equals_none(self) -> None:
        assert translate_conditions({"team": None}, prefix) == [Equals("user_team", None)]

    @pytest.mark.parametrize("values", [[1, 2], (1, 2)])
    def test_collection_becomes_in(self, values) -> None:
        assert translate_conditions({"id": values}, prefix) == [In("user_id", (1, 2))]

    def test_set_becomes_in(self) -> None:
        (condition,) = translate_conditions({"id": {3}}, prefix)
        assert condition == In("user_id", (3,))

    def test_positional_string_is_raw_fragment(self) -> None:
        result = translate_conditions({0: "age > 18"}, prefix)
        assert result == [RawFragment("user_age > 18")]

    def test_positional_pair_is_prefixed(self) -> None:
        result = translate_conditions({0: ("team", 4), 1: ("id", [1, 2])}, prefix)
        assert result == [Equals("user_team", 4), In("user_id", (1, 2))]

    def test_mixed_keys_keep_order(self) -> None:
        result = translate_conditions({"name": "ann", 0: "age >= 21", "id": [5]}, prefix)
        assert result == [
            Equals("user_name", "ann"),
            RawFragment("user_age >= 21"),
            In("user_id", (5,)),
        ]

    def test_condition_objects(self) -> None:
        result = translate_conditions([Equals("name", "x"), RawFragment("age < 3")], prefix)
        assert result == [Equals("user_name", "x"), RawFragment("user_age < 3")]

    def test_unknown_field_propagates(self) -> None:
        with pytest.raises(UnknownFieldError):
            translate_conditions({"nickname": "x"}, prefix)

    def test_unknown_field_in_fragment_propagates(self) -> None:
        with pytest.raises(UnknownFieldError):
            translate_conditions({0: "nickname IS NULL"}, prefix)

    def test_without_prefix_function_is_identity(self) -> None:
        assert translate_conditions({"user_id": 1}) == [Equals("user_id", 1)]

    def test_match_all_rejected(self) -> None:
        with pytest.raises(ConditionError):
            translate_conditions(MATCH_ALL, prefix)  # type: ignore[arg-type]

    def test_bool_key_rejected(self) -> None:
        with pytest.raises(ConditionError):
            translate_conditions({True: "age > 1"}, prefix)

    def test_bad_positional_value_rejected(self) -> None:
        with pytest.raises(ConditionError):
            translate_conditions({0: 42}, prefix)

    def test_pair_without_field_name_rejected(self) -> None:
        with pytest.raises(ConditionError):
            translate_conditions({0: (1, 2)}, prefix)

    def test_blank_fragment_rejected(self) -> None:
        with pytest.raises(ConditionError):
            translate_conditions({0: "   "}, prefix)

    def test_non_condition_in_iterable_rejected(self) -> None:
        with pytest.raises(ConditionError):
            translate_conditions([("name", "x")], prefix)  # type: ignore[list-item]


class TestPrefixFragment:
    def test_only_first_token_prefixed(self) -> None:
        assert prefix_fragment("age BETWEEN 1 AND 5", prefix) == "user_age BETWEEN 1 AND 5"

    def test_single_token(self) -> None:
        assert prefix_fragment("  name ", prefix) == "user_name"


class TestTranslateValues:
    def test_keys_prefixed(self) -> None:
        assert translate_values({"name": "a", "age": 3}, prefix) == {
            "user_name": "a",
            "user_age": 3,
        }

    def test_non_string_key_rejected(self) -> None:
        with pytest.raises(ConditionError):
            translate_values({0: "a"}, prefix)  # type: ignore[dict-item]


class TestMatchAll:
    def test_singleton(self) -> None:
        assert MatchAll() is MATCH_ALL

    def test_repr(self) -> None:
        assert repr(MATCH_ALL) == "MATCH_ALL"
