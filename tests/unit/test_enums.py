"""Unit tests for FieldType storage conversion."""

from __future__ import annotations

import pytest

from row_orm.core.enums import FieldType


class TestFieldTypeToStorage:
    def test_bool_stays_bool(self) -> None:
        assert FieldType.BOOL.to_storage(True) is True
        assert FieldType.BOOL.to_storage(0) is False
        assert FieldType.BOOL.to_storage("yes") is True

    def test_array_becomes_json(self) -> None:
        assert FieldType.ARRAY.to_storage(["a", 1]) == '["a", 1]'

    def test_int_coerces(self) -> None:
        assert FieldType.INT.to_storage("42") == 42
        assert FieldType.ID.to_storage(7.0) == 7

    def test_str_coerces(self) -> None:
        assert FieldType.STR.to_storage(5) == "5"

    @pytest.mark.parametrize("field_type", list(FieldType))
    def test_none_passes_through(self, field_type: FieldType) -> None:
        assert field_type.to_storage(None) is None
        assert field_type.from_storage(None) is None


class TestFieldTypeFromStorage:
    def test_bool_from_integer(self) -> None:
        assert FieldType.BOOL.from_storage(1) is True
        assert FieldType.BOOL.from_storage(0) is False

    def test_array_from_json_text(self) -> None:
        assert FieldType.ARRAY.from_storage('["x", "y"]') == ["x", "y"]

    def test_array_from_bytes(self) -> None:
        assert FieldType.ARRAY.from_storage(b"[1, 2]") == [1, 2]

    def test_array_from_empty_text(self) -> None:
        assert FieldType.ARRAY.from_storage("") == []

    def test_array_from_native_list(self) -> None:
        assert FieldType.ARRAY.from_storage((1, 2)) == [1, 2]

    def test_blob_untouched(self) -> None:
        assert FieldType.BLOB.from_storage(b"\x00\x01") == b"\x00\x01"

    def test_lookup_by_value(self) -> None:
        assert FieldType("str") is FieldType.STR
