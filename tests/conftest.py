"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from row_orm.core.connection import ConnectionConfig
from row_orm.core.enums import FieldType
from row_orm.core.registry import reset_default_registry
from row_orm.table.base import Table


class UserTable(Table):
    name = "users"
    field_prefix = "user_"
    fields = {
        "id": FieldType.ID,
        "name": FieldType.STR,
        "email": FieldType.STR,
        "active": FieldType.BOOL,
        "tags": FieldType.ARRAY,
    }
    defaults = {"active": True, "tags": []}
    field_descriptions = {"email": "Primary contact address"}


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def mock_store() -> MagicMock:
    """Store double; reads return no rows unless a test says otherwise."""
    store = MagicMock()
    store.select.return_value = iter([])
    store.select_row.return_value = None
    store.update.return_value = True
    store.delete.return_value = True
    store.insert.return_value = None
    return store


@pytest.fixture
def user_table(mock_store: MagicMock) -> UserTable:
    """Users table bound to the mock store."""
    return UserTable(mock_store)


@pytest.fixture(autouse=True)
def _reset_default_registry() -> Iterator[None]:
    """Keep configure() calls from leaking between tests."""
    reset_default_registry()
    yield
    reset_default_registry()
