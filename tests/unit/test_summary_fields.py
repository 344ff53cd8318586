"""Unit tests for batch summary recomputation and read-mode scoping."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock

import pytest

from row_orm.core.conditions import Equals, In
from row_orm.core.context import current_read_mode_override, primary_reads, read_mode_scope
from row_orm.core.enums import FieldType, ReadMode
from row_orm.mapping.row import Row
from row_orm.table.base import Table

# --- Test tables ---


class ProjectRow(Row):
    # Filled in per test: (project id, read mode seen while computing)
    seen: list[tuple[Any, ReadMode]] = []
    fail_on: Any = None

    def compute_summary_field(self, name: str) -> Any:
        if self.get_id() == self.fail_on:
            raise RuntimeError("summary input unavailable")
        self.seen.append((self.get_id(), self.table.get_read_mode()))
        return self.get_id() * 10


class ProjectTable(Table):
    name = "projects"
    field_prefix = "proj_"
    fields = {
        "id": FieldType.ID,
        "title": FieldType.STR,
        "task_count": FieldType.INT,
        "open_count": FieldType.INT,
    }
    summary_fields = ("task_count", "open_count")
    row_class = ProjectRow


@pytest.fixture
def projects(mock_store: MagicMock) -> ProjectTable:
    ProjectRow.seen = []
    ProjectRow.fail_on = None
    mock_store.select.return_value = iter(
        [
            {"proj_id": 1, "proj_title": "a", "proj_task_count": 0, "proj_open_count": 0},
            {"proj_id": 2, "proj_title": "b", "proj_task_count": 0, "proj_open_count": 0},
        ]
    )
    return ProjectTable(mock_store)


class TestUpdateSummaryFields:
    def test_saves_every_row(self, projects: ProjectTable, mock_store: MagicMock) -> None:
        assert projects.update_summary_fields() == 2
        assert mock_store.update.call_count == 2
        mock_store.update.assert_any_call(
            "projects",
            {"proj_task_count": 20, "proj_open_count": 20},
            [Equals("proj_id", 2)],
            caller="ProjectTable.update",
        )

    def test_only_named_field(self, projects: ProjectTable, mock_store: MagicMock) -> None:
        projects.update_summary_fields("open_count", {"id": [1, 2]})
        first_values = mock_store.update.call_args_list[0].args[1]
        assert first_values == {"proj_open_count": 10}
        assert mock_store.select.call_args.args[2] == [In("proj_id", (1, 2))]

    def test_reads_go_to_primary(self, projects: ProjectTable, mock_store: MagicMock) -> None:
        projects.update_summary_fields()
        assert mock_store.select.call_args.kwargs["read_mode"] is ReadMode.PRIMARY
        assert {project for project, _ in ProjectRow.seen} == {1, 2}
        assert {mode for _, mode in ProjectRow.seen} == {ReadMode.PRIMARY}

    def test_read_mode_restored(self, projects: ProjectTable) -> None:
        projects.update_summary_fields()
        assert current_read_mode_override() is None
        assert projects.get_read_mode() is ReadMode.REPLICA

    def test_read_mode_restored_after_failure(
        self, projects: ProjectTable, mock_store: MagicMock
    ) -> None:
        ProjectRow.fail_on = 2
        with pytest.raises(RuntimeError):
            projects.update_summary_fields()
        assert current_read_mode_override() is None
        assert projects.get_read_mode() is ReadMode.REPLICA
        # Rows saved before the failure stay saved
        assert mock_store.update.call_count == 1

    def test_outer_scope_restored(self, projects: ProjectTable) -> None:
        with read_mode_scope(ReadMode.REPLICA):
            projects.update_summary_fields()
            assert current_read_mode_override() is ReadMode.REPLICA

    def test_failed_saves_logged(
        self, projects: ProjectTable, mock_store: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        mock_store.update.return_value = False
        with caplog.at_level(logging.WARNING, logger="row_orm.table.base"):
            assert projects.update_summary_fields() == 0
        assert "Saving summary fields of projects row 1 failed" in caplog.text

    def test_empty_table(self, projects: ProjectTable, mock_store: MagicMock) -> None:
        mock_store.select.return_value = iter([])
        assert projects.update_summary_fields() == 0
        mock_store.update.assert_not_called()


class TestReadModeScope:
    def test_no_override_by_default(self) -> None:
        assert current_read_mode_override() is None

    def test_primary_reads(self) -> None:
        with primary_reads() as mode:
            assert mode is ReadMode.PRIMARY
            assert current_read_mode_override() is ReadMode.PRIMARY
        assert current_read_mode_override() is None

    def test_nested_scopes(self) -> None:
        with read_mode_scope(ReadMode.PRIMARY):
            with read_mode_scope(ReadMode.REPLICA):
                assert current_read_mode_override() is ReadMode.REPLICA
            assert current_read_mode_override() is ReadMode.PRIMARY

    def test_reset_on_error(self) -> None:
        with pytest.raises(ValueError):
            with primary_reads():
                raise ValueError("boom")
        assert current_read_mode_override() is None
