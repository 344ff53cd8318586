"""Unit tests for parameter normalization and percent escaping."""

from __future__ import annotations

from row_orm.core.params import escape_percent, normalize_params


class TestNormalizeParams:
    def test_named_passthrough(self) -> None:
        sql = 'SELECT "user_name" FROM "users" WHERE "user_id" = :p0'
        assert normalize_params(sql, "named") == sql

    def test_pyformat_conversion(self) -> None:
        sql = 'SELECT "user_name" FROM "users" WHERE "user_id" = :p0'
        expected = 'SELECT "user_name" FROM "users" WHERE "user_id" = %(p0)s'
        assert normalize_params(sql, "pyformat") == expected

    def test_multiple_params(self) -> None:
        sql = 'UPDATE "users" SET "user_name" = :p0 WHERE "user_id" IN (:p1, :p2)'
        expected = 'UPDATE "users" SET "user_name" = %(p0)s WHERE "user_id" IN (%(p1)s, %(p2)s)'
        assert normalize_params(sql, "pyformat") == expected

    def test_typecast_exclusion(self) -> None:
        sql = 'SELECT "user_id" FROM "users" WHERE ("user_score::numeric > 1") AND "user_id" = :p0'
        assert normalize_params(sql, "pyformat").endswith("= %(p0)s")
        assert "::numeric" in normalize_params(sql, "pyformat")

    def test_string_literal_exclusion(self) -> None:
        sql = "SELECT 1 FROM t WHERE (t_note = ':not_a_param') AND t_id = :p0"
        expected = "SELECT 1 FROM t WHERE (t_note = ':not_a_param') AND t_id = %(p0)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_no_params(self) -> None:
        sql = 'DELETE FROM "users"'
        assert normalize_params(sql, "pyformat") == sql


class TestEscapePercent:
    def test_pyformat_with_params_doubles_percent(self) -> None:
        sql = "SELECT 1 FROM t WHERE (t_name LIKE 'a%') AND t_id = :p0"
        assert escape_percent(sql, "pyformat", True) == (
            "SELECT 1 FROM t WHERE (t_name LIKE 'a%%') AND t_id = :p0"
        )

    def test_pyformat_without_params_untouched(self) -> None:
        sql = "SELECT 1 FROM t WHERE (t_name LIKE 'a%')"
        assert escape_percent(sql, "pyformat", False) == sql

    def test_named_untouched(self) -> None:
        sql = "SELECT 1 FROM t WHERE (t_name LIKE 'a%') AND t_id = :p0"
        assert escape_percent(sql, "named", True) == sql
