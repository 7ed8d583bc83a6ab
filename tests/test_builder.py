# fluentdb — fluent SQL query builder over DB-API connections
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Tests for fluentdb.query.builder — composition and terminal calls."""

from __future__ import annotations

import sqlite3
from unittest.mock import MagicMock

import pytest

from fluentdb.db.data_types import ErrorDetail, FetchMode
from fluentdb.errors import BuilderStateError, MalformedConditionError
from fluentdb.query.builder import BuilderState, QueryBuilder


def _executor():
    executor = MagicMock()
    executor.error_types = sqlite3.Error
    return executor


def _builder(executor=None):
    return QueryBuilder(executor or _executor())


class TestSelect:
    def test_columns_and_trailing_space(self):
        qb = _builder().select("users", ["id", "name"])
        assert qb.text == "SELECT id, name FROM users "
        assert qb.parameters == {}
        assert qb.state is BuilderState.COMPOSING

    def test_default_star(self):
        assert _builder().select("users").text == "SELECT * FROM users "

    def test_select_resets_previous_statement(self):
        qb = _builder().select("users").where({"id": "2"})
        qb.select("posts")
        assert qb.text == "SELECT * FROM posts "
        assert qb.parameters == {}
        qb.where({"id": "3"})
        assert qb.text == "SELECT * FROM posts WHERE id = :id "


class TestWhere:
    def test_equality(self):
        qb = _builder().select("users", ["id", "name"]).where({"id": "2"})
        assert qb.text == "SELECT id, name FROM users WHERE id = :id "
        assert qb.parameters == {"id": "2"}

    def test_operator(self):
        qb = _builder().select("users").where({"id": ">= 1"})
        assert qb.text.endswith("WHERE id >= :id ")
        assert qb.parameters == {"id": "1"}

    def test_multiple_conditions_joined_with_and(self):
        qb = _builder().select("users").where({"id": "1", "age": ">= 18"})
        assert qb.text == "SELECT * FROM users WHERE id = :id AND age >= :age "
        assert qb.parameters == {"id": "1", "age": "18"}
        assert not qb.text.rstrip().endswith("AND")

    def test_follows_mapping_order(self):
        qb = _builder().select("t").where({"b": "2", "a": "1"})
        assert qb.text == "SELECT * FROM t WHERE b = :b AND a = :a "

    def test_second_call_continues_clause(self):
        qb = _builder().select("users").where({"id": "1"}).where({"age": "< 65"})
        assert qb.text == "SELECT * FROM users WHERE id = :id AND age < :age "
        assert qb.parameters == {"id": "1", "age": "65"}

    def test_empty_call_leaves_no_dangling_and(self):
        qb = _builder().select("users").where({"id": "1"}).where({}).order_by("id")
        assert qb.text == "SELECT * FROM users WHERE id = :id ORDER BY id ASC "

    def test_empty_first_call_adds_no_where(self):
        qb = _builder().select("users").where({})
        assert qb.text == "SELECT * FROM users "

    def test_column_named_like_keyword(self):
        qb = _builder().select("t", ["WHEREABOUTS"]).where({"id": "1"})
        assert qb.text == "SELECT WHEREABOUTS FROM t WHERE id = :id "

    def test_last_write_wins(self):
        qb = _builder().select("t").where({"a": "1"}).where({"a": "> 5"})
        assert qb.parameters == {"a": "5"}

    def test_numeric_and_null_values(self):
        qb = _builder().select("t").where({"n": 3, "x": None})
        assert qb.text == "SELECT * FROM t WHERE n = :n AND x = :x "
        assert qb.parameters == {"n": 3, "x": None}

    def test_malformed_leaves_builder_unchanged(self):
        qb = _builder().select("t")
        with pytest.raises(MalformedConditionError):
            qb.where({"a": "1", "b": "=> 2"})
        assert qb.text == "SELECT * FROM t "
        assert qb.parameters == {}

    def test_requires_statement(self):
        with pytest.raises(BuilderStateError):
            _builder().where({"id": "1"})

    def test_every_placeholder_has_a_parameter(self):
        qb = _builder().select("t").where({"a": "1", "b": "!= 2", "c": "<= 3"})
        for key in qb.parameters:
            assert f":{key} " in qb.text
        assert qb.text.count(":") == len(qb.parameters)


class TestOrderBy:
    def test_default_ascending(self):
        qb = _builder().select("users").order_by("name")
        assert qb.text.endswith("ORDER BY name ASC ")

    def test_descending(self):
        qb = _builder().select("users").order_by("name", "DESC")
        assert qb.text.endswith("ORDER BY name DESC ")

    def test_after_where(self):
        qb = _builder().select("users").where({"id": ">= 1"}).order_by("id", "DESC")
        assert qb.text == "SELECT * FROM users WHERE id >= :id ORDER BY id DESC "

    def test_not_deduplicated(self):
        qb = _builder().select("t").order_by("a").order_by("b")
        assert qb.text == "SELECT * FROM t ORDER BY a ASC ORDER BY b ASC "


class TestQuery:
    def test_staged_not_executed(self):
        executor = _executor()
        qb = _builder(executor).query("SELECT * FROM users WHERE id >= :id", {"id": 1})
        assert qb.text == "SELECT * FROM users WHERE id >= :id"
        assert qb.parameters == {"id": 1}
        executor.execute.assert_not_called()

    def test_where_after_raw_where_joins_with_and(self):
        qb = _builder().query("SELECT * FROM users WHERE id >= :id", {"id": 1})
        qb.where({"age": "18"})
        assert qb.text == "SELECT * FROM users WHERE id >= :id AND age = :age "
        assert qb.parameters == {"id": 1, "age": "18"}

    def test_where_after_raw_select(self):
        qb = _builder().query("SELECT * FROM users").where({"age": "18"})
        assert qb.text == "SELECT * FROM users WHERE age = :age "

    def test_lowercase_where_detected(self):
        qb = _builder().query("select * from t where a = :a", {"a": 1}).where({"b": "2"})
        assert qb.text == "select * from t where a = :a AND b = :b "

    def test_params_optional(self):
        assert _builder().query("SELECT 1").parameters == {}


class TestFetch:
    def test_get_first(self):
        executor = _executor()
        cursor = executor.execute.return_value
        cursor.fetch_one.return_value = {"id": 2, "name": "Bob"}

        row = _builder(executor).select("users").where({"id": "2"}).get_first()

        assert row == {"id": 2, "name": "Bob"}
        executor.prepare.assert_called_once_with("SELECT * FROM users WHERE id = :id ")
        executor.execute.assert_called_once_with(executor.prepare.return_value, {"id": "2"})
        cursor.fetch_one.assert_called_once_with(FetchMode.ASSOC)

    def test_get_first_none(self):
        executor = _executor()
        executor.execute.return_value.fetch_one.return_value = None
        assert _builder(executor).select("users").get_first() is None

    def test_get_all(self):
        executor = _executor()
        cursor = executor.execute.return_value
        cursor.fetch_all.return_value = [(1,), (2,)]

        rows = _builder(executor).select("users", ["id"]).get_all(FetchMode.NUM)

        assert rows == [(1,), (2,)]
        cursor.fetch_all.assert_called_once_with(FetchMode.NUM)

    def test_builder_default_fetch_mode(self):
        executor = _executor()
        qb = QueryBuilder(executor, fetch_mode=FetchMode.NUM)
        qb.select("t").get_all()
        executor.execute.return_value.fetch_all.assert_called_once_with(FetchMode.NUM)

    def test_driver_error_propagates(self):
        executor = _executor()
        executor.execute.side_effect = sqlite3.OperationalError("no such table: nope")
        with pytest.raises(sqlite3.OperationalError):
            _builder(executor).select("nope").get_all()

    def test_execute_immediately(self):
        executor = _executor()
        cursor = _builder(executor).execute("DELETE FROM t WHERE id = :id", {"id": 3})
        assert cursor is executor.execute.return_value
        executor.prepare.assert_called_once_with("DELETE FROM t WHERE id = :id")


class TestLifecycle:
    def test_terminal_on_empty_builder(self):
        with pytest.raises(BuilderStateError):
            _builder().get_all()

    def test_second_terminal_call_rejected(self):
        executor = _executor()
        qb = _builder(executor).select("users")
        qb.get_all()
        assert qb.state is BuilderState.EXECUTED
        with pytest.raises(BuilderStateError):
            qb.get_first()
        with pytest.raises(BuilderStateError):
            qb.where({"id": "1"})
        with pytest.raises(BuilderStateError):
            qb.order_by("id")
        with pytest.raises(BuilderStateError):
            qb.insert("users", {"name": "x"})
        assert executor.execute.call_count == 1

    def test_failed_execution_still_consumes(self):
        executor = _executor()
        executor.execute.side_effect = sqlite3.OperationalError("boom")
        qb = _builder(executor).select("t")
        with pytest.raises(sqlite3.OperationalError):
            qb.get_all()
        with pytest.raises(BuilderStateError):
            qb.get_all()

    def test_select_restarts_after_execution(self):
        executor = _executor()
        qb = _builder(executor).select("users")
        qb.get_all()
        qb.select("posts").get_all()
        assert executor.execute.call_count == 2

    def test_identical_chains_are_identical(self):
        def compose():
            return (
                _builder()
                .select("users", ["id", "name"])
                .where({"id": "1", "age": ">= 18"})
                .order_by("name", "DESC")
            )

        a, b = compose(), compose()
        assert a.text == b.text
        assert a.parameters == b.parameters

    def test_parameters_is_a_copy(self):
        qb = _builder().select("t").where({"a": "1"})
        qb.parameters["a"] = "changed"
        assert qb.parameters == {"a": "1"}


class TestInsert:
    def test_statement(self):
        executor = _executor()
        executor.execute.return_value.row_count = 1
        qb = _builder(executor)

        assert qb.insert("users", {"name": "Bob", "age": 30}) is True
        executor.prepare.assert_called_once_with(
            "INSERT INTO users (name, age) VALUES (:name, :age)"
        )
        executor.execute.assert_called_once_with(
            executor.prepare.return_value, {"name": "Bob", "age": 30}
        )
        assert qb.state is BuilderState.EXECUTED

    def test_zero_rows_is_false(self):
        executor = _executor()
        executor.execute.return_value.row_count = 0
        assert _builder(executor).insert("users", {"name": "Bob"}) is False

    def test_zero_rows_with_error_detail(self):
        executor = _executor()
        cursor = executor.execute.return_value
        cursor.row_count = 0
        cursor.error_detail.return_value = ErrorDetail()
        result = _builder(executor).insert("users", {"name": "Bob"}, return_error_detail=True)
        assert result == ErrorDetail()
        assert not result

    def test_success_with_error_detail_flag(self):
        executor = _executor()
        executor.execute.return_value.row_count = 1
        assert _builder(executor).insert("users", {"name": "Bob"}, True) is True

    def test_driver_error_raises_by_default(self):
        executor = _executor()
        executor.execute.side_effect = sqlite3.IntegrityError("UNIQUE constraint failed: users.name")
        with pytest.raises(sqlite3.IntegrityError):
            _builder(executor).insert("users", {"name": "Bob"})

    def test_driver_error_returned_as_detail(self):
        executor = _executor()
        executor.execute.side_effect = sqlite3.IntegrityError("UNIQUE constraint failed: users.name")
        result = _builder(executor).insert("users", {"name": "Bob"}, return_error_detail=True)
        assert isinstance(result, ErrorDetail)
        assert result.message == "UNIQUE constraint failed: users.name"
        assert not result.ok

    def test_non_driver_error_still_raises(self):
        executor = _executor()
        executor.execute.side_effect = KeyError("name")
        with pytest.raises(KeyError):
            _builder(executor).insert("users", {"name": "Bob"}, return_error_detail=True)

    def test_empty_params_rejected(self):
        with pytest.raises(ValueError):
            _builder().insert("users", {})
