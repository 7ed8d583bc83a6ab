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

"""Fluent statement builder.

A :class:`QueryBuilder` accumulates SQL text and named parameters through
chained calls, then runs the statement through an
:class:`~fluentdb.db.executor.Executor`::

    rows = (
        QueryBuilder(executor)
        .select("users", ["id", "name"])
        .where({"active": "1", "age": ">= 18"})
        .order_by("name")
        .get_all()
    )

Composes ``SELECT id, name FROM users WHERE active = :active AND age >= :age
ORDER BY name ASC`` with ``{"active": "1", "age": "18"}`` bound.

Table and column names are inserted verbatim and must come from trusted
code; only values are bound as parameters.  Each column used in ``where()``
doubles as its placeholder name, so a column can be constrained only once
per statement (the last bound value wins).

A builder serves one statement.  After a terminal call (``get_first``,
``get_all``, ``insert``, ``execute``) only ``select()`` or ``query()`` may
start a new one; anything else raises :class:`BuilderStateError`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from fluentdb.db.data_types import ErrorDetail, FetchMode, error_detail_from
from fluentdb.db.executor import Executor, ResultCursor
from fluentdb.errors import BuilderStateError
from fluentdb.query.conditions import parse_condition

logger = logging.getLogger(__name__)

_WHERE_KEYWORD = re.compile(r"\bWHERE\b", re.IGNORECASE)


class BuilderState(Enum):
    EMPTY = "empty"
    COMPOSING = "composing"
    EXECUTED = "executed"


class QueryBuilder:
    """Chainable SELECT/INSERT composer bound to one executor.

    Args:
        executor: Anything with ``prepare(sql)`` and
            ``execute(prepared, params)`` returning a
            :class:`~fluentdb.db.executor.ResultCursor`.
        fetch_mode: Default row shape for ``get_first``/``get_all``.
    """

    def __init__(
        self,
        executor: Executor,
        *,
        fetch_mode: FetchMode = FetchMode.ASSOC,
    ) -> None:
        self._executor = executor
        self.fetch_mode = fetch_mode
        self._text = ""
        self._params: dict[str, Any] = {}
        self._has_where = False
        self._state = BuilderState.EMPTY

    @property
    def text(self) -> str:
        return self._text

    @property
    def parameters(self) -> dict[str, Any]:
        return dict(self._params)

    @property
    def state(self) -> BuilderState:
        return self._state

    # --- composition --------------------------------------------------------

    def _start(self, text: str, params: Mapping[str, Any] | None = None) -> None:
        self._text = text
        self._params = dict(params or {})
        self._has_where = False
        self._state = BuilderState.COMPOSING

    def _append(self, fragment: str) -> None:
        # Raw statements from query() may lack the trailing space
        if self._text and not self._text[-1].isspace():
            self._text += " "
        self._text += fragment

    def _require_fresh(self, method: str) -> None:
        if self._state is BuilderState.EXECUTED:
            raise BuilderStateError(
                f"{method}() called after the statement was executed; "
                "call select() or query() to start a new one"
            )

    def _require_composing(self, method: str) -> None:
        if self._state is BuilderState.EMPTY:
            raise BuilderStateError(
                f"{method}() needs a statement; call select() or query() first"
            )
        self._require_fresh(method)

    def select(self, table: str, columns: Sequence[str] = ("*",)) -> QueryBuilder:
        """Start ``SELECT <columns> FROM <table>``, discarding any prior statement."""
        self._start(f"SELECT {', '.join(columns)} FROM {table} ")
        return self

    def where(self, conditions: Mapping[str, Any]) -> QueryBuilder:
        """Add conditions, joined with ``AND``.

        Each value is either a literal (``{"id": "2"}`` gives ``id = :id``)
        or an operator expression with a space after the operator
        (``{"id": ">= 1"}`` gives ``id >= :id`` with ``"1"`` bound).

        May be called repeatedly; later calls continue the same clause.

        Raises:
            MalformedConditionError: A value contains ``<``, ``>`` or ``=``
                but is not a valid ``<operator> <value>`` pair.  The
                builder is left unchanged.
        """
        self._require_composing("where")
        parsed = [(column, parse_condition(raw)) for column, raw in conditions.items()]

        for column, condition in parsed:
            if self._has_where:
                self._append("AND ")
            else:
                self._append("WHERE ")
                self._has_where = True
            self._params[column] = condition.value
            self._append(condition.render(column))
        return self

    def order_by(self, column: str, order: str = "ASC") -> QueryBuilder:
        """Append ``ORDER BY <column> <order>``; *order* is not validated."""
        self._require_composing("order_by")
        self._append(f"ORDER BY {column} {order} ")
        return self

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> QueryBuilder:
        """Stage a raw statement for a later ``get_first``/``get_all``.

        Placeholders in *sql* must match the keys of *params*; the pair is
        trusted as given.  ``where()`` may still be chained and joins with
        ``AND`` if *sql* already has a WHERE clause.
        """
        self._start(sql, params)
        self._has_where = _WHERE_KEYWORD.search(sql) is not None
        return self

    # --- execution ----------------------------------------------------------

    def _run(self, method: str) -> ResultCursor:
        self._require_composing(method)
        self._state = BuilderState.EXECUTED
        prepared = self._executor.prepare(self._text)
        return self._executor.execute(prepared, self._params)

    def get_first(self, fetch_mode: FetchMode | None = None) -> Any:
        """Execute and return the first row, or ``None`` if there is none."""
        return self._run("get_first").fetch_one(fetch_mode or self.fetch_mode)

    def get_all(self, fetch_mode: FetchMode | None = None) -> list[Any]:
        """Execute and return all rows (an empty list if there are none)."""
        return self._run("get_all").fetch_all(fetch_mode or self.fetch_mode)

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> ResultCursor:
        """Run a raw statement immediately and return its cursor."""
        self._require_fresh("execute")
        self._start(sql, params)
        return self._run("execute")

    def insert(
        self,
        table: str,
        params: Mapping[str, Any],
        return_error_detail: bool = False,
    ) -> bool | ErrorDetail:
        """Insert one row and report whether it was written.

        Args:
            table: Target table.
            params: Column name -> value.
            return_error_detail: Instead of raising on a driver error (or
                returning ``False`` when no row was affected), return the
                :class:`~fluentdb.db.data_types.ErrorDetail`.  An
                ``ErrorDetail`` is always falsy, so ``if db.insert(...)``
                still reads as "the row was written".

        Raises:
            ValueError: *params* is empty.
        """
        self._require_fresh("insert")
        if not params:
            raise ValueError("insert() needs at least one column")

        columns = list(params)
        placeholders = ", ".join(f":{col}" for col in columns)
        self._start(f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})", params)

        if not return_error_detail:
            return self._run("insert").row_count > 0

        try:
            cursor = self._run("insert")
        except self._executor.error_types as exc:
            logger.warning("Insert into %s failed: %s", table, exc)
            return error_detail_from(exc)
        if cursor.row_count > 0:
            return True
        return cursor.error_detail()
