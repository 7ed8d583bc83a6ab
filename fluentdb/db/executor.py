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

"""Prepare-and-execute wrapper around a DB-API connection.

Statements are always written with ``:name`` placeholders.  The executor
translates them into the driver's paramstyle before execution:

* SQLite (``named``): passed through unchanged.
* psycopg2 (``pyformat``): ``:name`` becomes ``%(name)s`` and literal
  ``%`` is doubled.  PostgreSQL ``::type`` casts are left alone.

Usage::

    executor = Executor(connect_sqlite(":memory:"))
    cursor = executor.run("SELECT * FROM users WHERE id = :id", {"id": 2})
    row = cursor.fetch_one()
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fluentdb.db.data_types import NO_ERROR, ErrorDetail, FetchMode
from fluentdb.db.operations import execute, is_sqlite

logger = logging.getLogger(__name__)

_NAMED_PLACEHOLDER = re.compile(r"(?<![:\w]):([A-Za-z_]\w*)")


def to_pyformat(sql: str) -> str:
    """Rewrite ``:name`` placeholders as ``%(name)s``."""
    return _NAMED_PLACEHOLDER.sub(r"%(\1)s", sql.replace("%", "%%"))


@dataclass(frozen=True)
class PreparedStatement:
    """A statement ready to be sent to the driver.

    Attributes:
        sql: The statement as written, with ``:name`` placeholders.
        driver_sql: The statement in the driver's paramstyle.
    """

    sql: str
    driver_sql: str


class ResultCursor:
    """Rows, row count and error detail for one executed statement."""

    def __init__(self, cursor: Any, default_mode: FetchMode = FetchMode.ASSOC) -> None:
        self._cursor = cursor
        self.default_mode = default_mode

    @property
    def columns(self) -> list[str]:
        return [col[0] for col in self._cursor.description or ()]

    @property
    def row_count(self) -> int:
        """Rows affected by the statement (``-1`` when the driver cannot tell)."""
        return self._cursor.rowcount

    def error_detail(self) -> ErrorDetail:
        """The statement ran, so there is no error to report.

        Always :data:`~fluentdb.db.data_types.NO_ERROR`.  Failed statements
        raise instead; turn the driver exception into an ``ErrorDetail``
        with :func:`~fluentdb.db.data_types.error_detail_from`.
        """
        return NO_ERROR

    def _shape(self, row: Any, mode: FetchMode | None) -> Any:
        if row is None:
            return None
        mode = mode or self.default_mode
        # psycopg2's RealDictRow is already a mapping
        if isinstance(row, Mapping):
            return dict(row) if mode is FetchMode.ASSOC else tuple(row.values())
        values = tuple(row)
        if mode is FetchMode.NUM:
            return values
        return dict(zip(self.columns, values))

    def fetch_one(self, mode: FetchMode | None = None) -> Any:
        """Return the next row, or ``None`` when the result is exhausted."""
        return self._shape(self._cursor.fetchone(), mode)

    def fetch_all(self, mode: FetchMode | None = None) -> list[Any]:
        """Return all remaining rows."""
        return [self._shape(row, mode) for row in self._cursor.fetchall()]


class Executor:
    """Runs ``:name``-style statements on a DB-API connection.

    Args:
        conn: A DB-API connection (sqlite3 or psycopg2).
        autocommit: Commit after every statement that returns no rows.
        fetch_mode: Default row shape for the returned cursors.
    """

    def __init__(
        self,
        conn: Any,
        *,
        autocommit: bool = True,
        fetch_mode: FetchMode = FetchMode.ASSOC,
    ) -> None:
        self.conn = conn
        self.autocommit = autocommit
        self.fetch_mode = fetch_mode
        self.paramstyle = "named" if is_sqlite(conn) else "pyformat"

    @property
    def error_types(self) -> type[BaseException]:
        """The driver's DB-API ``Error`` base class."""
        return getattr(self.conn, "Error", Exception)

    def prepare(self, sql: str) -> PreparedStatement:
        if self.paramstyle == "pyformat":
            return PreparedStatement(sql, to_pyformat(sql))
        return PreparedStatement(sql, sql)

    def execute(
        self,
        prepared: PreparedStatement,
        params: Mapping[str, Any] | None = None,
    ) -> ResultCursor:
        """Execute *prepared* with *params* bound.

        Driver errors propagate unchanged.
        """
        params = dict(params or {})
        logger.debug("Executing: %s (params: %s)", prepared.sql.strip(), sorted(params))
        cur = execute(self.conn, prepared.driver_sql, params)
        if self.autocommit and cur.description is None:
            self.conn.commit()
        return ResultCursor(cur, self.fetch_mode)

    def run(self, sql: str, params: Mapping[str, Any] | None = None) -> ResultCursor:
        """Prepare and execute in one step."""
        return self.execute(self.prepare(sql), params)
