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

"""Pure-function query helpers.

All functions take a DB-API connection as their first argument.  SQL is
passed through untouched; placeholder translation is the job of
:class:`fluentdb.db.executor.Executor`, so SQL given here must already use
the driver's paramstyle (``:name`` for SQLite, ``%(name)s`` for PostgreSQL).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

logger = logging.getLogger(__name__)

Params = Union[Mapping[str, Any], Sequence[Any]]


def is_sqlite(conn: Any) -> bool:
    """Return True if the connection is SQLite."""
    return "sqlite3" in type(conn).__module__


def execute(conn: Any, sql: str, params: Params = ()) -> Any:
    """Execute a single statement and return the cursor.

    The cursor gives access to ``rowcount``, ``description`` and the
    ``fetch*`` methods.
    """
    cur = conn.cursor()
    cur.execute(sql, params)
    return cur


def fetch_one(conn: Any, sql: str, params: Params = ()) -> Any:
    """Execute and return the first row, or ``None``."""
    return execute(conn, sql, params).fetchone()


def fetch_all(conn: Any, sql: str, params: Params = ()) -> list[Any]:
    """Execute and return all rows."""
    return execute(conn, sql, params).fetchall()


def table_exists(conn: Any, name: str) -> bool:
    """Check whether a table exists (works on both SQLite and PostgreSQL)."""
    if is_sqlite(conn):
        row = fetch_one(
            conn,
            "SELECT 1 FROM sqlite_master WHERE type='table' AND name=:name",
            {"name": name},
        )
    else:
        row = fetch_one(
            conn,
            "SELECT 1 FROM information_schema.tables WHERE table_name=%(name)s",
            {"name": name},
        )
    return row is not None


def create_tables(conn: Any, schema_sql: str) -> None:
    """Execute a (possibly multi-statement) schema DDL string.

    For SQLite the entire string is executed via ``executescript()``.
    For PostgreSQL the string is sent in one ``execute()`` and committed.
    """
    if is_sqlite(conn):
        conn.executescript(schema_sql)
    else:
        cur = conn.cursor()
        cur.execute(schema_sql)
        conn.commit()
