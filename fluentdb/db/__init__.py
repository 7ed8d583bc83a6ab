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

"""Thin database layer: connection factories, an executor and helpers.

Supports SQLite (built-in) and PostgreSQL (optional, via psycopg2).

Usage::

    from fluentdb.db import Executor, connect_sqlite

    executor = Executor(connect_sqlite("~/.myapp/data.db"))
    cursor = executor.run("SELECT * FROM users WHERE id = :id", {"id": 1})
    row = cursor.fetch_one()
"""

from fluentdb.db.connection import connect, connect_postgresql, connect_sqlite
from fluentdb.db.data_types import ErrorDetail, FetchMode
from fluentdb.db.executor import Executor, PreparedStatement, ResultCursor
from fluentdb.db.operations import (
    create_tables,
    execute,
    fetch_all,
    fetch_one,
    table_exists,
)

__all__ = [
    "connect",
    "connect_sqlite",
    "connect_postgresql",
    "ErrorDetail",
    "FetchMode",
    "Executor",
    "PreparedStatement",
    "ResultCursor",
    "execute",
    "fetch_one",
    "fetch_all",
    "table_exists",
    "create_tables",
]
