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

"""Connection-owning entry point that hands out one builder per query.

Usage::

    from fluentdb import Database, load_config

    with Database.from_config(load_config()) as db:
        user = db.select("users").where({"id": "2"}).get_first()
        db.insert("users", {"name": "Bob"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fluentdb.config import DatabaseConfig
from fluentdb.db.connection import connect
from fluentdb.db.data_types import ErrorDetail, FetchMode
from fluentdb.db.executor import Executor, ResultCursor
from fluentdb.query.builder import QueryBuilder

logger = logging.getLogger(__name__)


class Database:
    """A DB-API connection plus a factory for fresh :class:`QueryBuilder` objects.

    Every builder shares the connection; none shares statement state.

    Args:
        conn: An open DB-API connection.
        fetch_mode: Default row shape for builders created here.
        autocommit: Commit after every statement that returns no rows.
    """

    def __init__(
        self,
        conn: Any,
        *,
        fetch_mode: FetchMode = FetchMode.ASSOC,
        autocommit: bool = True,
    ) -> None:
        self.conn = conn
        self.fetch_mode = fetch_mode
        self.executor = Executor(conn, autocommit=autocommit, fetch_mode=fetch_mode)

    @classmethod
    def from_config(
        cls,
        config: DatabaseConfig,
        backend: str = "postgresql",
        **kwargs: Any,
    ) -> Database:
        """Open a connection for *config* and wrap it."""
        return cls(connect(config, backend), **kwargs)

    def builder(self) -> QueryBuilder:
        return QueryBuilder(self.executor, fetch_mode=self.fetch_mode)

    def select(self, table: str, columns: Sequence[str] = ("*",)) -> QueryBuilder:
        return self.builder().select(table, columns)

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> QueryBuilder:
        return self.builder().query(sql, params)

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> ResultCursor:
        return self.builder().execute(sql, params)

    def insert(
        self,
        table: str,
        params: Mapping[str, Any],
        return_error_detail: bool = False,
    ) -> bool | ErrorDetail:
        return self.builder().insert(table, params, return_error_detail)

    def close(self) -> None:
        self.conn.close()
        logger.debug("Connection closed")

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
