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

"""fluentdb — fluent SQL query builder over DB-API connections.

Usage::

    from fluentdb import Database
    from fluentdb.db import connect_sqlite

    db = Database(connect_sqlite("blog.db"))
    posts = db.select("posts", ["id", "title"]).where({"id": ">= 10"}).order_by("id", "DESC").get_all()
"""

from fluentdb.config import DatabaseConfig, load_config
from fluentdb.database import Database
from fluentdb.db.data_types import ErrorDetail, FetchMode
from fluentdb.errors import (
    BuilderStateError,
    ConfigError,
    MalformedConditionError,
    QueryBuilderError,
)
from fluentdb.query.builder import QueryBuilder

__version__ = "0.1.0"

__all__ = [
    "Database",
    "DatabaseConfig",
    "load_config",
    "QueryBuilder",
    "FetchMode",
    "ErrorDetail",
    "QueryBuilderError",
    "MalformedConditionError",
    "BuilderStateError",
    "ConfigError",
]
