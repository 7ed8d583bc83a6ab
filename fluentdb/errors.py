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

"""Exceptions raised by fluentdb.

Driver errors (``sqlite3.Error``, ``psycopg2.Error``) are never wrapped;
they reach the caller as raised by the driver.
"""


class QueryBuilderError(Exception):
    """Base class for errors raised by fluentdb itself."""


class MalformedConditionError(QueryBuilderError, ValueError):
    """A ``where()`` value looks like an operator expression but cannot be parsed."""


class BuilderStateError(QueryBuilderError, RuntimeError):
    """A builder method was called in a state that does not allow it."""


class ConfigError(QueryBuilderError):
    """Connection configuration is incomplete."""
