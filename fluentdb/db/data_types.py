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

"""Data types shared by the executor and the query builder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FetchMode(Enum):
    """Shape of fetched rows.

    ``ASSOC`` returns each row as a ``dict`` keyed by column name,
    ``NUM`` as a positional ``tuple``.
    """

    ASSOC = "assoc"
    NUM = "num"


@dataclass(frozen=True)
class ErrorDetail:
    """Driver error information for a statement.

    Attributes:
        sqlstate: Five-character SQLSTATE code (``"00000"`` on success).
            SQLite does not report SQLSTATE, so this is ``None`` for
            SQLite errors.
        code: Driver-specific error code or name.
        message: Human-readable error message.
    """

    sqlstate: str | None = "00000"
    code: Any = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.sqlstate == "00000" and self.message is None

    def __bool__(self) -> bool:
        # Stands in for ``False`` in insert(..., return_error_detail=True)
        return False


NO_ERROR = ErrorDetail()


def error_detail_from(exc: BaseException) -> ErrorDetail:
    """Build an :class:`ErrorDetail` from a driver exception."""
    # psycopg2 exposes pgcode/pgerror, sqlite3 (3.11+) sqlite_errorcode/name.
    sqlstate = getattr(exc, "pgcode", None)
    code = getattr(exc, "sqlite_errorname", None) or getattr(exc, "sqlite_errorcode", None)
    message = getattr(exc, "pgerror", None) or str(exc)
    return ErrorDetail(sqlstate=sqlstate, code=code, message=message.strip())
