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

"""WHERE-clause conditions.

A value passed to :meth:`QueryBuilder.where` is either a plain literal
(compared with ``=``) or an ``"<operator> <value>"`` expression::

    parse_condition("2")      -> Equals("2")
    parse_condition(">= 18")  -> Compare(">=", "18")

The decision is made by a single character-class test: any value containing
``<``, ``>`` or ``=`` is treated as an operator expression.  Non-string values
(numbers, ``None``) are always literals.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

from fluentdb.errors import MalformedConditionError

OPERATORS = ("=", "!=", "<>", "<", ">", "<=", ">=")

_OPERATOR_CHARS = re.compile(r"[<>=]")


@dataclass(frozen=True)
class Equals:
    """``column = :column`` with *value* bound."""

    value: Any

    @property
    def operator(self) -> str:
        return "="

    def render(self, column: str) -> str:
        return f"{column} = :{column} "


@dataclass(frozen=True)
class Compare:
    """``column <operator> :column`` with *value* bound."""

    operator: str
    value: str

    def render(self, column: str) -> str:
        return f"{column} {self.operator} :{column} "


Condition = Union[Equals, Compare]


def is_operator_expression(raw: Any) -> bool:
    """Return True if *raw* would be parsed as ``<operator> <value>``."""
    return isinstance(raw, str) and _OPERATOR_CHARS.search(raw) is not None


def _split_operator(raw: str) -> tuple[str, str]:
    """Split ``"<op> <value>"`` on the first whitespace run.

    Everything after the operator is the value, spaces included.
    """
    parts = raw.split(None, 1)
    if len(parts) < 2:
        raise MalformedConditionError(
            f"Expected '<operator> <value>' separated by whitespace, got {raw!r}"
        )
    operator, value = parts[0], parts[1].strip()
    if operator not in OPERATORS:
        raise MalformedConditionError(
            f"Unsupported operator {operator!r} in {raw!r}. Allowed: {', '.join(OPERATORS)}"
        )
    return operator, value


def parse_condition(raw: Any) -> Condition:
    """Classify a raw ``where()`` value as :class:`Equals` or :class:`Compare`.

    Raises :class:`MalformedConditionError` for operator expressions that
    lack a value or use an operator outside :data:`OPERATORS`.
    """
    if not is_operator_expression(raw):
        return Equals(raw)
    operator, value = _split_operator(raw)
    return Compare(operator, value)
