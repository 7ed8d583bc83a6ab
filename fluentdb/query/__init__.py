"""Fluent statement composition."""

from fluentdb.query.builder import BuilderState, QueryBuilder
from fluentdb.query.conditions import OPERATORS, Compare, Condition, Equals, parse_condition

__all__ = [
    "BuilderState",
    "QueryBuilder",
    "OPERATORS",
    "Compare",
    "Condition",
    "Equals",
    "parse_condition",
]
