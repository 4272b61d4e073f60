"""
sabres.where

Conjunction-only predicate trees rendered to SQL fragments.

Responsibilities:
- Build leaf predicates (`=`, `<>`, `NOT LIKE 'prefix%'`).
- Combine them with AND into immutable trees.
- Render a tree, optionally qualifying keys with a table name.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from sabres.errors import UnsupportedValueType
from sabres.values import quote_identifier, quote_string, stringify, to_sql_literal

_LIKE_ESCAPE = "\\"


class Operator(enum.StrEnum):
    equal_to = "="
    not_equal_to = "<>"
    does_not_start_with = "NOT LIKE"


def _column(key: str, qualifier: str | None) -> str:
    if qualifier is None:
        return quote_identifier(key)
    return f"{quote_identifier(qualifier)}.{quote_identifier(key)}"


def _escape_like(prefix: str) -> tuple[str, bool]:
    escaped = (
        prefix.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return escaped, escaped != prefix


@dataclass(frozen=True, slots=True)
class Predicate:
    key: str
    operator: Operator
    value: Any

    def to_sql(self, qualifier: str | None = None) -> str:
        column = _column(self.key, qualifier)
        if self.operator is Operator.does_not_start_with:
            pattern, escaped = _escape_like(stringify(self.value))
            sql = f"{column} NOT LIKE {quote_string(pattern + '%')}"
            if escaped:
                sql += f" ESCAPE {quote_string(_LIKE_ESCAPE)}"
            return sql
        return f"{column} {self.operator} {to_sql_literal(self.value)}"


@dataclass(frozen=True, slots=True)
class Conjunction:
    left: Predicate | Conjunction
    right: Predicate | Conjunction

    def to_sql(self, qualifier: str | None = None) -> str:
        return f"({self.left.to_sql(qualifier)}) AND ({self.right.to_sql(qualifier)})"


def _reject_null(value: Any) -> None:
    # `= NULL` never matches in SQL; null comparisons are not expressible here.
    if value is None:
        raise UnsupportedValueType(value)


@dataclass(frozen=True, slots=True)
class Where:
    """
    Value object around a predicate tree; `Where()` is the empty clause.

        Where.equal_to("title", "Se7en") & Where.not_equal_to("year", 1999)
    """

    root: Predicate | Conjunction | None = None

    @classmethod
    def empty(cls) -> Where:
        return cls()

    @classmethod
    def equal_to(cls, key: str, value: Any) -> Where:
        _reject_null(value)
        return cls(Predicate(key, Operator.equal_to, value))

    @classmethod
    def not_equal_to(cls, key: str, value: Any) -> Where:
        _reject_null(value)
        return cls(Predicate(key, Operator.not_equal_to, value))

    @classmethod
    def does_not_start_with(cls, key: str, prefix: str) -> Where:
        return cls(Predicate(key, Operator.does_not_start_with, prefix))

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def and_(self, other: Where) -> Where:
        if other.root is None:
            return self
        if self.root is None:
            return other
        return Where(Conjunction(self.root, other.root))

    __and__ = and_

    def to_sql(self, qualifier: str | None = None) -> str | None:
        # Empty clause renders as absent so callers can drop the WHERE keyword.
        if self.root is None:
            return None
        return self.root.to_sql(qualifier)


# --- Module Notes -----------------------------------------------------------
# Conjunction only: `SabresQuery` never builds OR shapes.
