"""
sabres.commands

SQL statement builders.

Responsibilities:
- Render COUNT, SELECT (with LEFT JOINs and ORDER BY) and CREATE INDEX statements.
- Render the CREATE TABLE / INSERT / UPDATE / DELETE statements used when saving objects.
- Disambiguate joined columns so they never collide with base-table columns.
- Validate join/order keys against the schema registry when one is bound.

Commands never touch a connection; `to_sql()` is a pure function of their state.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sabres.errors import InvalidIncludeType, UnrecognizedKey
from sabres.values import quote_identifier, to_sql_literal
from sabres.where import Where

if TYPE_CHECKING:
    from sabres.schema import SchemaRegistry

OBJECT_ID_KEY = "id"
JOIN_ALIAS_SUFFIX = "__ref"


class Direction(enum.StrEnum):
    ascending = "ASC"
    descending = "DESC"


@dataclass(frozen=True, slots=True)
class OrderBy:
    key: str
    direction: Direction = Direction.ascending


@dataclass(frozen=True, slots=True)
class Join:
    foreign_table: str
    alias_key: str
    foreign_columns: tuple[str, ...]

    @property
    def alias(self) -> str:
        return self.alias_key + JOIN_ALIAS_SUFFIX


def joined_column(alias_key: str, column: str) -> str:
    """Result-row key under which a joined column is projected."""
    return f"{alias_key}.{column}"


def _qualified(table: str, column: str) -> str:
    return f"{quote_identifier(table)}.{quote_identifier(column)}"


class CountCommand:
    def __init__(self, table: str) -> None:
        self.table = table
        self._where = Where.empty()

    def where(self, where: Where | None) -> CountCommand:
        self._where = where if where is not None else Where.empty()
        return self

    def to_sql(self) -> str:
        sql = f"SELECT COUNT(*) FROM {quote_identifier(self.table)}"
        clause = self._where.to_sql(self.table)
        if clause is not None:
            sql += f" WHERE {clause}"
        return sql

    __str__ = to_sql


class SelectCommand:
    def __init__(
        self,
        table: str,
        columns: list[str] | tuple[str, ...],
        *,
        schema: SchemaRegistry | None = None,
    ) -> None:
        self.table = table
        self.columns = tuple(columns)
        self._schema = schema
        self._joins: list[Join] = []
        self._order: list[OrderBy] = []
        self._where = Where.empty()
        self._limit: int | None = None

    def join(
        self, foreign_table: str, alias_key: str, foreign_columns: list[str]
    ) -> SelectCommand:
        self._check_key(alias_key)
        self._joins.append(Join(foreign_table, alias_key, tuple(foreign_columns)))
        return self

    def join_pointer(self, key: str) -> SelectCommand:
        """Join the table referenced by pointer `key`, projecting all of its columns."""
        if self._schema is None:
            raise RuntimeError("join_pointer requires a bound schema registry")
        descriptor = self._schema.get_descriptor(self.table, key)
        if descriptor is None:
            raise UnrecognizedKey(key, self.table)
        if not descriptor.is_pointer:
            raise InvalidIncludeType(
                f"key {key} in Object {self.table} is of type {descriptor.type}, not pointer"
            )
        ref = descriptor.referenced_type
        return self.join(ref, key, self._schema.get_keys(ref))

    def order_by(
        self, order: OrderBy | str, direction: Direction = Direction.ascending
    ) -> SelectCommand:
        if isinstance(order, str):
            order = OrderBy(order, direction)
        self._check_key(order.key)
        self._order.append(order)
        return self

    def where(self, where: Where | None) -> SelectCommand:
        self._where = where if where is not None else Where.empty()
        return self

    def limit(self, count: int) -> SelectCommand:
        self._limit = count
        return self

    @property
    def joins(self) -> tuple[Join, ...]:
        return tuple(self._joins)

    def _check_key(self, key: str) -> None:
        if self._schema is None or key == OBJECT_ID_KEY:
            return
        if self._schema.get_descriptor(self.table, key) is None:
            raise UnrecognizedKey(key, self.table)

    def _projection(self) -> list[str]:
        # Qualified names never degrade to string literals when a column is missing.
        cols = [
            f"{_qualified(self.table, c)} AS {quote_identifier(c)}" for c in self.columns
        ]
        for join in self._joins:
            for c in join.foreign_columns:
                alias = quote_identifier(joined_column(join.alias_key, c))
                cols.append(f"{_qualified(join.alias, c)} AS {alias}")
        return cols

    def to_sql(self) -> str:
        table = quote_identifier(self.table)
        parts = [f"SELECT {', '.join(self._projection())} FROM {table}"]
        for join in self._joins:
            foreign = quote_identifier(join.foreign_table)
            parts.append(
                f"LEFT JOIN {foreign} AS {quote_identifier(join.alias)}"
                f" ON {_qualified(self.table, join.alias_key)}"
                f" = {_qualified(join.alias, OBJECT_ID_KEY)}"
            )

        clause = self._where.to_sql(self.table)
        if clause is not None:
            parts.append(f"WHERE {clause}")
        if self._order:
            terms = ", ".join(
                f"{_qualified(self.table, o.key)} {o.direction}"
                for o in self._order
            )
            parts.append(f"ORDER BY {terms}")
        if self._limit is not None:
            parts.append(f"LIMIT {int(self._limit)}")
        return " ".join(parts)

    __str__ = to_sql


class CreateIndexCommand:
    def __init__(self, table: str, keys: list[str] | tuple[str, ...]) -> None:
        if not keys:
            raise ValueError("an index needs at least one key")
        self.table = table
        # First occurrence wins so repeated filters on one key map to the same index.
        self.keys = tuple(dict.fromkeys(keys))
        self._if_not_exists = False

    def if_not_exists(self, enabled: bool = True) -> CreateIndexCommand:
        self._if_not_exists = enabled
        return self

    @property
    def name(self) -> str:
        return "_".join(("ix", self.table, *self.keys))

    def to_sql(self) -> str:
        head = "CREATE INDEX IF NOT EXISTS" if self._if_not_exists else "CREATE INDEX"
        keys = ", ".join(quote_identifier(k) for k in self.keys)
        return f"{head} {quote_identifier(self.name)} ON {quote_identifier(self.table)} ({keys})"

    __str__ = to_sql


class CreateTableCommand:
    def __init__(self, table: str, columns: list[tuple[str, str]]) -> None:
        self.table = table
        self.columns = tuple(columns)
        self._if_not_exists = False

    def if_not_exists(self, enabled: bool = True) -> CreateTableCommand:
        self._if_not_exists = enabled
        return self

    def to_sql(self) -> str:
        head = "CREATE TABLE IF NOT EXISTS" if self._if_not_exists else "CREATE TABLE"
        cols = [f"{quote_identifier(OBJECT_ID_KEY)} INTEGER PRIMARY KEY AUTOINCREMENT"]
        cols.extend(f"{quote_identifier(name)} {sql_type}" for name, sql_type in self.columns)
        return f"{head} {quote_identifier(self.table)} ({', '.join(cols)})"

    __str__ = to_sql


class InsertCommand:
    def __init__(self, table: str, values: dict[str, Any]) -> None:
        self.table = table
        self.values = dict(values)

    def to_sql(self) -> str:
        table = quote_identifier(self.table)
        if not self.values:
            return f"INSERT INTO {table} DEFAULT VALUES"
        keys = ", ".join(quote_identifier(k) for k in self.values)
        literals = ", ".join(to_sql_literal(v) for v in self.values.values())
        return f"INSERT INTO {table} ({keys}) VALUES ({literals})"

    __str__ = to_sql


class UpdateCommand:
    def __init__(self, table: str, values: dict[str, Any]) -> None:
        if not values:
            raise ValueError("nothing to update")
        self.table = table
        self.values = dict(values)
        self._where = Where.empty()

    def where(self, where: Where | None) -> UpdateCommand:
        self._where = where if where is not None else Where.empty()
        return self

    def to_sql(self) -> str:
        assignments = ", ".join(
            f"{quote_identifier(k)} = {to_sql_literal(v)}" for k, v in self.values.items()
        )
        sql = f"UPDATE {quote_identifier(self.table)} SET {assignments}"
        clause = self._where.to_sql(self.table)
        if clause is not None:
            sql += f" WHERE {clause}"
        return sql

    __str__ = to_sql


class DeleteCommand:
    def __init__(self, table: str) -> None:
        self.table = table
        self._where = Where.empty()

    def where(self, where: Where | None) -> DeleteCommand:
        self._where = where if where is not None else Where.empty()
        return self

    def to_sql(self) -> str:
        sql = f"DELETE FROM {quote_identifier(self.table)}"
        clause = self._where.to_sql(self.table)
        if clause is not None:
            sql += f" WHERE {clause}"
        return sql

    __str__ = to_sql


# --- Module Notes -----------------------------------------------------------
# Joined columns come back under "<key>.<column>" row keys; see `joined_column`.
