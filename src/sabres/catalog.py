"""
sabres.catalog

Read-only views over SQLite's `sqlite_master` catalog.

Responsibilities:
- Check table existence.
- List user tables with row counts and user indices as text reports.
- List the descriptors mirrored into the schema-storage table.
- Hide bookkeeping tables (SQLite's, Android's, schema storage, list storage).
"""

from __future__ import annotations

from sqlalchemy import select

from sabres.commands import CountCommand, SelectCommand
from sabres.db.connection import Database
from sabres.db.models import SCHEMA_TABLE, SchemaEntry
from sabres.reports import Report
from sabres.where import Where

CATALOG_TABLE = "sqlite_master"
NAME_KEY = "name"
TYPE_KEY = "type"
TABLE_NAME_KEY = "tbl_name"

# Created by SQLite for AUTOINCREMENT columns / by Android's SQLiteOpenHelper.
BOOKKEEPING_TABLES = ("sqlite_sequence", "android_metadata")
LIST_TABLE_PREFIX = "_List_"

TABLE_HEADERS = ("table", "count")
INDEX_HEADERS = ("table", "index")
SCHEMA_HEADERS = ("object", "key", "type", "pointer")

_SELECT_KEYS = (NAME_KEY, TYPE_KEY, TABLE_NAME_KEY)


def table_exists(db: Database, table: str) -> bool:
    command = CountCommand(CATALOG_TABLE).where(
        Where.equal_to(TYPE_KEY, "table") & Where.equal_to(NAME_KEY, table)
    )
    with db.session():
        return db.count(command.to_sql()) != 0


def _user_tables() -> Where:
    where = Where.equal_to(TYPE_KEY, "table")
    for table in (*BOOKKEEPING_TABLES, SCHEMA_TABLE):
        where &= Where.not_equal_to(NAME_KEY, table)
    return where & Where.does_not_start_with(NAME_KEY, LIST_TABLE_PREFIX)


def _user_indices() -> Where:
    return (
        Where.equal_to(TYPE_KEY, "index")
        & Where.not_equal_to(TABLE_NAME_KEY, SCHEMA_TABLE)
        & Where.does_not_start_with(TABLE_NAME_KEY, LIST_TABLE_PREFIX)
    )


def list_tables(db: Database) -> Report:
    command = SelectCommand(CATALOG_TABLE, _SELECT_KEYS).where(_user_tables())
    rows = []
    with db.session():
        for row in db.select(command.to_sql()):
            table = row[NAME_KEY]
            rows.append((table, str(db.count(CountCommand(table).to_sql()))))
    return Report(headers=TABLE_HEADERS, rows=tuple(rows))


def list_indices(db: Database) -> Report:
    command = SelectCommand(CATALOG_TABLE, _SELECT_KEYS).where(_user_indices())
    with db.session():
        rows = tuple((row[TABLE_NAME_KEY], row[NAME_KEY]) for row in db.select(command.to_sql()))
    return Report(headers=INDEX_HEADERS, rows=rows)


def list_schema(db: Database) -> Report:
    """Descriptors stored in the database file, in registration order."""
    entries = SchemaEntry.__table__
    with db.session():
        rows = db.select(select(entries).order_by(entries.c.id))
    return Report(
        headers=SCHEMA_HEADERS,
        rows=tuple((r["object"], r["key"], r["type"], r["pointer"] or "") for r in rows),
    )


# --- Module Notes -----------------------------------------------------------
# Row order follows `sqlite_master`, which is stable for a given database file.
