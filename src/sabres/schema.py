"""
sabres.schema

Process-wide registry of object types and their field descriptors.

Responsibilities:
- Register descriptors once per object type; reject conflicting re-registration.
- Answer key lookups and column lists for projections and joins.
- Mirror descriptors into the schema-storage table of a database.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from sabres.commands import OBJECT_ID_KEY
from sabres.db.connection import Database
from sabres.db.models import SCHEMA_TABLE, SchemaEntry
from sabres.errors import ObjectNotFound, SchemaConflict
from sabres.observability.logging import get_logger

log = get_logger(__name__)


class DescriptorType(enum.StrEnum):
    number = "Number"
    string = "String"
    boolean = "Boolean"
    date = "Date"
    pointer = "Pointer"

    @property
    def sql_type(self) -> str:
        return _SQL_TYPES[self]


_SQL_TYPES = {
    DescriptorType.number: "NUMERIC",
    DescriptorType.string: "TEXT",
    DescriptorType.boolean: "INTEGER",
    DescriptorType.date: "INTEGER",
    DescriptorType.pointer: "INTEGER",
}


@dataclass(frozen=True, slots=True)
class Descriptor:
    key: str
    type: DescriptorType
    referenced_type: str | None = None

    def __post_init__(self) -> None:
        if not self.key or self.key == OBJECT_ID_KEY:
            raise ValueError(f"invalid descriptor key {self.key!r}")
        if self.type is DescriptorType.pointer and not self.referenced_type:
            raise ValueError(f"pointer key {self.key} needs a referenced type")
        if self.type is not DescriptorType.pointer and self.referenced_type is not None:
            raise ValueError(f"key {self.key} of type {self.type} can't reference a type")

    @property
    def is_pointer(self) -> bool:
        return self.type is DescriptorType.pointer


class SchemaRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._types: dict[str, dict[str, Descriptor]] = {}

    def register(self, name: str, descriptors: Iterable[Descriptor]) -> bool:
        """
        Register `name` once. Returns True on first registration, False when the
        same descriptors were already registered. Any difference raises
        `SchemaConflict`; registered descriptors never change.
        """

        incoming: dict[str, Descriptor] = {}
        for d in descriptors:
            if d.key in incoming:
                raise SchemaConflict(f"duplicate key {d.key} in Object {name}")
            incoming[d.key] = d

        with self._lock:
            existing = self._types.get(name)
            if existing is not None:
                if list(existing.values()) != list(incoming.values()):
                    raise SchemaConflict(f"Object {name} is already registered differently")
                return False
            self._types[name] = incoming

        log.info("schema_registered", object=name, keys=list(incoming))
        return True

    def is_registered(self, name: str) -> bool:
        return name in self._types

    def get_descriptor(self, name: str, key: str) -> Descriptor | None:
        return self._types.get(name, {}).get(key)

    def get_descriptors(self, name: str) -> tuple[Descriptor, ...]:
        return tuple(self._require(name).values())

    def get_keys(self, name: str) -> list[str]:
        return [OBJECT_ID_KEY, *self._require(name)]

    def names(self) -> list[str]:
        return list(self._types)

    @staticmethod
    def get_table_name() -> str:
        return SCHEMA_TABLE

    def _require(self, name: str) -> dict[str, Descriptor]:
        try:
            return self._types[name]
        except KeyError:
            raise ObjectNotFound(f"Object {name} is not registered") from None

    def persist(self, db: Database, name: str) -> None:
        rows = [
            {
                "object": name,
                "key": d.key,
                "type": str(d.type),
                "pointer": d.referenced_type,
            }
            for d in self.get_descriptors(name)
        ]
        if not rows:
            return
        stmt = sqlite_insert(SchemaEntry.__table__).values(rows).on_conflict_do_nothing()
        with db.session():
            db.execute(stmt)


schema = SchemaRegistry()


# --- Module Notes -----------------------------------------------------------
# `schema` is shared by every query in the process. Tests that need isolation
# build their own `SchemaRegistry` and pass it in.
