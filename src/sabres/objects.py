"""
sabres.objects

Declared object types and the hydration they provide to queries.

Responsibilities:
- Keep an explicit factory mapping object names to constructors.
- Declare fields through schema descriptors on `SabresObject` subclasses.
- Save, fetch and delete single objects; hydrate objects (and included
  pointer targets) from result rows.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from sabres.catalog import table_exists
from sabres.commands import (
    OBJECT_ID_KEY,
    CreateTableCommand,
    DeleteCommand,
    InsertCommand,
    SelectCommand,
    UpdateCommand,
    joined_column,
)
from sabres.db.connection import Database
from sabres.errors import ObjectNotFound, UnrecognizedKey
from sabres.schema import Descriptor, DescriptorType, SchemaRegistry, schema
from sabres.values import from_epoch_millis
from sabres.where import Where

_factories: dict[str, Callable[[], SabresObject]] = {}
_factories_lock = threading.Lock()


def register_type(name: str, ctor: Callable[[], SabresObject]) -> None:
    with _factories_lock:
        _factories[name] = ctor


def create(name: str) -> SabresObject:
    ctor = _factories.get(name)
    if ctor is None:
        raise ObjectNotFound(f"no factory registered for Object {name}")
    return ctor()


def create_without_data(name: str, object_id: int) -> SabresObject:
    """An empty shell carrying only its id; `fetch` fills it in."""
    obj = create(name)
    obj._object_id = object_id
    return obj


class SabresObject:
    """
    Base class for persisted objects. Subclasses declare their fields:

        class Movie(SabresObject):
            descriptors = (
                Descriptor("title", DescriptorType.string),
                Descriptor("director", DescriptorType.pointer, "Director"),
            )

    The object name (and table name) defaults to the class name.
    """

    object_name: ClassVar[str] = ""
    descriptors: ClassVar[tuple[Descriptor, ...]] = ()
    registry: ClassVar[SchemaRegistry] = schema

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "object_name" not in cls.__dict__:
            cls.object_name = cls.__name__
        cls.registry.register(cls.object_name, cls.descriptors)
        register_type(cls.object_name, cls)

    def __init__(self, **values: Any) -> None:
        self._object_id: int | None = None
        self._values: dict[str, Any] = {}
        self._data_available = False
        for key, value in values.items():
            self.put(key, value)

    def __repr__(self) -> str:
        return f"{self.object_name}(id={self._object_id}, {self._values!r})"

    @property
    def object_id(self) -> int | None:
        return self._object_id

    @property
    def is_data_available(self) -> bool:
        return self._data_available or self._object_id is None

    def _descriptor(self, key: str) -> Descriptor:
        descriptor = self.registry.get_descriptor(self.object_name, key)
        if descriptor is None:
            raise UnrecognizedKey(key, self.object_name)
        return descriptor

    def put(self, key: str, value: Any) -> None:
        descriptor = self._descriptor(key)
        if descriptor.is_pointer and value is not None and not isinstance(value, SabresObject):
            raise TypeError(f"key {key} expects a SabresObject, got {type(value).__name__}")
        self._values[key] = value

    def get(self, key: str) -> Any:
        self._descriptor(key)
        return self._values.get(key)

    def to_dict(self) -> dict[str, Any]:
        return {OBJECT_ID_KEY: self._object_id, **self._values}

    # -- persistence ---------------------------------------------------------

    def save(self, db: Database) -> None:
        with db.session():
            for d in self.descriptors:
                target = self._values.get(d.key)
                if d.is_pointer and target is not None and target.object_id is None:
                    target.save(db)

            self._create_table(db)
            values = dict(self._values)
            if self._object_id is None:
                self._object_id = db.insert(InsertCommand(self.object_name, values).to_sql())
            elif values:
                command = UpdateCommand(self.object_name, values)
                command.where(Where.equal_to(OBJECT_ID_KEY, self._object_id))
                if db.execute(command.to_sql()) == 0:
                    raise ObjectNotFound(
                        f"Object {self.object_name} with id {self._object_id} not found"
                    )
        self._data_available = True

    def _create_table(self, db: Database) -> None:
        columns = [(d.key, d.type.sql_type) for d in self.descriptors]
        db.execute(CreateTableCommand(self.object_name, columns).if_not_exists().to_sql())
        self.registry.persist(db, self.object_name)

    def fetch(self, db: Database) -> None:
        if self._object_id is None:
            raise ObjectNotFound(f"Object {self.object_name} has no id to fetch")
        with db.session():
            if not table_exists(db, self.object_name):
                raise ObjectNotFound(f"table {self.object_name} does not exist")
            command = SelectCommand(
                self.object_name, self.registry.get_keys(self.object_name)
            ).where(Where.equal_to(OBJECT_ID_KEY, self._object_id))
            rows = db.select(command.limit(1).to_sql())
            if not rows:
                raise ObjectNotFound(
                    f"Object {self.object_name} with id {self._object_id} not found"
                )
            self.populate(db, rows[0])

    def delete(self, db: Database) -> None:
        if self._object_id is None:
            return
        command = DeleteCommand(self.object_name).where(
            Where.equal_to(OBJECT_ID_KEY, self._object_id)
        )
        with db.session():
            if not table_exists(db, self.object_name) or db.execute(command.to_sql()) == 0:
                raise ObjectNotFound(
                    f"Object {self.object_name} with id {self._object_id} not found"
                )
        self._object_id = None

    # -- hydration -------------------------------------------------------------

    def populate(self, db: Database, row: Mapping[str, Any]) -> None:
        self._object_id = row[OBJECT_ID_KEY]
        for d in self.descriptors:
            self._values[d.key] = _decode(d, row[d.key])
        self._data_available = True

    def populate_child(self, db: Database, row: Mapping[str, Any], key: str) -> None:
        descriptor = self._descriptor(key)
        if not descriptor.is_pointer:
            return
        ref = descriptor.referenced_type
        if row.get(joined_column(key, OBJECT_ID_KEY)) is None:
            # Dangling or null pointer: LEFT JOIN produced no referenced row.
            self._values[key] = None
            return
        child = create(ref)
        child.populate(
            db, {c: row[joined_column(key, c)] for c in self.registry.get_keys(ref)}
        )
        self._values[key] = child


def _decode(descriptor: Descriptor, raw: Any) -> Any:
    if raw is None:
        return None
    if descriptor.type is DescriptorType.boolean:
        return bool(raw)
    if descriptor.type is DescriptorType.date:
        return from_epoch_millis(int(raw))
    if descriptor.type is DescriptorType.pointer:
        return create_without_data(descriptor.referenced_type, int(raw))
    if descriptor.type is DescriptorType.string:
        return str(raw)
    return raw


__all__ = [
    "Descriptor",
    "DescriptorType",
    "SabresObject",
    "create",
    "create_without_data",
    "register_type",
]


# --- Module Notes -----------------------------------------------------------
# Queries instantiate rows through the factory, never by reflecting on classes.
