"""
sabres.query

Fluent queries over declared object types.

Responsibilities:
- Accumulate equality filters, orderings and pointer includes.
- Run `find` / `get` / `count`, creating filter indices lazily.
- Offer background variants that deliver results through futures/callbacks.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Generic, TypeVar

from sabres.catalog import table_exists
from sabres.commands import (
    OBJECT_ID_KEY,
    CountCommand,
    CreateIndexCommand,
    Direction,
    OrderBy,
    SelectCommand,
)
from sabres.db.connection import Database
from sabres.errors import InvalidIncludeType, ObjectNotFound, UnrecognizedKey
from sabres.objects import SabresObject, create, create_without_data
from sabres.observability.logging import get_logger
from sabres.tasks import Callback, Deliverer
from sabres.where import Where

log = get_logger(__name__)

T = TypeVar("T", bound=SabresObject)


def create_indices(db: Database, table: str, keys: list[str]) -> None:
    # IF NOT EXISTS makes this safe to run on every query execution.
    command = CreateIndexCommand(table, keys).if_not_exists()
    with db.session():
        db.execute(command.to_sql())


class SabresQuery(Generic[T]):
    """
    Finds objects of one declared type.

        query = SabresQuery.get_query(Movie, db)
        movies = query.where_equal_to("title", "Se7en").add_ascending_order("year").find()

    `find`, `get` and `count` block the calling thread; the *_in_background
    variants run on the database's worker pool and return a `Future`. A query
    can be executed repeatedly; only index creation touches the database
    beyond reading, and it is idempotent.
    """

    def __init__(self, cls: type[T], db: Database) -> None:
        self._cls = cls
        self._db = db
        self._registry = cls.registry
        self.name = cls.object_name
        self._key_indices: list[str] = []
        self._includes: list[str] = []
        self._order: list[OrderBy] = []
        self._where = Where.empty()

    @classmethod
    def get_query(cls, object_cls: type[T], db: Database) -> SabresQuery[T]:
        return cls(object_cls, db)

    def _check_key(self, key: str) -> None:
        if key != OBJECT_ID_KEY and self._registry.get_descriptor(self.name, key) is None:
            raise UnrecognizedKey(key, self.name)

    # -- builder ---------------------------------------------------------------

    def where_equal_to(self, key: str, value: Any) -> SabresQuery[T]:
        self._check_key(key)
        clause = Where.equal_to(key, value)
        if key not in self._key_indices:
            self._key_indices.append(key)
        self._where = self._where & clause
        return self

    def add_ascending_order(self, key: str) -> SabresQuery[T]:
        self._check_key(key)
        self._order.append(OrderBy(key, Direction.ascending))
        return self

    def add_descending_order(self, key: str) -> SabresQuery[T]:
        self._check_key(key)
        self._order.append(OrderBy(key, Direction.descending))
        return self

    def include(self, key: str) -> SabresQuery[T]:
        """
        Eagerly load the object referenced by pointer `key`. Non-pointer keys are
        already part of every result, so they are skipped with a warning.
        """

        descriptor = self._registry.get_descriptor(self.name, key)
        if descriptor is None:
            raise UnrecognizedKey(key, self.name)

        if not descriptor.is_pointer:
            skipped = InvalidIncludeType(
                f"keys of type {descriptor.type} are always included in query results"
            )
            log.warning(
                "include_skipped",
                object=self.name,
                key=key,
                code=skipped.code,
                reason=skipped.message,
            )
        elif key not in self._includes:
            self._includes.append(key)
        return self

    # -- terminal operations -----------------------------------------------

    def count(self) -> int:
        command = CountCommand(self.name).where(self._where)
        with self._db.session():
            if not table_exists(self._db, self.name):
                return 0
            return self._db.count(command.to_sql())

    def find(self) -> list[T]:
        db = self._db
        objects: list[T] = []
        with db.session():
            # No table yet means no data yet, not a malformed query.
            if not table_exists(db, self.name):
                return objects

            if self._key_indices:
                create_indices(db, self.name, self._key_indices)

            command = SelectCommand(
                self.name, self._registry.get_keys(self.name), schema=self._registry
            )
            for include in self._includes:
                referenced = self._registry.get_descriptor(self.name, include).referenced_type
                # Nothing saved for the referenced type yet: its pointers stay unset.
                if table_exists(db, referenced):
                    command.join_pointer(include)
            for order in self._order:
                command.order_by(order)

            for row in db.select(command.where(self._where).to_sql()):
                obj = create(self.name)
                obj.populate(db, row)
                for include in self._includes:
                    obj.populate_child(db, row, include)
                objects.append(obj)  # type: ignore[arg-type]
        return objects

    def get(self, object_id: int) -> T:
        db = self._db
        with db.session():
            if not table_exists(db, self.name):
                raise ObjectNotFound(f"table {self.name} does not exist")
            instance = create_without_data(self.name, object_id)
            instance.fetch(db)
            return instance  # type: ignore[return-value]

    # -- background variants -----------------------------------------------

    def find_in_background(
        self, callback: Callback | None = None, *, deliver_on: Deliverer | None = None
    ) -> Future[list[T]]:
        return self._db.background.submit(
            self.find, name=f"find:{self.name}", callback=callback, deliver_on=deliver_on
        )

    def get_in_background(
        self,
        object_id: int,
        callback: Callback | None = None,
        *,
        deliver_on: Deliverer | None = None,
    ) -> Future[T]:
        return self._db.background.submit(
            lambda: self.get(object_id),
            name=f"get:{self.name}",
            callback=callback,
            deliver_on=deliver_on,
        )

    def count_in_background(
        self, callback: Callback | None = None, *, deliver_on: Deliverer | None = None
    ) -> Future[int]:
        return self._db.background.submit(
            self.count, name=f"count:{self.name}", callback=callback, deliver_on=deliver_on
        )


# --- Module Notes -----------------------------------------------------------
# `get` on a missing table fails with ObjectNotFound while `find` returns []: a
# targeted lookup has nothing to find, a scan has simply found nothing yet.
