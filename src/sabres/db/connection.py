"""
sabres.db.connection

The explicit connection handle every query, catalog read and save goes through.

Responsibilities:
- Open/close one SQLAlchemy connection with re-entrant reference counting.
- Serialize whole open/execute/close sequences across threads.
- Translate driver failures into `StorageError`.
- Own the background executor used by the *_in_background operations.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Connection, Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from sabres.errors import StorageError
from sabres.observability.logging import get_logger
from sabres.tasks import BackgroundExecutor

log = get_logger(__name__)

Statement = str | Executable


class Database:
    """
    Wraps an engine as a single logical connection.

    The outermost `open()` takes a re-entrant lock that is only released by the
    matching `close()`, so two threads never interleave statements. Nested
    open/close pairs on the holding thread just adjust a counter.

    No statement has a timeout and none can be cancelled; a stuck statement
    blocks its caller (or worker) and everything queued behind the lock.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        sql_echo: bool = False,
        background_workers: int = 1,
    ) -> None:
        self._engine = engine
        self._sql_echo = sql_echo
        self._background_workers = background_workers
        self._lock = threading.RLock()
        self._conn: Connection | None = None
        self._depth = 0
        self._background: BackgroundExecutor | None = None
        self._background_guard = threading.Lock()

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> Connection:
        if self._conn is None:
            raise RuntimeError("database is not open")
        return self._conn

    def open(self) -> None:
        self._lock.acquire()
        if self._depth == 0:
            try:
                self._conn = self._engine.connect()
            except SQLAlchemyError as e:
                self._lock.release()
                raise StorageError(f"failed to open database: {e}") from e
        self._depth += 1

    def close(self) -> None:
        if self._depth == 0:
            raise RuntimeError("close() without a matching open()")
        self._depth -= 1
        try:
            if self._depth == 0 and self._conn is not None:
                conn, self._conn = self._conn, None
                conn.close()
        finally:
            self._lock.release()

    @contextmanager
    def session(self) -> Iterator[Database]:
        self.open()
        try:
            yield self
        finally:
            self.close()

    def execute(self, statement: Statement) -> int:
        """Run a statement that returns no rows; returns the affected row count."""
        result = self._run(statement)
        rowcount = result.rowcount
        result.close()
        return rowcount

    def insert(self, statement: Statement) -> int:
        result = self._run(statement)
        rowid = result.lastrowid
        result.close()
        return rowid

    def select(self, statement: Statement) -> Sequence[RowMapping]:
        # Rows are materialized so no cursor outlives the call.
        return self._run(statement).mappings().all()

    def count(self, statement: Statement) -> int:
        return int(self._run(statement).scalar_one())

    def _run(self, statement: Statement) -> Any:
        conn = self.connection
        if self._sql_echo:
            log.debug("sql", statement=str(statement))
        try:
            if isinstance(statement, str):
                # Driver-level execution: rendered literals may contain ":name" text.
                return conn.exec_driver_sql(statement)
            return conn.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError(str(e.orig) if getattr(e, "orig", None) else str(e)) from e

    @property
    def background(self) -> BackgroundExecutor:
        with self._background_guard:
            if self._background is None:
                self._background = BackgroundExecutor(max_workers=self._background_workers)
            return self._background

    def dispose(self) -> None:
        with self._background_guard:
            background, self._background = self._background, None
        if background is not None:
            background.shutdown(wait=True)
        self._engine.dispose()


# --- Module Notes -----------------------------------------------------------
# Every public operation in `sabres.query` and `sabres.catalog` brackets its work
# in `session()`, so release happens on every exit path.
