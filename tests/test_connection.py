from __future__ import annotations

import threading

import pytest

from sabres.errors import StorageError


def test_open_close_is_reference_counted(db) -> None:
    assert not db.is_open
    db.open()
    db.open()
    conn = db.connection
    db.close()
    assert db.is_open
    assert db.connection is conn
    db.close()
    assert not db.is_open
    with pytest.raises(RuntimeError):
        db.connection


def test_close_without_open_fails(db) -> None:
    with pytest.raises(RuntimeError):
        db.close()


def test_session_releases_on_error(db) -> None:
    with pytest.raises(StorageError):
        with db.session():
            db.execute("SELECT * FROM nowhere")
    assert not db.is_open


def test_open_blocks_other_threads_until_closed(db) -> None:
    entered = threading.Event()

    def other() -> None:
        with db.session():
            entered.set()

    db.open()
    try:
        worker = threading.Thread(target=other)
        worker.start()
        assert not entered.wait(0.2)
    finally:
        db.close()
    worker.join(5)
    assert entered.is_set()


def test_statement_helpers(db) -> None:
    with db.session():
        db.execute('CREATE TABLE "T" ("id" INTEGER PRIMARY KEY, "v" TEXT)')
        first = db.insert("INSERT INTO \"T\" (\"v\") VALUES ('a:b')")
        second = db.insert("INSERT INTO \"T\" (\"v\") VALUES ('?')")
        assert (first, second) == (1, 2)
        assert db.count('SELECT COUNT(*) FROM "T"') == 2
        assert db.execute("UPDATE \"T\" SET \"v\" = 'x'") == 2
        rows = db.select('SELECT "id", "v" FROM "T" ORDER BY "id"')
    assert [dict(r) for r in rows] == [{"id": 1, "v": "x"}, {"id": 2, "v": "x"}]
