from __future__ import annotations

from sabres import catalog

from conftest import Movie


def test_table_exists(db) -> None:
    assert not catalog.table_exists(db, "Movie")
    Movie(title="Heat").save(db)
    assert catalog.table_exists(db, "Movie")
    # Indices are catalog rows too, but not tables.
    db.open()
    try:
        db.execute('CREATE INDEX "ix_Movie_title_manual" ON "Movie" ("title")')
    finally:
        db.close()
    assert not catalog.table_exists(db, "ix_Movie_title_manual")


def test_list_tables_counts_rows_and_hides_bookkeeping(db, movies) -> None:
    with db.session():
        db.execute('CREATE TABLE "android_metadata" ("locale" TEXT)')
        db.execute('CREATE TABLE "_List_Movie_tags" ("id" INTEGER PRIMARY KEY, "value" TEXT)')
        db.execute('INSERT INTO "_List_Movie_tags" ("value") VALUES (\'noir\')')
        # "_" is a LIKE wildcard; this must not be mistaken for a list table.
        db.execute('CREATE TABLE "xListyArchive" ("id" INTEGER PRIMARY KEY)')

    report = catalog.list_tables(db)

    assert report.headers == ("table", "count")
    assert dict(report.rows) == {"Director": "1", "Movie": "2", "xListyArchive": "0"}
    names = report.column("table")
    for hidden in ("sqlite_sequence", "android_metadata", "_Schema", "_List_Movie_tags"):
        assert hidden not in names


def test_list_indices_hides_internal_owners(db, movies) -> None:
    with db.session():
        db.execute('CREATE TABLE "_List_Movie_tags" ("id" INTEGER PRIMARY KEY, "value" TEXT)')
        db.execute('CREATE INDEX "ix_list_value" ON "_List_Movie_tags" ("value")')
        db.execute('CREATE INDEX "ix_Movie_year" ON "Movie" ("year")')

    report = catalog.list_indices(db)

    assert report.headers == ("table", "index")
    assert report.rows == (("Movie", "ix_Movie_year"),)


def test_reports_render_as_text_tables(db, movies) -> None:
    text = catalog.list_tables(db).render()
    lines = text.splitlines()
    header = next(line for line in lines if "table" in line)
    assert "count" in header
    assert any("Movie" in line and "2" in line for line in lines)
    assert str(catalog.list_tables(db)) == text

    empty = catalog.list_indices(db).render()
    assert "table" in empty and "index" in empty
