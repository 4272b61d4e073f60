"""
sabres.__main__

Entrypoint for inspecting a database via `python -m sabres`.

Responsibilities:
- Parse the report to print (tables, indices, schema).
- Print the fixed-column text table to stdout.
"""

from __future__ import annotations

import argparse
import sys

from sabres import catalog
from sabres.app import create_database
from sabres.settings import get_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sabres", description="Inspect a sabres database.")
    parser.add_argument("report", choices=("tables", "indices", "schema"))
    parser.add_argument("--database-url", help="overrides SABRES_DATABASE_URL")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})

    db = create_database(settings=settings)
    try:
        if args.report == "tables":
            report = catalog.list_tables(db)
        elif args.report == "indices":
            report = catalog.list_indices(db)
        else:
            report = catalog.list_schema(db)
    finally:
        db.dispose()

    print(report.render())
    return 0


if __name__ == "__main__":
    sys.exit(main())


# --- Module Notes -----------------------------------------------------------
# Output goes to stdout; structured logs go to stderr.
