"""
sabres.db.init_db

Bookkeeping bootstrap.

Responsibilities:
- Create the internal tables (schema storage) if they don't exist.
"""

from __future__ import annotations

from sabres.db import models  # noqa: F401  # registers SchemaEntry on Base.metadata
from sabres.db.base import Base
from sabres.db.connection import Database


def init_db(db: Database) -> None:
    with db.session():
        Base.metadata.create_all(db.connection)


# --- Module Notes -----------------------------------------------------------
# Object tables are created lazily on first save; only bookkeeping lives here.
