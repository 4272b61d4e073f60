"""
sabres.db.session

SQLAlchemy engine factory.

Responsibilities:
- Create the engine from settings with the options the connection handle relies on.
"""

from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import make_url

from sabres.settings import Settings


def create_engine(settings: Settings) -> Engine:
    url = make_url(settings.database_url)
    connect_args: dict[str, object] = {}
    if url.get_backend_name() == "sqlite":
        # Background workers reuse pooled connections; access is serialized by `Database`.
        connect_args["check_same_thread"] = False

    # Every statement commits on its own, like the embedded store the query layer assumes.
    return sa_create_engine(
        url,
        isolation_level="AUTOCOMMIT",
        connect_args=connect_args,
    )


# --- Module Notes -----------------------------------------------------------
# In-memory URLs get one database per thread from the pool, so background workers would not
# see tables created on the caller thread; use a file path.
