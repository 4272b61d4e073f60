"""
sabres.app

Composition root.

Responsibilities:
- Configure logging once.
- Build the engine and the serialized `Database` handle from settings.
- Create bookkeeping tables.
"""

from __future__ import annotations

from sabres.db.connection import Database
from sabres.db.init_db import init_db
from sabres.db.session import create_engine
from sabres.observability.logging import configure_logging, get_logger
from sabres.settings import Settings, get_settings

log = get_logger(__name__)


def create_database(*, settings: Settings | None = None) -> Database:
    settings = settings or get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    engine = create_engine(settings)
    db = Database(
        engine,
        sql_echo=settings.sql_echo,
        background_workers=settings.background_workers,
    )
    init_db(db)
    log.info("database_ready", env=settings.env, url=engine.url.render_as_string())
    return db


# --- Module Notes -----------------------------------------------------------
# Callers own the returned handle and should `dispose()` it on shutdown.
