"""
sabres.observability.logging

Structured logging for the storage layer.

Responsibilities:
- Configure `structlog` to render JSON events on stderr; stdout belongs to the
  `sabres` CLI reports.
- Provide bound loggers and the `task` context shared by background work.

Events emitted by the package:
- `database_ready` (app): engine created, with `env` and the rendered URL.
- `schema_registered` (schema): an object type's keys were recorded or widened.
- `include_skipped` (query): a non-pointer key was passed to `include`.
- `sql` (db.connection, debug): one rendered statement, when `sql_echo` is on.
- `background_task_failed` / `background_callback_failed` (tasks).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def configure_logging(*, service_name: str, level: str) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # Statements are logged by `sabres.db.connection`; the engine's own echo stays quiet.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


@contextmanager
def task_context(name: str) -> Iterator[None]:
    """Tag every event logged inside the block with `task=name`."""

    with structlog.contextvars.bound_contextvars(task=name):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Worker threads run inside a copied context, so `task` never leaks to the caller.
