"""
sabres.tasks

Background execution for the *_in_background query operations.

Responsibilities:
- Run blocking operations on a small worker pool.
- Normalize failures into the `sabres.errors` taxonomy.
- Deliver `(result, error)` to a completion handler, optionally marshaled onto a
  caller-designated context (e.g. an asyncio loop's `call_soon_threadsafe`).
"""

from __future__ import annotations

import contextvars
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

from sabres.errors import SabresError, construct
from sabres.observability.logging import get_logger, task_context

log = get_logger(__name__)

T = TypeVar("T")

Callback = Callable[[Any, SabresError | None], None]
Deliverer = Callable[[Callable[[], None]], Any]


class BackgroundExecutor:
    def __init__(self, *, max_workers: int = 1, thread_name_prefix: str = "sabres") -> None:
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )

    def submit(
        self,
        fn: Callable[[], T],
        *,
        name: str = "task",
        callback: Callback | None = None,
        deliver_on: Deliverer | None = None,
    ) -> Future[T]:
        """
        Schedule `fn` and return its future.

        The future fails only with `SabresError` subclasses. When `callback` is
        given it receives `(result, None)` or `(None, error)` exactly once, via
        `deliver_on` if provided, else on the worker thread. Completion order is
        only guaranteed within one task, never across tasks.
        """

        # Carry the caller's structlog contextvars into the worker thread.
        ctx = contextvars.copy_context()
        future = self._pool.submit(ctx.run, _normalized, fn, name)
        if callback is not None:
            future.add_done_callback(lambda f: _deliver(f, callback, deliver_on))
        return future

    def shutdown(self, *, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)


def _normalized(fn: Callable[[], T], name: str) -> T:
    with task_context(name):
        try:
            return fn()
        except Exception as e:
            err = construct(e)
            log.info("background_task_failed", code=err.code, error=err.message)
            if err is e:
                raise
            raise err from e


def _deliver(future: Future[Any], callback: Callback, deliver_on: Deliverer | None) -> None:
    if future.cancelled():
        return
    error = construct(future.exception())
    result = None if error is not None else future.result()

    def invoke() -> None:
        try:
            callback(result, error)
        except Exception:
            log.exception("background_callback_failed")

    if deliver_on is None:
        invoke()
    else:
        deliver_on(invoke)


# --- Module Notes -----------------------------------------------------------
# Queued tasks can't be cancelled once running; callers may only ignore the result.
