from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from ctxlog.context import Context
from ctxlog.store import fields


_current: ContextVar[Context | None] = ContextVar("ctxlog_current", default=None)


def current() -> Context:
    """Context installed by :func:`use` for this task/thread, else the background one."""

    ctx = _current.get()
    return ctx if ctx is not None else Context.background()


@contextmanager
def use(ctx: Context) -> Iterator[Context]:
    token = _current.set(ctx)
    try:
        yield ctx
    finally:
        _current.reset(token)


def merge_current_fields(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor: add the current context's fields to every event.

    Keys already present on the event win.
    """

    ctx = _current.get()
    if ctx is None:
        return event_dict
    for key, value in fields(ctx).items():
        event_dict.setdefault(key, value)
    return event_dict
