"""Store and retrieve a structlog entry on a :class:`~ctxlog.context.Context`.

Fields bound to a context follow it down the call chain, so log calls made far
from where a request started still carry its metadata::

    ctx = ctxlog.with_field(ctx, "user", user)
    ...
    ctxlog.with_(ctx).info("user_did_something")  # event has "user"

Writes never touch the context they are given. Each one returns a child
context carrying a new entry, and sibling branches never see each other's
fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

import structlog

from ctxlog.config import get_settings
from ctxlog.context import Context


class _EntryKey:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<ctxlog entry key>"


class _Cleared:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<ctxlog cleared>"


_ENTRY_KEY = _EntryKey()
_CLEARED = _Cleared()

_default_entry_factory: Callable[[], Any] | None = None


def _standard_entry() -> Any:
    name = get_settings().logger_name
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


def set_default_entry_factory(factory: Callable[[], Any] | None) -> None:
    global _default_entry_factory
    _default_entry_factory = factory


def get_default_entry() -> Any:
    """Entry returned for contexts that carry none (never set, or cleared)."""

    factory = _default_entry_factory or _standard_entry
    return factory()


def resolve_entry(ctx: Context) -> Any:
    """Return the entry stored in ``ctx``, or a fresh default entry."""

    entry = ctx.value(_ENTRY_KEY)
    if entry is None or entry is _CLEARED:
        return get_default_entry()
    return entry


# Reads naturally at call sites: ``ctxlog.with_(ctx).info(...)``.
with_ = resolve_entry


def set(ctx: Context, entry: Any) -> Context:  # noqa: A001
    """Make ``entry`` the current entry for a new child of ``ctx``.

    ``with_field`` and ``with_fields`` cover the usual cases; use this when the
    entry needs changes other than extra fields (another wrapped logger, other
    processors).
    """

    return ctx.with_value(_ENTRY_KEY, entry)


def _extend(entry: Any, new_values: Mapping[str, Any]) -> Any:
    # Not bind(**new_values): a field may be named "self". bind() alone may
    # return a cached logger, so its context is copied, never updated.
    base = entry.bind()
    context = base._context.__class__(base._context)
    context.update(new_values)
    return base.__class__(base._logger, base._processors, context)


def with_field(ctx: Context, name: str, value: Any) -> Context:
    return set(ctx, _extend(resolve_entry(ctx), {name: value}))


def with_fields(ctx: Context, fields: Mapping[str, Any]) -> Context:
    return set(ctx, _extend(resolve_entry(ctx), fields))


def fields(ctx: Context) -> dict[str, Any]:
    """Fields accumulated along ``ctx``'s lineage, as a new dict."""

    return dict(structlog.get_context(resolve_entry(ctx)))


def clear(ctx: Context) -> Context:
    """Return a child of ``ctx`` whose entry resolves to the default again.

    The earlier entry is still referenced by ``ctx`` and its ancestors, so it is
    only garbage collected once the caller drops the whole chain.
    """

    return ctx.with_value(_ENTRY_KEY, _CLEARED)
