"""ctxlog - carry structlog fields on an immutable, request-scoped context.

Example::

    ctx = ctxlog.with_field(Context.background(), "request_id", new_request_id())
    do_stuff(ctx)  # any ctxlog.with_(ctx) inside logs with "request_id"
"""

from ctxlog.context import Context
from ctxlog.store import (
    clear,
    fields,
    get_default_entry,
    resolve_entry,
    set,
    set_default_entry_factory,
    with_,
    with_field,
    with_fields,
)

__version__ = "0.1.0"

__all__ = [
    "Context",
    "resolve_entry",
    "with_",
    "with_field",
    "with_fields",
    "fields",
    "clear",
    "set",
    "set_default_entry_factory",
    "get_default_entry",
]
