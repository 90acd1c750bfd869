from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import Request

from ctxlog.context import Context
from ctxlog.observability.current import current, use
from ctxlog.store import with_, with_fields


STATE_KEY = "ctxlog"


class RequestContextMiddleware:
    """Roots a ctxlog context per request (request_id, path, method) and writes access logs."""

    def __init__(self, app: Callable[..., Any], header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self.header_name) or str(uuid.uuid4())
        ctx = with_fields(
            Context.background(),
            {
                "request_id": request_id,
                "path": scope.get("path"),
                "method": scope.get("method"),
            },
        )
        scope.setdefault("state", {})[STATE_KEY] = ctx

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers[self.header_name] = request_id

            await send(message)

        try:
            with use(ctx):
                await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (perf_counter() - start) * 1000.0
            with_(ctx).info(
                "http_request",
                status_code=status_code,
                elapsed_ms=round(elapsed_ms, 2),
            )


def request_context(request: Request) -> Context:
    """Context the middleware stored for ``request``; falls back to :func:`current`."""

    ctx = request.scope.get("state", {}).get(STATE_KEY)
    return ctx if ctx is not None else current()
