from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import structlog
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from ctxlog.config import get_settings
from ctxlog.observability.current import current
from ctxlog.observability.logging import reset_logging
from ctxlog.observability.middleware import RequestContextMiddleware, request_context
from ctxlog.store import fields, set_default_entry_factory, with_, with_field


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    # Keep a developer's .env or shell exports out of the settings under test.
    monkeypatch.chdir(tmp_path)
    for var in ("CTXLOG_LOG_LEVEL", "CTXLOG_LOG_FORMAT", "CTXLOG_LOGGER_NAME"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    set_default_entry_factory(None)
    structlog.reset_defaults()

    yield

    reset_logging()
    set_default_entry_factory(None)
    get_settings.cache_clear()


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/whoami")
    async def whoami(request: Request) -> dict:
        ctx = with_field(request_context(request), "user", "alice")
        with_(ctx).info("whoami_called")
        return {"request": fields(ctx), "current": fields(current())}

    @app.get("/boom")
    async def boom() -> dict:
        raise RuntimeError("boom")

    return app


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=_build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
