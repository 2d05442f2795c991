"""
bytevault.api.app

FastAPI app factory for the ByteVault service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Open and close the process-wide `VaultState` in the app lifespan.
- Map domain errors and login redirects to HTTP responses.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.status import HTTP_303_SEE_OTHER

from bytevault import __version__
from bytevault.api.routers.files import router as files_router
from bytevault.api.routers.health import router as health_router
from bytevault.api.routers.pages import router as pages_router
from bytevault.auth.deps import LoginRedirect
from bytevault.errors import VaultError
from bytevault.observability.logging import configure_logging, get_logger
from bytevault.observability.middleware import RequestContextMiddleware
from bytevault.settings import Settings
from bytevault.state import open_state

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, storage_dir=str(settings.storage_dir))
        state = await open_state(settings)
        app.state.vault = state
        try:
            yield
        finally:
            await state.close()
            log.info("shutdown")

    app = FastAPI(
        title="ByteVault",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(pages_router)
    app.include_router(files_router)
    if settings.static_dir is not None:
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    @app.exception_handler(VaultError)
    async def _vault_error(_: Request, exc: VaultError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("request_failed", error=exc.message, cause=repr(exc.__cause__))
        return JSONResponse(
            {"error": exc.message}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(LoginRedirect)
    async def _login_redirect(_: Request, exc: LoginRedirect) -> RedirectResponse:
        return RedirectResponse(exc.location, status_code=HTTP_303_SEE_OTHER)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; auth decisions live in `bytevault.auth` and object
# lifecycle in `bytevault.services.object_store`.
