from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.staticfiles import StaticFiles

from valkey_demo.config import Settings, load_settings
from valkey_demo.home import resolve_app_paths
from valkey_demo.ui.router import router as ui_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the web application.

    Settings are snapshotted from the environment here (once per process) unless
    given explicitly. Raises AppDirError if the static directory cannot be resolved.
    """

    settings = settings if settings is not None else load_settings()
    paths = resolve_app_paths(settings)

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        logger.info("Valkey demo starting up")
        logger.info(
            "Credential source: %s",
            "VCAP_SERVICES" if settings.platform_managed else "VALKEY_* environment",
        )
        logger.info(f"Public dir: {paths.public_dir}")
        yield

    app = FastAPI(title="Valkey Demo", version="0.1.0", lifespan=_lifespan)
    app.state.settings = settings
    app.state.app_paths = paths

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> HTMLResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return HTMLResponse("Internal server error", status_code=500)

    if paths.public_dir.is_dir():
        app.mount(
            "/public",
            StaticFiles(directory=str(paths.public_dir)),
            name="public",
        )
    else:
        logger.warning(
            "Public directory is missing (%s); /public will not be served",
            paths.public_dir,
        )
    app.include_router(ui_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
