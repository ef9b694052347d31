"""
Bill Tracker Web API - FastAPI application factory.

The composition root (``main.py``) builds the services and hands them to
:func:`create_app`; nothing here opens connections or reads files.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from billtracker import __version__
from billtracker.api.routers import (
    calendar_router,
    database_router,
    files_router,
    system_router,
)
from billtracker.api.schemas import envelope
from billtracker.config import AppConfig
from billtracker.services import ServiceContainer


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=envelope(False, error="Invalid request"),
    )


def create_app(
    services: ServiceContainer,
    config: AppConfig,
    online: bool = False,
) -> FastAPI:
    """Build the FastAPI application around an already-wired service container."""
    app = FastAPI(title="Bill Tracker", version=__version__)
    app.state.services = services
    app.state.config = config
    app.state.online = online

    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(database_router, prefix="/api")
    app.include_router(files_router, prefix="/api")
    app.include_router(calendar_router, prefix="/api")
    app.include_router(system_router)
    return app
