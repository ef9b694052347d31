"""FastAPI dependencies for API routers.

The service container and configuration are attached to ``app.state`` by
:func:`billtracker.api.app.create_app`; route handlers receive them
through these providers, which tests may override.
"""

from __future__ import annotations

from fastapi import Request

from billtracker.config import AppConfig
from billtracker.services import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    """Return the service container wired at startup.

    Usage:
        @router.get("/endpoint")
        def my_endpoint(services: Annotated[ServiceContainer, Depends(get_services)]):
            ...
    """
    return request.app.state.services


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config
