"""System API routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from billtracker import __version__

router = APIRouter(tags=["system"])


@router.get("/health")
def health(request: Request) -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "online": request.app.state.online}


@router.get("/version")
def version() -> dict[str, str]:
    """Return the application version."""
    return {"version": __version__}
