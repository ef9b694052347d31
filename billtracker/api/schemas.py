"""Request and response bodies of the HTTP API."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from billtracker.utils.general import JsonSafeType, convert_to_json_safe


class DatabaseRequest(BaseModel):
    """Body of ``POST /api/database``.

    Parameters are action-specific; which ones are required is decided by
    the action handler, so every field is optional here.
    """

    model_config = ConfigDict(extra="ignore")

    action: Optional[str] = None
    bill: Optional[dict[str, Any]] = None
    id: Optional[str] = None
    updates: Optional[dict[str, Any]] = None
    username: Optional[str] = None
    password: Optional[str] = None


def envelope(
    success: bool,
    data: Any = None,
    error: Optional[str] = None,
    message: Optional[str] = None,
) -> dict[str, JsonSafeType]:
    """The ``{success, data, error, message}`` body every action returns."""
    return {
        "success": success,
        "data": convert_to_json_safe(data),
        "error": error,
        "message": message,
    }
