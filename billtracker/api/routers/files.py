"""Attachment upload and download (``/api/files``)."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response

from billtracker.api.dependencies import get_app_config, get_services
from billtracker.api.schemas import envelope
from billtracker.config import AppConfig
from billtracker.logger import get_logger
from billtracker.services import ServiceContainer
from billtracker.services.asset_store import (
    AssetNotFoundError,
    InvalidAssetNameError,
    build_attachment_name,
)

router = APIRouter(prefix="/files", tags=["files"])

_logger = get_logger("api")

Services = Annotated[ServiceContainer, Depends(get_services)]
Config = Annotated[AppConfig, Depends(get_app_config)]


@router.post("")
def upload_file(
    services: Services,
    config: Config,
    action: Annotated[Optional[str], Form()] = None,
    file: Annotated[Optional[UploadFile], File()] = None,
    filename: Annotated[Optional[str], Form()] = None,
):
    """Store an attachment.  Without *filename* a unique name is generated
    from the uploaded file's own name."""
    if action != "salvarArquivo" or file is None:
        return envelope(False, error="Unrecognized action")

    content = file.file.read(config.MAX_UPLOAD_BYTES + 1)
    if len(content) > config.MAX_UPLOAD_BYTES:
        return JSONResponse(
            status_code=413,
            content=envelope(False, error="File too large"),
        )

    target = filename.strip() if filename else build_attachment_name(file.filename or "")
    try:
        services["asset_store"].save(target, content)
    except InvalidAssetNameError:
        return JSONResponse(status_code=400, content=envelope(False, error="Invalid filename"))
    except OSError:
        _logger.error("Failed to store upload %s", target, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=envelope(False, error="Internal server error"),
        )

    return envelope(True, data={"filename": target}, message="File saved")


@router.get("/{filename}")
def download_file(filename: str, services: Services):
    try:
        asset = services["asset_store"].load(filename)
    except AssetNotFoundError:
        return JSONResponse(
            status_code=404,
            content={"success": False, "error": "File not found"},
        )
    return Response(content=asset.content, media_type=asset.content_type)
