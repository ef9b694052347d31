"""Action-dispatched record API (``/api/database``).

Every request runs the local bootstrap first, then dispatches on the
``action`` parameter.  Unknown actions and missing parameters get the
same ``Unrecognized action`` failure.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from billtracker.api.dependencies import get_services
from billtracker.api.schemas import DatabaseRequest, envelope
from billtracker.logger import get_logger
from billtracker.models.bill import BillCreate, BillUpdate
from billtracker.models.service_models import ServiceResult
from billtracker.services import ServiceContainer

router = APIRouter(prefix="/database", tags=["database"])

UNRECOGNIZED_ACTION: str = "Unrecognized action"
INTERNAL_ERROR: str = "Internal server error"

_logger = get_logger("api")

Services = Annotated[ServiceContainer, Depends(get_services)]


def _from_result(result: ServiceResult) -> dict:
    return envelope(result.success, data=result.data, error=result.error)


def _internal_error(action: Optional[str]) -> JSONResponse:
    _logger.error("Unhandled error in action %s", action, exc_info=True)
    return JSONResponse(status_code=500, content=envelope(False, error=INTERNAL_ERROR))


@router.get("")
def query_database(
    services: Services,
    action: Optional[str] = None,
    owner_id: Annotated[Optional[str], Query(alias="ownerId")] = None,
    username: Optional[str] = None,
):
    """Read actions: ``buscarBoletos``, ``buscarUsuario``, ``inicializar``."""
    try:
        services["bootstrap_service"].run()

        if action == "buscarBoletos" and owner_id:
            return envelope(True, data=services["sync_service"].list_bills(owner_id))

        if action == "buscarUsuario" and username:
            return envelope(True, data=services["sync_service"].find_user(username))

        if action == "inicializar":
            services["bootstrap_service"].initialize()
            return envelope(True, message="Database initialized")

        return envelope(False, error=UNRECOGNIZED_ACTION)
    except Exception:
        return _internal_error(action)


@router.post("")
def mutate_database(body: DatabaseRequest, services: Services):
    """Write actions: bills, users and login."""
    action = body.action
    sync = services["sync_service"]
    try:
        services["bootstrap_service"].run()

        if action == "adicionarBoleto" and body.bill is not None:
            try:
                data = BillCreate.model_validate(body.bill)
            except ValidationError as exc:
                return envelope(False, error=f"Invalid bill: {exc.errors()[0]['msg']}")
            return _from_result(sync.add_bill(data))

        if action == "atualizarBoleto" and body.id and body.updates is not None:
            try:
                patch = BillUpdate.model_validate(body.updates)
            except ValidationError as exc:
                return envelope(False, error=f"Invalid update: {exc.errors()[0]['msg']}")
            return _from_result(sync.update_bill(body.id, patch))

        if action == "removerBoleto" and body.id:
            return _from_result(sync.remove_bill(body.id))

        if action == "criarUsuario" and body.username and body.password:
            return _from_result(sync.create_user(body.username, body.password))

        if action == "login" and body.username and body.password is not None:
            return _from_result(services["auth_service"].login(body.username, body.password))

        return envelope(False, error=UNRECOGNIZED_ACTION)
    except Exception:
        return _internal_error(action)
