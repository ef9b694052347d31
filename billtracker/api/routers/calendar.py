"""Calendar views and the paid toggle (``/api/calendar``)."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from billtracker.api.dependencies import get_services
from billtracker.api.schemas import envelope
from billtracker.services import ServiceContainer

router = APIRouter(prefix="/calendar", tags=["calendar"])

Services = Annotated[ServiceContainer, Depends(get_services)]


# Registered before the month view, whose path would otherwise match "day".
@router.get("/{owner_id}/day/{day}")
def day_view(owner_id: str, day: date, services: Services) -> dict:
    return envelope(True, data=services["bill_service"].bills_on_day(owner_id, day))


@router.get("/{owner_id}/{year}/{month}")
def month_view(
    owner_id: str,
    year: Annotated[int, Path(ge=1)],
    month: Annotated[int, Path(ge=1, le=12)],
    services: Services,
) -> dict:
    """Bills of the month, the days that have any, and the month totals."""
    bills = services["bill_service"]
    return envelope(
        True,
        data={
            "bills": bills.bills_in_month(owner_id, year, month),
            "days": bills.days_with_bills(owner_id, year, month),
            "summary": bills.month_summary(owner_id, year, month),
        },
    )


@router.post("/{owner_id}/bills/{bill_id}/toggle-paid")
def toggle_paid(owner_id: str, bill_id: str, services: Services) -> dict:
    result = services["bill_service"].toggle_paid(owner_id, bill_id)
    return envelope(result.success, data=result.data, error=result.error)
