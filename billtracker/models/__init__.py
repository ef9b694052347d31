"""
Data Models Package.

Re-exports all Pydantic models:
    from billtracker.models import Bill, BillCreate, BillUpdate, User
    from billtracker.models import ServiceResult, MonthSummary
"""

from __future__ import annotations

from billtracker.models.bill import Bill, BillCreate, BillFields, BillUpdate
from billtracker.models.service_models import MonthSummary, ServiceResult
from billtracker.models.user import DEFAULT_USERS, User

__all__ = [
    "Bill",
    "BillCreate",
    "BillFields",
    "BillUpdate",
    "DEFAULT_USERS",
    "MonthSummary",
    "ServiceResult",
    "User",
]
