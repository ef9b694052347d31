"""
Service Layer Data Transfer Objects.

Pydantic models for validated input/output at service boundaries.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

__all__ = [
    "MonthSummary",
    "ServiceResult",
]


class ServiceResult(BaseModel, Generic[T]):
    """
    Standard service return envelope.

    Write operations of the sync facade and the higher-level services
    return this, giving the API layer one contract to translate into the
    ``{"success", "data", "error"}`` response body.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: int = 200

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, status_code: int = 400) -> "ServiceResult[T]":
        return cls(success=False, error=error, status_code=status_code)

    @classmethod
    def not_found(cls, what: str) -> "ServiceResult[T]":
        return cls(success=False, error=f"{what} not found", status_code=404)


class MonthSummary(BaseModel):
    """Totals for one owner's bills falling due in a calendar month."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    count: int = 0
    total_amount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    unpaid_amount: Decimal = Decimal("0")

    @field_serializer("total_amount", "paid_amount", "unpaid_amount", when_used="json")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)
