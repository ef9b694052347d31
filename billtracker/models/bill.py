"""
Bill Models.

A Bill is a financial obligation owned by one user.  The same shape is
stored in three places (JSON documents, key/value cache, Supabase rows),
so field names are snake_case in Python and camelCase on the wire
(``dueDate``, ``ownerId``, ``createdAt``).  Remote column names are the
snake_case field names.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SerializationInfo, field_serializer
from pydantic.alias_generators import to_camel


# Optional fields a patch may reset to null; the rest ignore an explicit null.
_CLEARABLE_FIELDS: frozenset[str] = frozenset({"attachment", "barcode"})

# Serialization context for persisted records.  Amounts are written as
# decimal strings there; HTTP responses keep them as JSON numbers.
STORAGE_CONTEXT: dict[str, bool] = {"exact_amounts": True}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dump_amount(value: Optional[Decimal], info: SerializationInfo) -> Union[float, str, None]:
    if value is None:
        return None
    if info.context and info.context.get("exact_amounts"):
        return format(value, "f")
    return float(value)


class _WireModel(BaseModel):
    """camelCase aliases, accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BillFields(_WireModel):
    """User-editable fields shared by creation input and stored records."""

    name: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    due_date: date
    paid: bool = False
    attachment: Optional[str] = None
    barcode: Optional[str] = None

    @field_serializer("amount", when_used="json")
    def _serialize_amount(self, value: Decimal, info: SerializationInfo) -> Union[float, str]:
        return _dump_amount(value, info)


class BillCreate(BillFields):
    """Input for ``addBill``: everything but the generated id and timestamp."""

    owner_id: str = Field(min_length=1)


class Bill(BillCreate):
    """A stored bill record."""

    id: str
    created_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_create(
        cls,
        data: BillCreate,
        bill_id: str,
        created_at: Optional[datetime] = None,
    ) -> "Bill":
        """Materialise a record from creation input and generated identity."""
        return cls(
            **data.model_dump(),
            id=bill_id,
            created_at=created_at or _utcnow(),
        )

    def merged(self, patch: "BillUpdate") -> "Bill":
        """Return a copy with only the fields explicitly set on *patch* applied."""
        return self.model_validate({**self.model_dump(), **patch.changes()})


class BillUpdate(_WireModel):
    """Partial patch for ``updateBill``.

    ``id``, ``createdAt`` and ``ownerId`` are immutable and therefore absent.
    Only fields the caller actually supplied are applied.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    name: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, ge=0)
    due_date: Optional[date] = None
    paid: Optional[bool] = None
    attachment: Optional[str] = None
    barcode: Optional[str] = None

    @field_serializer("amount", when_used="json")
    def _serialize_amount(
        self, value: Optional[Decimal], info: SerializationInfo
    ) -> Union[float, str, None]:
        return _dump_amount(value, info)

    def changes(
        self, mode: str = "python", context: Optional[dict[str, bool]] = None
    ) -> dict[str, object]:
        """Explicitly supplied fields, keyed by snake_case field name."""
        dumped = self.model_dump(mode=mode, exclude_unset=True, context=context)
        return {
            key: value
            for key, value in dumped.items()
            if value is not None or key in _CLEARABLE_FIELDS
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()
