"""
User Model.

Login identity.  Passwords are stored and compared in plaintext, exactly
as the accounts were provisioned; there is no hashing layer.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class User(BaseModel):
    """Represents a user account."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: str
    username: str = Field(min_length=1)
    password: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Accounts seeded by bootstrap when the user collection is empty.
DEFAULT_USERS: tuple[tuple[str, str], ...] = (
    ("aecreboque", "123"),
    ("gabriel", "laranja42"),
)
