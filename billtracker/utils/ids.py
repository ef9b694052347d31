"""Record identifier generation."""

from __future__ import annotations

import random
import string
import time

__all__ = ["generate_id"]

_BASE36_ALPHABET: str = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH: int = 9


def generate_id() -> str:
    """Return ``<epoch milliseconds><9 random base-36 chars>``.

    Unique enough for a single-tenant, low-volume store.  Not
    cryptographically random; two ids minted in the same millisecond
    collide only if their suffixes also match.
    """
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36_ALPHABET, k=_SUFFIX_LENGTH))
    return f"{millis}{suffix}"
