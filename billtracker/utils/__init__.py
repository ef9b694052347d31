"""Shared utility functions for the Bill Tracker application.

Convenience re-exports so consumers can import directly from
``billtracker.utils`` while full module paths remain supported.
"""

from billtracker.utils.general import convert_to_json_safe
from billtracker.utils.ids import generate_id
from billtracker.utils.string_helpers import (
    denormalize_keys,
    normalize_keys,
    safe_filename,
    to_camel_case,
    to_snake_case,
)

__all__ = [
    "convert_to_json_safe",
    "denormalize_keys",
    "generate_id",
    "normalize_keys",
    "safe_filename",
    "to_camel_case",
    "to_snake_case",
]
