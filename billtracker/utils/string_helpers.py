"""
String Helpers: Centralized Naming Convention Converter.

Single source of truth for key conversion between the camelCase wire
format (JSON documents, cache entries, API payloads) and the snake_case
columns of the remote relational store.
"""

from __future__ import annotations

import re
from typing import Union, overload

__all__ = [
    "JsonValue",
    "denormalize_keys",
    "normalize_keys",
    "safe_filename",
    "to_camel_case",
    "to_snake_case",
]

# ---------------------------------------------------------------------------
# Recursive JSON value type
# ---------------------------------------------------------------------------

JsonValue = Union[
    str,
    int,
    float,
    bool,
    None,
    dict[str, "JsonValue"],
    list["JsonValue"],
]

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

# "HTTPResponse" -> "HTTP_Response"
_RE_UPPER_RUN = re.compile(r"([A-Z]+)([A-Z][a-z])")

# "dueDate" -> "due_Date"
_RE_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")

_RE_MULTI_UNDERSCORE = re.compile(r"_+")

# Anything outside this set is replaced when building stored filenames.
_RE_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


# ---------------------------------------------------------------------------
# Case-conversion primitives
# ---------------------------------------------------------------------------


def to_snake_case(name: str) -> str:
    """Convert a camelCase or PascalCase string to snake_case.

        dueDate    -> due_date
        ownerId    -> owner_id
        createdAt  -> created_at
        id         -> id
    """
    s1 = _RE_UPPER_RUN.sub(r"\1_\2", name)
    s2 = _RE_CAMEL_BOUNDARY.sub(r"\1_\2", s1)
    s3 = _RE_MULTI_UNDERSCORE.sub("_", s2)
    return s3.lower()


def to_camel_case(name: str) -> str:
    """Convert a snake_case string to camelCase (``due_date`` -> ``dueDate``)."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest if part)


# ---------------------------------------------------------------------------
# Recursive key-normalisation helpers
# ---------------------------------------------------------------------------


@overload
def normalize_keys(data: dict[str, JsonValue]) -> dict[str, JsonValue]: ...


@overload
def normalize_keys(data: list[JsonValue]) -> list[JsonValue]: ...


@overload
def normalize_keys(data: JsonValue) -> JsonValue: ...


def normalize_keys(
    data: Union[dict[str, JsonValue], list[JsonValue], JsonValue],
) -> Union[dict[str, JsonValue], list[JsonValue], JsonValue]:
    """Recursively convert all dictionary keys to snake_case (wire -> column)."""
    if isinstance(data, dict):
        return {to_snake_case(k): normalize_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [normalize_keys(item) for item in data]
    return data


def denormalize_keys(
    data: Union[dict[str, JsonValue], list[JsonValue], JsonValue],
) -> Union[dict[str, JsonValue], list[JsonValue], JsonValue]:
    """Recursively convert all dictionary keys to camelCase (column -> wire)."""
    if isinstance(data, dict):
        return {to_camel_case(k): denormalize_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [denormalize_keys(item) for item in data]
    return data


def safe_filename(name: str) -> str:
    """Reduce an uploaded file name to a single safe path component.

    Directory parts are dropped and unsafe characters collapse to ``_``.
    Returns ``"file"`` when nothing usable remains.
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    cleaned = _RE_UNSAFE_FILENAME.sub("_", base).strip("._")
    return cleaned or "file"
