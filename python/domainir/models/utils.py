"""Naming and error-location helpers for declaration parsing.

Functions:
    _to_snake_case(name) -> str:
        Derive a default table name from a model name.

        AuthUser     →  auth_user
        HTTPSession  →  http_session

    _field_index_from_loc(loc) -> int | None:
        Find the index of the offending field in a pydantic error location.

        ("fields", 2, "type")  →  2
        ("access", "read")     →  None

    _format_loc(loc) -> str:
        Render a pydantic error location as a dotted path.

        ("fields", 2, "validation", 0)  →  fields[2].validation[0]
"""

from __future__ import annotations

import re
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def _to_snake_case(name: str) -> str:
    """Convert CamelCase or camelCase to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def _field_index_from_loc(loc: tuple[Any, ...]) -> int | None:
    """Return the field index when a validation error lives inside fields[i]."""
    if len(loc) >= 2 and loc[0] == "fields" and isinstance(loc[1], int):
        return loc[1]
    return None


def _format_loc(loc: tuple[Any, ...]) -> str:
    """Format an error location tuple as a readable path."""
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return "".join(parts) or "<root>"


__all__ = [
    "_to_snake_case",
    "_field_index_from_loc",
    "_format_loc",
]
