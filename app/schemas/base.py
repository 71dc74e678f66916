"""
Base schema with UTC datetime serialization.

Provides UTCDatetime type annotation that serializes datetime
objects with Z suffix indicating UTC timezone.
"""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import PlainSerializer


def _format_utc(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    # SQLite hands back naive datetimes; they were written as UTC
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


# Custom datetime type that serializes with Z suffix for UTC
# Usage: created_at: UTCDatetime instead of created_at: datetime
UTCDatetime = Annotated[
    datetime,
    PlainSerializer(_format_utc, return_type=str),
]


def normalize_string_list(values: list[str] | None) -> list[str]:
    """
    Trim entries, drop empty ones and remove duplicates (first occurrence wins).

    Mirrors the comma-separated tag input of the UI: "rpg, , RPG ,rpg" becomes
    ["rpg", "RPG"].
    """
    if not values:
        return []
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        item = str(value).strip()
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result
