"""
Common query parameter models for API endpoints.

These Pydantic models are used with FastAPI's Depends() to provide reusable
query parameter sets, reducing code duplication across routes.
"""

from typing import Literal

from pydantic import BaseModel, Field


class GenreListParams(BaseModel):
    """Query parameters of the genre typeahead list."""

    search: str | None = Field(default=None, description="Case-insensitive substring filter")
    force: bool = Field(default=False, description="Bypass and refresh the genre cache")


class VisibilityParams(BaseModel):
    """Visibility filter for the games summary."""

    visibility: Literal["all", "visible", "hidden"] = Field(
        default="all", description="Which snapshots to include"
    )
