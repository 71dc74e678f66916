"""
Pydantic schemas for Review endpoints
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.models.review import ReviewBase
from app.schemas.base import UTCDatetime, normalize_string_list
from app.schemas.classification import GenreResponse


class ReviewCreate(BaseModel):
    """
    Schema for submitting a review.

    Required fields (title, game_name, review_text, rating) are declared optional
    here and checked by the write path, so a missing field is reported as a
    validation error with a single message instead of a per-field 422.
    """

    title: str | None = None
    game_name: str | None = None
    review_text: str | None = None
    rating: float | None = None
    genre: str | None = None
    category_name: str | None = Field(default=None, alias="categoryName")
    positive_points: list[str] = Field(default_factory=list)
    negative_points: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @field_validator("title", "game_name", "review_text", "genre", "category_name", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("positive_points", "negative_points", mode="before")
    @classmethod
    def default_points(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return normalize_string_list(v)
        return v


class ReviewUpdate(ReviewCreate):
    """Schema for replacing a review's normalized fields"""


class TagsUpdate(BaseModel):
    """
    Schema for replacing a review's tags.

    The value is validated by the service so a non-list is reported as a
    validation error ("Tags must be an array").
    """

    tags: Any = None


class ReviewResponse(ReviewBase):
    """Schema for review response - normalized row joined with game and genre names"""

    id: uuid.UUID
    game_id: uuid.UUID
    game_name: str
    genre_id: uuid.UUID | None = None
    category_name: str | None = Field(default=None, alias="categoryName")
    positive_points: list[str] = Field(default_factory=list)
    negative_points: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created_at: UTCDatetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class ReviewGenreResponse(BaseModel):
    """Schema for the result of assigning a genre to a review"""

    review: ReviewResponse
    genre: GenreResponse


class DeleteResponse(BaseModel):
    """Schema for delete confirmations"""

    success: bool = True
