"""
Pydantic schemas for archived review snapshots

review_json has changed shape over time: early snapshots carry only the review
fields, later ones add "genre" and "categoryName", and some carry UI flags such
as "visible". ReviewSnapshot accepts all of them: missing keys get explicit
defaults, unknown keys are kept.
"""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.base import UTCDatetime
from app.schemas.review import ReviewResponse
from app.schemas.classification import GenreResponse

SNAPSHOT_V1 = 1  # title, game_name, review_text, rating, points, tags
SNAPSHOT_V2 = 2  # adds genre / categoryName


class ReviewSnapshot(BaseModel):
    """Typed, defaulted view over an archived review_json document"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str = ""
    game_name: str = ""
    review_text: str = ""
    rating: float | None = None
    genre: str | None = None
    category_name: str | None = Field(default=None, alias="categoryName")
    tags: list[str] = Field(default_factory=list)
    positive_points: list[str] = Field(default_factory=list)
    negative_points: list[str] = Field(default_factory=list)
    visible: bool = True

    @field_validator("title", "game_name", "review_text", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("genre", "category_name", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> str | None:
        # Lists, objects and booleans are not names
        if v is None or isinstance(v, (bool, list, dict)):
            return None
        return str(v).strip() or None

    @field_validator("rating", mode="before")
    @classmethod
    def coerce_rating(cls, v: Any) -> float | None:
        if v is None or v == "" or isinstance(v, bool):
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @field_validator("tags", "positive_points", "negative_points", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [str(item) for item in v if item is not None]

    @field_validator("visible", mode="before")
    @classmethod
    def coerce_visible(cls, v: Any) -> bool:
        return v is not False

    @classmethod
    def from_json(cls, raw: dict[str, Any] | None) -> "ReviewSnapshot":
        return cls.model_validate(raw or {})

    @property
    def version(self) -> int:
        """Format version derived from which keys the document carries"""
        if "genre" in self.model_fields_set or "category_name" in self.model_fields_set:
            return SNAPSHOT_V2
        return SNAPSHOT_V1


class ArchivedReviewResponse(BaseModel):
    """Schema for an archived snapshot row"""

    id: uuid.UUID
    review_json: dict[str, Any]
    created_at: UTCDatetime

    model_config = {"from_attributes": True}


class ArchivedReviewUpdateResponse(ArchivedReviewResponse):
    """Schema for the result of editing a snapshot"""

    review: ReviewResponse | None = None
    game_action: str


class MaterializeResponse(BaseModel):
    """Schema for the result of materializing a snapshot"""

    review: ReviewResponse
    genre: GenreResponse | None = None
    materialized: str


class GameSummary(BaseModel):
    """Schema for one entry of the games summary"""

    id: uuid.UUID
    game_name: str
    rating: float | None = None
    genre: str | None = None
    visible: bool = True
