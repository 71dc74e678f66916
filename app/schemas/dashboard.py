"""Pydantic schemas for dashboard aggregations"""

import uuid

from pydantic import BaseModel, Field


class RatingSample(BaseModel):
    """A snapshot shown as an example inside a rating bucket"""

    id: uuid.UUID
    title: str
    game_name: str
    rating: float
    genre: str | None = None


class RatingGroup(BaseModel):
    """All snapshots sharing one integer rating"""

    rating: int
    count: int
    reviews: list[RatingSample] = Field(default_factory=list)


class GenreStat(BaseModel):
    """Review statistics for one genre"""

    genre_id: uuid.UUID
    genre_name: str
    category_id: uuid.UUID
    review_count: int
    avg_rating: float | None = None
    sample_game: str | None = None


class CategoryStat(BaseModel):
    """Review statistics for one category with its genres"""

    category_id: uuid.UUID
    category_name: str
    review_count: int
    avg_rating: float | None = None
    sample_game: str | None = None
    genres: list[GenreStat] = Field(default_factory=list)
