"""
Pydantic schemas for API responses and requests
"""

from app.schemas.archive import (
    ArchivedReviewResponse,
    ArchivedReviewUpdateResponse,
    GameSummary,
    MaterializeResponse,
    ReviewSnapshot,
)
from app.schemas.classification import (
    CategoryCreate,
    CategoryResponse,
    GenreAssignment,
    GenreCreate,
    GenreResponse,
)
from app.schemas.dashboard import CategoryStat, GenreStat, RatingGroup, RatingSample
from app.schemas.review import (
    DeleteResponse,
    ReviewCreate,
    ReviewGenreResponse,
    ReviewResponse,
    ReviewUpdate,
    TagsUpdate,
)
from app.schemas.wip_review import WipReviewCreate, WipReviewResponse

__all__ = [
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewGenreResponse",
    "TagsUpdate",
    "DeleteResponse",
    # Archive schemas
    "ReviewSnapshot",
    "ArchivedReviewResponse",
    "ArchivedReviewUpdateResponse",
    "MaterializeResponse",
    "GameSummary",
    # Classification schemas
    "CategoryCreate",
    "CategoryResponse",
    "GenreCreate",
    "GenreAssignment",
    "GenreResponse",
    # Dashboard schemas
    "RatingGroup",
    "RatingSample",
    "CategoryStat",
    "GenreStat",
    # WIP schemas
    "WipReviewCreate",
    "WipReviewResponse",
]
