"""Review API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.genre_cache import GenreListCache, get_genre_cache
from app.schemas.classification import GenreAssignment
from app.schemas.dashboard import RatingGroup
from app.schemas.review import (
    DeleteResponse,
    ReviewCreate,
    ReviewGenreResponse,
    ReviewResponse,
    ReviewUpdate,
    TagsUpdate,
)
from app.services import dashboards, reviews

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/", response_model=list[ReviewResponse], include_in_schema=False)
@router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ReviewResponse]:
    """List normalized reviews, newest first."""
    return await reviews.list_reviews(db)


@router.get("/by-rating", response_model=list[RatingGroup])
async def reviews_by_rating(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[RatingGroup]:
    """Archived reviews grouped by integer rating, with samples."""
    return await dashboards.reviews_by_rating(db)


@router.post(
    "/",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> ReviewResponse:
    """Submit a review; the normalized row and its archive snapshot are written together."""
    review = await reviews.create_review(db, body)
    if body.genre:
        genre_cache.invalidate()
    return review


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: uuid.UUID,
    body: ReviewUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> ReviewResponse:
    """Replace a review's fields."""
    review = await reviews.update_review(db, review_id, body)
    if body.genre:
        genre_cache.invalidate()
    return review


@router.delete("/{review_id}", response_model=DeleteResponse)
async def delete_review(
    review_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DeleteResponse:
    """Delete a normalized review. The archived snapshot is kept."""
    await reviews.delete_review(db, review_id)
    return DeleteResponse()


@router.patch("/{review_id}/tags", response_model=ReviewResponse)
async def update_review_tags(
    review_id: uuid.UUID,
    body: TagsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewResponse:
    """Replace a review's tags."""
    return await reviews.update_review_tags(db, review_id, body.tags)


@router.patch("/{review_id}/genre", response_model=ReviewGenreResponse)
async def set_review_genre(
    review_id: uuid.UUID,
    body: GenreAssignment,
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> ReviewGenreResponse:
    """Assign a genre (and optionally its category) to a review."""
    result = await reviews.set_review_genre(db, review_id, body)
    genre_cache.invalidate()
    return result
