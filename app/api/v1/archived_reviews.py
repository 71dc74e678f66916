"""Archived review API endpoints."""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.genre_cache import GenreListCache, get_genre_cache
from app.core.json_response import JSONAttachmentResponse
from app.schemas.archive import (
    ArchivedReviewResponse,
    ArchivedReviewUpdateResponse,
    MaterializeResponse,
)
from app.schemas.classification import GenreAssignment
from app.schemas.review import TagsUpdate
from app.services import archive

DOWNLOAD_FILENAME = "archived-reviews.json"

router = APIRouter(tags=["archived-reviews"])


@router.get("/archived-reviews", response_model=list[ArchivedReviewResponse])
async def list_archived_reviews(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ArchivedReviewResponse]:
    """List archived snapshots, newest first."""
    return await archive.list_archived_reviews(db)


@router.get("/archived-reviews/download", response_class=JSONAttachmentResponse)
@router.get("/raw-reviews/download", response_class=JSONAttachmentResponse)
async def download_archived_reviews(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JSONAttachmentResponse:
    """Download every snapshot's JSON document as one file."""
    snapshots = await archive.download_snapshots(db)
    return JSONAttachmentResponse(snapshots, filename=DOWNLOAD_FILENAME)


@router.get("/archived-reviews/game/{game_name}")
async def get_archived_review_for_game(
    game_name: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, Any]:
    """Newest snapshot naming the game, flattened with its id."""
    return await archive.get_archived_review_for_game(db, game_name)


@router.put("/archived-reviews/{archive_id}", response_model=ArchivedReviewUpdateResponse)
async def update_archived_review(
    archive_id: uuid.UUID,
    changes: Annotated[Any, Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> ArchivedReviewUpdateResponse:
    """Merge an edit into a snapshot and sync the linked review."""
    result = await archive.update_archived_review(db, archive_id, changes)
    genre_cache.invalidate()
    return result


@router.patch("/archived-reviews/{archive_id}/tags", response_model=ArchivedReviewUpdateResponse)
async def update_archived_tags(
    archive_id: uuid.UUID,
    body: TagsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> ArchivedReviewUpdateResponse:
    """Replace a snapshot's tags."""
    result = await archive.update_archived_tags(db, archive_id, body.tags)
    genre_cache.invalidate()
    return result


@router.post("/archived-reviews/{archive_id}/materialize", response_model=MaterializeResponse)
async def materialize_archived_review(
    archive_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
    body: GenreAssignment | None = None,
) -> MaterializeResponse:
    """Create or refresh the normalized review for a snapshot."""
    result = await archive.materialize_archived_review(db, archive_id, body)
    genre_cache.invalidate()
    return result
