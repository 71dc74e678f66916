"""WIP review note API endpoints."""

import uuid
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import atomic, get_db
from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.models.wip_review import WipReviews
from app.schemas.review import DeleteResponse
from app.schemas.wip_review import WipReviewCreate, WipReviewResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/wip-reviews", tags=["wip-reviews"])


def _to_response(wip: WipReviews) -> WipReviewResponse:
    """Convert a WipReviews row into a WipReviewResponse."""
    return WipReviewResponse(
        id=wip.id,
        game_name=wip.game_name,
        remarks=wip.remarks,
        created_at=wip.created_at,
        updated_at=wip.updated_at,
    )


async def _get_wip(db: AsyncSession, wip_id: uuid.UUID) -> WipReviews:
    wip = await db.get(WipReviews, wip_id)
    if wip is None:
        raise NotFoundError("WIP review not found")
    return wip


@router.get("/", response_model=list[WipReviewResponse], include_in_schema=False)
@router.get("", response_model=list[WipReviewResponse])
async def list_wip_reviews(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[WipReviewResponse]:
    """List WIP notes, most recently updated first."""
    result = await db.execute(
        select(WipReviews).order_by(desc(WipReviews.updated_at))  # type: ignore[arg-type]
    )
    return [_to_response(wip) for wip in result.scalars().all()]


@router.post(
    "/",
    response_model=WipReviewResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post("", response_model=WipReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_wip_review(
    body: WipReviewCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WipReviewResponse:
    """Create a WIP note."""
    wip = WipReviews(game_name=body.game_name, remarks=body.remarks)
    async with atomic(db, "create_wip_review"):
        db.add(wip)
    logger.info("wip_review_created", wip_id=str(wip.id), game_name=wip.game_name)
    return _to_response(wip)


@router.put("/{wip_id}", response_model=WipReviewResponse)
async def update_wip_review(
    wip_id: uuid.UUID,
    body: WipReviewCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WipReviewResponse:
    """Replace a WIP note's game name and remarks."""
    async with atomic(db, "update_wip_review"):
        wip = await _get_wip(db, wip_id)
        wip.game_name = body.game_name
        wip.remarks = body.remarks
        wip.updated_at = datetime.now(UTC)
    return _to_response(wip)


@router.delete("/{wip_id}", response_model=DeleteResponse)
async def delete_wip_review(
    wip_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DeleteResponse:
    """Delete a WIP note."""
    async with atomic(db, "delete_wip_review"):
        wip = await _get_wip(db, wip_id)
        await db.delete(wip)
    logger.info("wip_review_deleted", wip_id=str(wip_id))
    return DeleteResponse()
