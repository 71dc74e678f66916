"""Dashboard and games summary API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import VisibilityParams
from app.core.database import get_db
from app.schemas.archive import GameSummary
from app.schemas.dashboard import CategoryStat, RatingGroup
from app.services import archive, dashboards

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/categories", response_model=list[CategoryStat])
async def category_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CategoryStat]:
    """Review counts and average ratings per category, with per-genre breakdowns."""
    return await dashboards.reviews_by_category(db)


@router.get("/dashboard/ratings", response_model=list[RatingGroup])
async def rating_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[RatingGroup]:
    """Archived reviews grouped by integer rating."""
    return await dashboards.reviews_by_rating(db)


@router.get("/games-summary", response_model=list[GameSummary])
async def games_summary(
    params: Annotated[VisibilityParams, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[GameSummary]:
    """One entry per archived review: game name, rating, genre and visibility."""
    return await archive.games_summary(db, params.visibility)
