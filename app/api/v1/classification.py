"""Category and genre API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import GenreListParams
from app.core.database import get_db
from app.core.genre_cache import GenreListCache, get_genre_cache
from app.schemas.classification import (
    CategoryCreate,
    CategoryResponse,
    GenreCreate,
    GenreResponse,
)
from app.services import classification

router = APIRouter(tags=["classification"])


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CategoryResponse]:
    """List categories ordered by name."""
    categories = await classification.list_categories(db)
    return [CategoryResponse.model_validate(category) for category in categories]


@router.post(
    "/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED
)
async def create_category(
    body: CategoryCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> CategoryResponse:
    """Create a category, or re-case the existing one with the same name."""
    category = await classification.create_category(db, body.name)
    genre_cache.invalidate()
    return CategoryResponse.model_validate(category)


@router.get("/genres", response_model=list[GenreResponse])
async def list_genres(
    params: Annotated[GenreListParams, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> list[dict[str, Any]]:
    """List genres with their category names, served from the genre cache."""
    genres = None if params.force else genre_cache.get()
    if genres is None:
        genres = [
            genre.model_dump(mode="json", by_alias=True)
            for genre in await classification.list_genres(db)
        ]
        genre_cache.set(genres)

    if params.search and params.search.strip():
        needle = params.search.strip().lower()
        return [genre for genre in genres if needle in genre["name"].lower()]
    return genres


@router.post("/genres", response_model=GenreResponse, status_code=status.HTTP_201_CREATED)
async def create_genre(
    body: GenreCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    genre_cache: Annotated[GenreListCache, Depends(get_genre_cache)],
) -> GenreResponse:
    """Create a genre (or re-case an existing one), optionally inside a category."""
    genre = await classification.create_genre(
        db, body.name, category_id=body.category_id, category_name=body.category_name
    )
    genre_cache.invalidate()
    return genre
