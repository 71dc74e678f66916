"""Tests for genre/category normalization."""

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.models.category import Categories
from app.models.genre import Genres
from app.schemas.classification import GenreAssignment
from app.services.classification import (
    create_category,
    create_genre,
    list_genres,
    resolve_genre,
    upsert_category,
    upsert_genre,
)


async def _count(db: AsyncSession, model) -> int:  # type: ignore[no-untyped-def]
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar() or 0


@pytest.mark.integration
class TestCategoryUpsert:
    async def test_same_name_any_casing_yields_same_id(self, db_session: AsyncSession):
        """Upserting "Action" then "ACTION" returns one row carrying the latest casing."""
        first = await create_category(db_session, "Action")
        second = await create_category(db_session, "ACTION")

        assert second.id == first.id
        assert second.name == "ACTION"
        assert await _count(db_session, Categories) == 1

    async def test_name_is_trimmed(self, db_session: AsyncSession):
        category = await upsert_category(db_session, "  Strategy  ")
        assert category.name == "Strategy"

    async def test_blank_name_rejected(self, db_session: AsyncSession):
        with pytest.raises(ValidationError):
            await upsert_category(db_session, "   ")


@pytest.mark.integration
class TestGenreUpsert:
    async def test_category_link_kept_when_none_supplied(self, db_session: AsyncSession):
        """Re-upserting "RPG" without a category keeps its "Fantasy" link."""
        first = await create_genre(db_session, "RPG", category_name="Fantasy")
        again = await create_genre(db_session, "rpg")

        assert again.id == first.id
        assert again.category_id == first.category_id
        assert again.category_name == "Fantasy"
        assert again.name == "rpg"

    async def test_new_category_replaces_link(self, db_session: AsyncSession):
        await create_genre(db_session, "Metroidvania", category_name="Platformer")
        moved = await create_genre(db_session, "Metroidvania", category_name="Action")

        assert moved.category_name == "Action"
        assert await _count(db_session, Genres) == 1

    async def test_upsert_without_category_has_none(self, db_session: AsyncSession):
        genre = await upsert_genre(db_session, "Puzzle")
        assert genre.category_id is None

    async def test_blank_name_rejected(self, db_session: AsyncSession):
        with pytest.raises(ValidationError):
            await upsert_genre(db_session, "")


@pytest.mark.integration
class TestResolveGenre:
    async def test_requires_name_or_id(self, db_session: AsyncSession):
        with pytest.raises(ValidationError):
            await resolve_genre(db_session, GenreAssignment(genre_name="  ", category_name="Action"))

    async def test_blank_category_name_means_no_category(self, db_session: AsyncSession):
        genre = await resolve_genre(db_session, GenreAssignment(genre_name="Shooter", category_name=" "))
        assert genre.category_id is None
        assert await _count(db_session, Categories) == 0

    async def test_by_id_with_category_id(self, db_session: AsyncSession):
        genre = await create_genre(db_session, "Shooter")
        category = await create_category(db_session, "Action")

        resolved = await resolve_genre(
            db_session, GenreAssignment(genre_id=genre.id, category_id=category.id)
        )
        assert resolved.id == genre.id
        assert resolved.category_name == "Action"

    async def test_unknown_genre_id(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await resolve_genre(db_session, GenreAssignment(genre_id=uuid.uuid4()))

    async def test_unknown_category_id(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await resolve_genre(
                db_session, GenreAssignment(genre_name="Shooter", category_id=uuid.uuid4())
            )


@pytest.mark.integration
async def test_list_genres_includes_category_names(db_session: AsyncSession):
    await create_genre(db_session, "Shooter", category_name="Action")
    await create_genre(db_session, "Puzzle")

    genres = await list_genres(db_session)

    assert [(g.name, g.category_name) for g in genres] == [("Puzzle", None), ("Shooter", "Action")]
