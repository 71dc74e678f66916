"""
Genre/category normalization.

Turns free-text genre and category names (or existing ids) into stable foreign
keys, creating rows as needed. Names are unique case-insensitively: an upsert
for "action" hits the existing "Action" row and re-writes its casing, so the
last writer's casing wins. A genre's category link is only replaced when a
category is supplied (COALESCE(new, existing)).

The resolve/upsert helpers do not commit; callers run them inside atomic().
create_category and create_genre are the standalone transactions behind the
classification endpoints.
"""

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import atomic
from app.core.errors import NotFoundError, StorageError, ValidationError
from app.core.logging import get_logger
from app.models.category import Categories
from app.models.genre import Genres
from app.schemas.classification import GenreAssignment, GenreResponse

logger = get_logger(__name__)


def _insert_for(db: AsyncSession) -> Any:
    """Dialect-specific INSERT construct supporting ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise StorageError(f"Upsert is not supported on the {dialect} dialect")


async def find_category_by_name(db: AsyncSession, name: str) -> Categories | None:
    result = await db.execute(
        select(Categories)
        .where(func.lower(Categories.name) == name.lower())
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_genre_by_name(db: AsyncSession, name: str) -> Genres | None:
    result = await db.execute(
        select(Genres)
        .where(func.lower(Genres.name) == name.lower())
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def upsert_category(db: AsyncSession, name: str) -> Categories:
    """
    Insert a category, or re-case the existing one with the same name.

    Raises:
        ValidationError: If the name is blank
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")

    insert = _insert_for(db)
    stmt = insert(Categories).values(id=uuid.uuid4(), name=name)
    stmt = stmt.on_conflict_do_update(
        index_elements=[func.lower(Categories.name)],
        set_={"name": stmt.excluded.name},
    )
    await db.execute(stmt)

    category = await find_category_by_name(db, name)
    assert category is not None  # the upsert above guarantees the row
    logger.debug("category_upserted", category_id=str(category.id), name=category.name)
    return category


async def upsert_genre(
    db: AsyncSession, name: str, category_id: uuid.UUID | None = None
) -> Genres:
    """
    Insert a genre, or re-case the existing one with the same name.

    The category link is set when category_id is given and preserved otherwise.

    Raises:
        ValidationError: If the name is blank
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Genre name is required")

    insert = _insert_for(db)
    stmt = insert(Genres).values(id=uuid.uuid4(), name=name, category_id=category_id)
    stmt = stmt.on_conflict_do_update(
        index_elements=[func.lower(Genres.name)],
        set_={
            "name": stmt.excluded.name,
            "category_id": func.coalesce(stmt.excluded.category_id, Genres.category_id),
        },
    )
    await db.execute(stmt)

    genre = await find_genre_by_name(db, name)
    assert genre is not None  # the upsert above guarantees the row
    logger.debug(
        "genre_upserted",
        genre_id=str(genre.id),
        name=genre.name,
        category_id=str(genre.category_id) if genre.category_id else None,
    )
    return genre


async def _category_name(db: AsyncSession, category_id: uuid.UUID | None) -> str | None:
    if category_id is None:
        return None
    result = await db.execute(
        select(Categories.name).where(Categories.id == category_id)  # type: ignore[call-overload]
    )
    return result.scalar_one_or_none()


async def to_genre_response(db: AsyncSession, genre: Genres) -> GenreResponse:
    """Build a GenreResponse, resolving the linked category's name."""
    return GenreResponse(
        id=genre.id,
        name=genre.name,
        category_id=genre.category_id,
        category_name=await _category_name(db, genre.category_id),
    )


async def resolve_category_id(
    db: AsyncSession,
    category_id: uuid.UUID | None = None,
    category_name: str | None = None,
) -> uuid.UUID | None:
    """
    Resolve an optional category reference to an id.

    An explicit id wins over a name. A blank name means "no category".

    Raises:
        NotFoundError: If category_id does not exist
    """
    if category_id is not None:
        category = await db.get(Categories, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category.id
    if category_name and category_name.strip():
        return (await upsert_category(db, category_name)).id
    return None


async def resolve_genre(db: AsyncSession, assignment: GenreAssignment) -> GenreResponse:
    """
    Find or create the genre (and category) described by an assignment.

    Steps:
    1. Validate that a genre id or a non-blank genre name was given
    2. Upsert the category by name unless an id was supplied
    3. Upsert the genre by name (or load it by id), linking the category if one
       was resolved and otherwise keeping the existing link
    4. Re-read the genre and its category's name

    Raises:
        ValidationError: If neither genre id nor genre name was supplied
        NotFoundError: If a supplied genre or category id does not exist
    """
    genre_name = (assignment.genre_name or "").strip()
    if assignment.genre_id is None and not genre_name:
        raise ValidationError("Genre name or id is required")

    final_category_id = await resolve_category_id(
        db, assignment.category_id, assignment.category_name
    )

    if assignment.genre_id is not None:
        genre = await db.get(Genres, assignment.genre_id)
        if genre is None:
            raise NotFoundError("Genre not found")
        if final_category_id is not None and genre.category_id != final_category_id:
            genre.category_id = final_category_id
            await db.flush()
    else:
        genre = await upsert_genre(db, genre_name, final_category_id)

    return await to_genre_response(db, genre)


async def list_genres(db: AsyncSession) -> list[GenreResponse]:
    """All genres ordered by name, each with its category's name."""
    result = await db.execute(
        select(Genres, Categories.name)  # type: ignore[call-overload]
        .outerjoin(Categories, Genres.category_id == Categories.id)
        .order_by(func.lower(Genres.name))
    )
    return [
        GenreResponse(
            id=genre.id,
            name=genre.name,
            category_id=genre.category_id,
            category_name=category_name,
        )
        for genre, category_name in result.all()
    ]


async def list_categories(db: AsyncSession) -> list[Categories]:
    result = await db.execute(select(Categories).order_by(func.lower(Categories.name)))
    return list(result.scalars().all())


async def create_category(db: AsyncSession, name: str | None) -> Categories:
    """
    Upsert a category as its own transaction.

    Raises:
        ValidationError: If the name is blank
    """
    async with atomic(db, "create_category"):
        category = await upsert_category(db, name or "")
        category_id, category_name = category.id, category.name
    logger.info("category_saved", category_id=str(category_id), name=category_name)
    return category


async def create_genre(
    db: AsyncSession,
    name: str | None,
    category_id: uuid.UUID | None = None,
    category_name: str | None = None,
) -> GenreResponse:
    """
    Upsert a genre, optionally inside a category, as its own transaction.

    Raises:
        ValidationError: If the name is blank
        NotFoundError: If category_id does not exist
    """
    async with atomic(db, "create_genre"):
        genre = await resolve_genre(
            db,
            GenreAssignment(
                genre_name=name, category_id=category_id, category_name=category_name
            ),
        )
    logger.info("genre_saved", genre_id=str(genre.id), name=genre.name)
    return genre
