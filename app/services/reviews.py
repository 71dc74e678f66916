"""
Review write path.

A submission produces a normalized `reviews` row and a JSON snapshot in
`archived_reviews` with the same id, inside one transaction: either both rows
(and the game they reference) are committed or nothing is.
"""

import uuid
from typing import Any

from sqlalchemy import desc, func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import DuplicateGamePolicy, settings
from app.core.database import atomic
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models.archived_review import ArchivedReviews
from app.models.category import Categories
from app.models.game import Games
from app.models.genre import Genres
from app.models.review import Reviews
from app.schemas.base import normalize_string_list
from app.schemas.classification import GenreAssignment, GenreResponse
from app.schemas.review import ReviewCreate, ReviewGenreResponse, ReviewResponse, ReviewUpdate
from app.services.classification import resolve_genre

logger = get_logger(__name__)


def _review_query():  # type: ignore[no-untyped-def]
    """Base query selecting reviews plus game, genre and category names."""
    return (
        select(
            Reviews,
            Games.game_name,  # type: ignore[call-overload]
            Genres.name.label("genre_name"),  # type: ignore[attr-defined]
            Categories.name.label("category_name"),  # type: ignore[attr-defined]
        )
        .join(Games, Reviews.game_id == Games.id)
        .outerjoin(Genres, Reviews.genre_id == Genres.id)
        .outerjoin(Categories, Genres.category_id == Categories.id)
    )


def _to_response(
    review: Reviews, game_name: str, genre_name: str | None, category_name: str | None
) -> ReviewResponse:
    """Convert a Reviews row + joined names into a ReviewResponse."""
    return ReviewResponse(
        id=review.id,
        game_id=review.game_id,
        game_name=game_name,
        title=review.title,
        review_text=review.review_text,
        rating=review.rating,
        # Normalized genre name wins over the legacy text column
        genre=genre_name or review.genre,
        genre_id=review.genre_id,
        category_name=category_name,
        positive_points=list(review.positive_points or []),
        negative_points=list(review.negative_points or []),
        tags=list(review.tags or []),
        created_at=review.created_at,
    )


async def list_reviews(db: AsyncSession) -> list[ReviewResponse]:
    """All normalized reviews, newest first."""
    result = await db.execute(
        _review_query().order_by(desc(Reviews.created_at))  # type: ignore[no-untyped-call]
    )
    return [_to_response(*row) for row in result.all()]


async def get_review(db: AsyncSession, review_id: uuid.UUID) -> ReviewResponse:
    """
    Load one review with its joined names.

    Raises:
        NotFoundError: If the review does not exist
    """
    result = await db.execute(
        _review_query()  # type: ignore[no-untyped-call]
        .where(Reviews.id == review_id)
        .execution_options(populate_existing=True)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("Review not found")
    return _to_response(*row)


async def lock_game_name(db: AsyncSession, game_name: str) -> None:
    """
    Serialize writers that resolve the same game name.

    PostgreSQL only: takes a transaction-scoped advisory lock keyed by the name,
    so two concurrent submissions/materializations of a new game cannot both
    create it. Released automatically at COMMIT or ROLLBACK.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    await db.execute(text("SELECT pg_advisory_xact_lock(hashtext(:name))"), {"name": game_name})


async def find_game(db: AsyncSession, game_name: str) -> Games | None:
    """Exact (case-sensitive) name lookup."""
    result = await db.execute(
        select(Games)
        .where(Games.game_name == game_name)
        .order_by(Games.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_or_create_game(db: AsyncSession, game_name: str) -> Games:
    """Find a game by exact name, creating it when absent."""
    game = await find_game(db, game_name)
    if game is None:
        game = Games(game_name=game_name)
        db.add(game)
        await db.flush()
        logger.info("game_created", game_id=str(game.id), game_name=game_name)
    return game


def _require_submission_fields(payload: ReviewCreate) -> None:
    """
    Raises:
        ValidationError: If title, game_name, review_text or rating is missing
    """
    missing = [
        name
        for name in ("title", "game_name", "review_text")
        if not getattr(payload, name)
    ]
    if payload.rating is None:
        missing.append("rating")
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def build_snapshot(payload: ReviewCreate, genre: GenreResponse | None) -> dict[str, Any]:
    """
    JSON document archived for a submission.

    Carries the submitted fields; when a genre was normalized, its display name
    and category name replace the submitted text.
    """
    snapshot: dict[str, Any] = {
        "title": payload.title,
        "game_name": payload.game_name,
        "review_text": payload.review_text,
        "rating": payload.rating,
        "positive_points": list(payload.positive_points),
        "negative_points": list(payload.negative_points),
        "tags": list(payload.tags),
    }
    if genre is not None:
        snapshot["genre"] = genre.name
        if genre.category_name:
            snapshot["categoryName"] = genre.category_name
    elif payload.genre:
        snapshot["genre"] = payload.genre
    return snapshot


async def _classify_submission(db: AsyncSession, payload: ReviewCreate) -> GenreResponse | None:
    if not payload.genre:
        return None
    return await resolve_genre(
        db, GenreAssignment(genre_name=payload.genre, category_name=payload.category_name)
    )


async def create_review(
    db: AsyncSession,
    payload: ReviewCreate,
    duplicate_policy: str | None = None,
) -> ReviewResponse:
    """
    Submit a review.

    Steps (one transaction):
    1. Look up the game by exact name; reject or reuse it per DUPLICATE_GAME_POLICY
    2. Create the game when absent
    3. Normalize the optional genre/category
    4. Insert the normalized review
    5. Archive the snapshot under the review's id

    Raises:
        ValidationError: If a required field is missing
        ConflictError: If the game exists and the policy is "reject"
        StorageError: If any write fails (nothing is committed)
    """
    _require_submission_fields(payload)
    policy = duplicate_policy or settings.DUPLICATE_GAME_POLICY
    assert payload.game_name is not None and payload.rating is not None

    async with atomic(db, "create_review"):
        await lock_game_name(db, payload.game_name)
        game = await find_game(db, payload.game_name)
        if game is not None and policy == DuplicateGamePolicy.REJECT:
            raise ConflictError(f'Game "{payload.game_name}" already exists.')
        if game is None:
            game = Games(game_name=payload.game_name)
            db.add(game)
            await db.flush()

        genre = await _classify_submission(db, payload)

        review = Reviews(
            game_id=game.id,
            title=payload.title,
            review_text=payload.review_text,
            rating=payload.rating,
            positive_points=list(payload.positive_points),
            negative_points=list(payload.negative_points),
            tags=list(payload.tags),
            genre=genre.name if genre else payload.genre,
            genre_id=genre.id if genre else None,
        )
        db.add(review)
        await db.flush()

        db.add(ArchivedReviews(id=review.id, review_json=build_snapshot(payload, genre)))
        await db.flush()
        review_id, game_id = review.id, game.id

    logger.info(
        "review_created",
        review_id=str(review_id),
        game_id=str(game_id),
        game_name=payload.game_name,
        genre=genre.name if genre else None,
    )
    return await get_review(db, review_id)


async def _merge_into_archive(
    db: AsyncSession, archive_id: uuid.UUID, fields: dict[str, Any]
) -> None:
    """Shallow-merge fields into a snapshot when one exists for the id."""
    archived = await db.get(ArchivedReviews, archive_id)
    if archived is not None:
        archived.review_json = {**(archived.review_json or {}), **fields}
        await db.flush()


async def update_review(
    db: AsyncSession, review_id: uuid.UUID, payload: ReviewUpdate
) -> ReviewResponse:
    """
    Replace a review's normalized fields.

    The game is re-resolved by name (found or created, never renamed) and the
    archive snapshot, if any, is merged with the same values.

    Raises:
        NotFoundError: If the review does not exist
        ValidationError: If a required field is missing
    """
    _require_submission_fields(payload)
    assert payload.game_name is not None

    async with atomic(db, "update_review"):
        review = await db.get(Reviews, review_id)
        if review is None:
            raise NotFoundError("Review not found")

        await lock_game_name(db, payload.game_name)
        game = await get_or_create_game(db, payload.game_name)
        genre = await _classify_submission(db, payload)

        review.game_id = game.id
        review.title = payload.title or ""
        review.review_text = payload.review_text or ""
        review.rating = payload.rating  # type: ignore[assignment]
        review.positive_points = list(payload.positive_points)
        review.negative_points = list(payload.negative_points)
        review.tags = list(payload.tags)
        review.genre = genre.name if genre else None
        review.genre_id = genre.id if genre else None
        await db.flush()

        fields = build_snapshot(payload, genre)
        # Full replace: a classification absent from the payload is cleared
        fields.setdefault("genre", None)
        fields.setdefault("categoryName", None)
        await _merge_into_archive(db, review.id, fields)
        game_id = game.id

    logger.info("review_updated", review_id=str(review_id), game_id=str(game_id))
    return await get_review(db, review_id)


async def delete_review(db: AsyncSession, review_id: uuid.UUID) -> None:
    """
    Delete a normalized review. Its archive snapshot is kept.

    Raises:
        NotFoundError: If the review does not exist
    """
    async with atomic(db, "delete_review"):
        review = await db.get(Reviews, review_id)
        if review is None:
            raise NotFoundError("Review not found")
        await db.delete(review)

    logger.info("review_deleted", review_id=str(review_id))


async def update_review_tags(db: AsyncSession, review_id: uuid.UUID, tags: Any) -> ReviewResponse:
    """
    Replace a review's tags; the snapshot's tags follow.

    Raises:
        ValidationError: If tags is not a list
        NotFoundError: If the review does not exist
    """
    if not isinstance(tags, list):
        raise ValidationError("Tags must be an array")
    cleaned = normalize_string_list(tags)

    async with atomic(db, "update_review_tags"):
        review = await db.get(Reviews, review_id)
        if review is None:
            raise NotFoundError("Review not found")
        review.tags = cleaned
        await db.flush()
        await _merge_into_archive(db, review_id, {"tags": cleaned})

    return await get_review(db, review_id)


async def set_review_genre(
    db: AsyncSession, review_id: uuid.UUID, assignment: GenreAssignment
) -> ReviewGenreResponse:
    """
    Classify a normalized review.

    Runs the normalizer and links the resulting genre. The archive snapshot gets
    the genre's display name and category name.

    Raises:
        NotFoundError: If the review (or a supplied genre/category id) does not exist
        ValidationError: If neither genre id nor genre name was supplied
    """
    async with atomic(db, "set_review_genre"):
        review = await db.get(Reviews, review_id)
        if review is None:
            raise NotFoundError("Review not found")

        genre = await resolve_genre(db, assignment)
        review.genre_id = genre.id
        review.genre = genre.name
        await db.flush()

        write_back: dict[str, Any] = {"genre": genre.name}
        if genre.category_name:
            write_back["categoryName"] = genre.category_name
        await _merge_into_archive(db, review_id, write_back)

    logger.info("review_genre_set", review_id=str(review_id), genre_id=str(genre.id))
    return ReviewGenreResponse(review=await get_review(db, review_id), genre=genre)


async def count_reviews_for_game(db: AsyncSession, game_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(Reviews).where(Reviews.game_id == game_id)
    )
    return result.scalar() or 0
