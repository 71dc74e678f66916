"""
Archive reconciliation.

archived_reviews keeps the JSON snapshot of every submission; reviews keeps the
normalized rows. These transaction scripts keep the two in step:

- materialize_archived_review: create or refresh the normalized row for a
  snapshot and write the resolved classification back into the JSON
- update_archived_review: merge an edit into a snapshot and propagate it to the
  linked normalized review, renaming or relinking its game safely

Each runs as one transaction; the JSON write-back is part of it, so a failure
there rolls back the normalized write as well.
"""

import uuid
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import GameLinkAction, MaterializeOutcome, Visibility
from app.core.database import atomic
from app.core.errors import CatalogError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models.archived_review import ArchivedReviews
from app.models.game import Games
from app.models.review import Reviews
from app.schemas.archive import (
    ArchivedReviewResponse,
    ArchivedReviewUpdateResponse,
    GameSummary,
    MaterializeResponse,
    ReviewSnapshot,
)
from app.schemas.base import normalize_string_list
from app.schemas.classification import GenreAssignment, GenreResponse
from app.services.classification import resolve_genre
from app.services.reviews import (
    count_reviews_for_game,
    find_game,
    get_or_create_game,
    get_review,
    lock_game_name,
)

logger = get_logger(__name__)


async def _load_archive(db: AsyncSession, archive_id: uuid.UUID) -> ArchivedReviews:
    """
    Raises:
        NotFoundError: If the snapshot does not exist
    """
    archived = await db.get(ArchivedReviews, archive_id, populate_existing=True)
    if archived is None:
        raise NotFoundError("Archived review not found")
    return archived


def _to_response(archived: ArchivedReviews) -> ArchivedReviewResponse:
    return ArchivedReviewResponse(
        id=archived.id,
        review_json=dict(archived.review_json or {}),
        created_at=archived.created_at,
    )


async def list_archived_reviews(db: AsyncSession) -> list[ArchivedReviewResponse]:
    """All snapshots, newest first."""
    result = await db.execute(
        select(ArchivedReviews).order_by(desc(ArchivedReviews.created_at))  # type: ignore[arg-type]
    )
    return [_to_response(archived) for archived in result.scalars().all()]


async def get_archived_review(db: AsyncSession, archive_id: uuid.UUID) -> ArchivedReviewResponse:
    return _to_response(await _load_archive(db, archive_id))


async def get_archived_review_for_game(db: AsyncSession, game_name: str) -> dict[str, Any]:
    """
    Newest snapshot naming the game, flattened as {id, ...review_json}.

    Raises:
        NotFoundError: If no snapshot names the game
    """
    result = await db.execute(
        select(ArchivedReviews).order_by(desc(ArchivedReviews.created_at))  # type: ignore[arg-type]
    )
    for archived in result.scalars():
        if ReviewSnapshot.from_json(archived.review_json).game_name == game_name.strip():
            return {**(archived.review_json or {}), "id": str(archived.id)}
    raise NotFoundError(f'No archived review for "{game_name}"')


async def games_summary(db: AsyncSession, visibility: str = Visibility.ALL) -> list[GameSummary]:
    """
    One entry per snapshot with its game name, rating, genre and visibility flag.

    Snapshots without a game name are skipped.
    """
    result = await db.execute(
        select(ArchivedReviews).order_by(desc(ArchivedReviews.created_at))  # type: ignore[arg-type]
    )
    summaries: list[GameSummary] = []
    for archived in result.scalars():
        snapshot = ReviewSnapshot.from_json(archived.review_json)
        if not snapshot.game_name:
            continue
        if visibility == Visibility.VISIBLE and not snapshot.visible:
            continue
        if visibility == Visibility.HIDDEN and snapshot.visible:
            continue
        summaries.append(
            GameSummary(
                id=archived.id,
                game_name=snapshot.game_name,
                rating=snapshot.rating,
                genre=snapshot.genre,
                visible=snapshot.visible,
            )
        )
    return summaries


async def _find_target_review(
    db: AsyncSession, archive_id: uuid.UUID, game: Games | None
) -> Reviews | None:
    """
    The normalized review a snapshot should update, if any.

    The review already linked to the snapshot's game is the target; should
    several reviews share the game, the one sharing the snapshot's id (else the
    oldest) wins. Without a game match, a review that already shares the
    snapshot's id is the target.
    """
    if game is not None:
        result = await db.execute(
            select(Reviews)
            .where(Reviews.game_id == game.id)
            .order_by(Reviews.created_at)  # type: ignore[arg-type]
        )
        candidates = list(result.scalars().all())
        if candidates:
            return next((r for r in candidates if r.id == archive_id), candidates[0])
    return await db.get(Reviews, archive_id)


def _apply_snapshot(review: Reviews, snapshot: ReviewSnapshot) -> None:
    """Copy the snapshot's review fields onto a normalized row."""
    review.title = snapshot.title
    review.review_text = snapshot.review_text
    if snapshot.rating is not None:
        review.rating = snapshot.rating
    review.positive_points = list(snapshot.positive_points)
    review.negative_points = list(snapshot.negative_points)
    review.tags = normalize_string_list(snapshot.tags)


def _classification_write_back(game_name: str | None, genre: GenreResponse | None) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if game_name:
        fields["game_name"] = game_name
    if genre is not None:
        fields["genre"] = genre.name
        if genre.category_name:
            fields["categoryName"] = genre.category_name
    return fields


async def materialize_archived_review(
    db: AsyncSession,
    archive_id: uuid.UUID,
    assignment: GenreAssignment | None = None,
) -> MaterializeResponse:
    """
    Create or refresh the normalized review for an archived snapshot.

    Steps (one transaction):
    1. Load the snapshot
    2. Resolve/create the game named by the snapshot (skipped when blank)
    3. Resolve/create the genre and category, when any were supplied
    4. Update the review already linked to that game ("updated"), or insert one
       that reuses the snapshot's id ("created")
    5. Merge the resolved game name, genre and category names into the JSON

    Raises:
        NotFoundError: If the snapshot (or a supplied genre/category id) does not exist
        ValidationError: If a new review would lack a game or a rating
        StorageError: If any write fails (nothing is committed)
    """
    assignment = assignment or GenreAssignment()

    async with atomic(db, "materialize_archived_review"):
        archived = await _load_archive(db, archive_id)
        snapshot = ReviewSnapshot.from_json(archived.review_json)

        game: Games | None = None
        if snapshot.game_name:
            await lock_game_name(db, snapshot.game_name)
            game = await get_or_create_game(db, snapshot.game_name)

        genre: GenreResponse | None = None
        if not assignment.is_empty:
            genre = await resolve_genre(db, assignment)

        review = await _find_target_review(db, archive_id, game)
        if review is not None:
            outcome = MaterializeOutcome.UPDATED
            _apply_snapshot(review, snapshot)
            if game is not None:
                review.game_id = game.id
        else:
            if game is None:
                raise ValidationError("Archived review has no game_name")
            if snapshot.rating is None:
                raise ValidationError("Archived review has no rating")
            outcome = MaterializeOutcome.CREATED
            review = Reviews(
                id=archive_id,
                game_id=game.id,
                title=snapshot.title,
                review_text=snapshot.review_text,
                rating=snapshot.rating,
                genre=snapshot.genre,
            )
            _apply_snapshot(review, snapshot)
            db.add(review)

        if genre is not None:
            review.genre_id = genre.id
            review.genre = genre.name
        await db.flush()

        write_back = _classification_write_back(game.game_name if game else None, genre)
        if write_back:
            archived.review_json = {**(archived.review_json or {}), **write_back}
            await db.flush()

        review_id = review.id

    logger.info(
        "archive_materialized",
        archive_id=str(archive_id),
        review_id=str(review_id),
        outcome=outcome,
        genre_id=str(genre.id) if genre else None,
    )
    return MaterializeResponse(
        review=await get_review(db, review_id),
        genre=genre,
        materialized=outcome,
    )


async def _relink_game(db: AsyncSession, review: Reviews, target_name: str) -> str:
    """
    Point a review at the game named target_name.

    - A game with that name exists: link to it
    - The current game is referenced by this review only: rename it in place
    - Otherwise: create a new game and relink, leaving the shared game untouched
    """
    current = await db.get(Games, review.game_id)
    if current is not None and current.game_name == target_name:
        return GameLinkAction.UNCHANGED

    await lock_game_name(db, target_name)
    existing = await find_game(db, target_name)
    if existing is not None:
        review.game_id = existing.id
        logger.info("game_relinked", review_id=str(review.id), game_id=str(existing.id))
        return GameLinkAction.LINKED

    if current is not None and await count_reviews_for_game(db, current.id) == 1:
        old_name = current.game_name
        current.game_name = target_name
        logger.info(
            "game_renamed", game_id=str(current.id), old_name=old_name, new_name=target_name
        )
        return GameLinkAction.RENAMED

    game = Games(game_name=target_name)
    db.add(game)
    await db.flush()
    review.game_id = game.id
    logger.info("game_created", game_id=str(game.id), game_name=target_name, review_id=str(review.id))
    return GameLinkAction.CREATED


async def update_archived_review(
    db: AsyncSession, archive_id: uuid.UUID, changes: dict[str, Any]
) -> ArchivedReviewUpdateResponse:
    """
    Merge an edit into a snapshot and propagate it to the linked review.

    The edit is a shallow merge: keys in `changes` overwrite, absent keys keep
    their stored values. When a normalized review shares the snapshot's id, its
    title, text, rating, points, tags and genre follow the merged JSON and its
    game is relinked or renamed to match game_name.

    Raises:
        ValidationError: If changes is not a JSON object
        NotFoundError: If the snapshot does not exist
    """
    if not isinstance(changes, dict):
        raise ValidationError("Archived review update must be a JSON object")

    game_action = GameLinkAction.UNCHANGED
    async with atomic(db, "update_archived_review"):
        archived = await _load_archive(db, archive_id)
        merged = {**(archived.review_json or {}), **changes}
        archived.review_json = merged
        await db.flush()

        snapshot = ReviewSnapshot.from_json(merged)
        review = await db.get(Reviews, archive_id, populate_existing=True)
        if review is not None:
            _apply_snapshot(review, snapshot)

            # The genre link is only touched by edits that name a classification
            if "genre" in changes or "categoryName" in changes:
                if snapshot.genre:
                    genre = await resolve_genre(
                        db,
                        GenreAssignment(
                            genre_name=snapshot.genre, category_name=snapshot.category_name
                        ),
                    )
                    review.genre = genre.name
                    review.genre_id = genre.id
                elif "genre" in changes:
                    # Explicitly cleared in this edit
                    review.genre = None
                    review.genre_id = None

            if snapshot.game_name:
                game_action = await _relink_game(db, review, snapshot.game_name)
            await db.flush()

        review_id = review.id if review is not None else None

    logger.info(
        "archive_updated",
        archive_id=str(archive_id),
        review_id=str(review_id) if review_id else None,
        game_action=game_action,
    )
    archived = await _load_archive(db, archive_id)
    return ArchivedReviewUpdateResponse(
        id=archived.id,
        review_json=dict(archived.review_json or {}),
        created_at=archived.created_at,
        review=await get_review(db, review_id) if review_id else None,
        game_action=game_action,
    )


async def update_archived_tags(
    db: AsyncSession, archive_id: uuid.UUID, tags: Any
) -> ArchivedReviewUpdateResponse:
    """
    Replace a snapshot's tags, propagating like any other archive edit.

    Raises:
        ValidationError: If tags is not a list
        NotFoundError: If the snapshot does not exist
    """
    if not isinstance(tags, list):
        raise ValidationError("Tags must be an array")
    return await update_archived_review(db, archive_id, {"tags": normalize_string_list(tags)})


async def download_snapshots(db: AsyncSession) -> list[dict[str, Any]]:
    """Every snapshot's JSON document, oldest first (export format)."""
    result = await db.execute(
        select(ArchivedReviews).order_by(ArchivedReviews.created_at)  # type: ignore[arg-type]
    )
    return [dict(archived.review_json or {}) for archived in result.scalars().all()]


async def backfill_snapshot_genres(db: AsyncSession, dry_run: bool = False) -> dict[str, int]:
    """
    Normalize the genre of every snapshot that names one.

    For each snapshot with a genre: upsert the genre (and its categoryName, if
    present) and link the review sharing the snapshot's id, when one exists.
    Each snapshot is its own transaction, so one bad row does not undo the rest.

    Returns:
        Counts of snapshots scanned, genres resolved, reviews linked and failures
    """
    result = await db.execute(
        select(ArchivedReviews.id, ArchivedReviews.review_json).order_by(  # type: ignore[call-overload]
            ArchivedReviews.created_at
        )
    )
    rows = result.all()
    stats = {"scanned": len(rows), "resolved": 0, "linked": 0, "failed": 0}

    for archive_id, review_json in rows:
        snapshot = ReviewSnapshot.from_json(review_json)
        genre_name = (snapshot.genre or "").strip()
        if not genre_name:
            continue
        if dry_run:
            stats["resolved"] += 1
            continue
        try:
            async with atomic(db, "backfill_snapshot_genre"):
                genre = await resolve_genre(
                    db,
                    GenreAssignment(genre_name=genre_name, category_name=snapshot.category_name),
                )
                review = await db.get(Reviews, archive_id)
                if review is not None and review.genre_id != genre.id:
                    review.genre_id = genre.id
                    review.genre = genre.name
                    await db.flush()
                    stats["linked"] += 1
            stats["resolved"] += 1
        except CatalogError as e:
            stats["failed"] += 1
            logger.warning("backfill_snapshot_failed", archive_id=str(archive_id), error=e.message)

    logger.info("genre_backfill_finished", dry_run=dry_run, **stats)
    return stats
