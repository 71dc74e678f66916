"""
Dashboard aggregations over archived snapshots.

Read-only. Values are pulled out of review_json with the JSON accessors of the
column type, so the same queries run on PostgreSQL (->>) and SQLite
(json_extract). Grouping happens over a subquery of extracted values so GROUP BY
never repeats a parameterized JSON path.
"""

import uuid
from collections import defaultdict

from sqlalchemy import Integer, cast, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.archived_review import ArchivedReviews
from app.models.category import Categories
from app.models.genre import Genres
from app.schemas.dashboard import CategoryStat, GenreStat, RatingGroup, RatingSample


def _snapshots():  # type: ignore[no-untyped-def]
    """Subquery of snapshot id, created_at and the extracted review fields."""
    doc = ArchivedReviews.review_json
    return select(
        ArchivedReviews.id.label("id"),  # type: ignore[attr-defined]
        ArchivedReviews.created_at.label("created_at"),  # type: ignore[attr-defined]
        doc["rating"].as_float().label("rating"),  # type: ignore[index]
        doc["title"].as_string().label("title"),  # type: ignore[index]
        doc["game_name"].as_string().label("game_name"),  # type: ignore[index]
        doc["genre"].as_string().label("genre"),  # type: ignore[index]
    ).subquery("snapshots")


async def reviews_by_rating(db: AsyncSession, sample_size: int | None = None) -> list[RatingGroup]:
    """
    Group snapshots by integer rating, highest first.

    Each bucket carries its count and up to sample_size of its newest snapshots.
    Snapshots without a rating are excluded.
    """
    sample_size = sample_size or settings.RATING_SAMPLE_SIZE
    snapshots = _snapshots()
    bucket = cast(snapshots.c.rating, Integer)

    counts_result = await db.execute(
        select(bucket.label("rating"), func.count().label("count"))
        .where(snapshots.c.rating.is_not(None))
        .group_by(bucket)
        .order_by(desc(bucket))
    )
    groups = [
        RatingGroup(rating=rating, count=count)
        for rating, count in counts_result.all()
        if rating is not None
    ]
    if not groups:
        return []

    samples_result = await db.execute(
        select(
            snapshots.c.id,
            bucket,
            snapshots.c.title,
            snapshots.c.game_name,
            snapshots.c.rating,
            snapshots.c.genre,
        )
        .where(snapshots.c.rating.is_not(None))
        .order_by(desc(snapshots.c.created_at))
    )
    samples: dict[int, list[RatingSample]] = defaultdict(list)
    for archive_id, rating_bucket, title, game_name, rating, genre in samples_result.all():
        if len(samples[rating_bucket]) < sample_size:
            samples[rating_bucket].append(
                RatingSample(
                    id=archive_id,
                    title=title or "",
                    game_name=game_name or "",
                    rating=rating,
                    genre=genre,
                )
            )

    for group in groups:
        group.reviews = samples.get(group.rating, [])
    return groups


async def reviews_by_category(db: AsyncSession) -> list[CategoryStat]:
    """
    Two-level statistics: categories, each with its genres.

    Snapshots are matched to genres by their denormalized genre text
    (case-insensitive), and genres to categories by their link. Genres without a
    category, and genres or categories no snapshot names, are left out.
    """
    snapshots = _snapshots()
    review_count = func.count(snapshots.c.id)
    avg_rating = func.avg(snapshots.c.rating)
    sample_game = func.min(snapshots.c.game_name)

    def _joined(query):  # type: ignore[no-untyped-def]
        return (
            query.select_from(snapshots)
            .join(Genres, func.lower(Genres.name) == func.lower(func.trim(snapshots.c.genre)))
            .join(Categories, Genres.category_id == Categories.id)
        )

    category_result = await db.execute(
        _joined(select(Categories.id, Categories.name, review_count, avg_rating, sample_game))
        .group_by(Categories.id, Categories.name)
        .order_by(desc(review_count), Categories.name)
    )
    categories = [
        CategoryStat(
            category_id=category_id,
            category_name=name,
            review_count=count,
            avg_rating=float(avg) if avg is not None else None,
            sample_game=sample,
        )
        for category_id, name, count, avg, sample in category_result.all()
    ]

    genre_result = await db.execute(
        _joined(
            select(Genres.id, Genres.name, Genres.category_id, review_count, avg_rating, sample_game)
        )
        .group_by(Genres.id, Genres.name, Genres.category_id)
        .order_by(desc(review_count), Genres.name)
    )
    genres_by_category: dict[uuid.UUID, list[GenreStat]] = defaultdict(list)
    for genre_id, name, category_id, count, avg, sample in genre_result.all():
        genres_by_category[category_id].append(
            GenreStat(
                genre_id=genre_id,
                genre_name=name,
                category_id=category_id,
                review_count=count,
                avg_rating=float(avg) if avg is not None else None,
                sample_game=sample,
            )
        )

    for category in categories:
        category.genres = genres_by_category.get(category.category_id, [])
    return categories
