"""Tests for the review write path."""

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import DuplicateGamePolicy
from app.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from app.models.archived_review import ArchivedReviews
from app.models.category import Categories
from app.models.game import Games
from app.models.genre import Genres
from app.models.review import Reviews
from app.schemas.classification import GenreAssignment
from app.schemas.review import ReviewCreate, ReviewUpdate
from app.services import reviews as review_service


def _payload(**overrides) -> ReviewCreate:  # type: ignore[no-untyped-def]
    data = {
        "title": "Tight and mean",
        "game_name": "Celeste",
        "review_text": "Hard, fair, kind.",
        "rating": 9,
        "positive_points": ["Controls"],
        "negative_points": [],
        "tags": ["platformer"],
    }
    data.update(overrides)
    return ReviewCreate.model_validate(data)


async def _count(db: AsyncSession, model) -> int:  # type: ignore[no-untyped-def]
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar() or 0


@pytest.mark.integration
class TestCreateReview:
    async def test_creates_game_review_and_snapshot(self, db_session: AsyncSession):
        review = await review_service.create_review(db_session, _payload())

        assert review.game_name == "Celeste"
        assert review.rating == 9.0
        assert review.tags == ["platformer"]

        archived = await db_session.get(ArchivedReviews, review.id)
        assert archived is not None
        assert archived.review_json["game_name"] == "Celeste"
        assert archived.review_json["rating"] == 9.0
        assert await _count(db_session, Games) == 1

    async def test_genre_is_normalized_in_same_transaction(self, db_session: AsyncSession):
        review = await review_service.create_review(
            db_session, _payload(genre="platformer", categoryName="Action")
        )

        assert review.genre == "platformer"
        assert review.category_name == "Action"
        assert review.genre_id is not None
        archived = await db_session.get(ArchivedReviews, review.id)
        assert archived.review_json["genre"] == "platformer"
        assert archived.review_json["categoryName"] == "Action"

    @pytest.mark.parametrize("missing", ["title", "game_name", "review_text", "rating"])
    async def test_missing_required_field(self, db_session: AsyncSession, missing: str):
        with pytest.raises(ValidationError):
            await review_service.create_review(db_session, _payload(**{missing: None}))
        assert await _count(db_session, Games) == 0

    async def test_duplicate_game_rejected_by_default(self, db_session: AsyncSession):
        await review_service.create_review(db_session, _payload())

        with pytest.raises(ConflictError):
            await review_service.create_review(
                db_session, _payload(title="Second look"), DuplicateGamePolicy.REJECT
            )
        assert await _count(db_session, Reviews) == 1
        assert await _count(db_session, ArchivedReviews) == 1

    async def test_duplicate_game_reused_when_configured(self, db_session: AsyncSession):
        first = await review_service.create_review(db_session, _payload())
        second = await review_service.create_review(
            db_session, _payload(title="Second look"), DuplicateGamePolicy.REUSE
        )

        assert second.game_id == first.game_id
        assert await _count(db_session, Games) == 1
        assert await _count(db_session, Reviews) == 2

    async def test_failed_snapshot_leaves_no_rows(self, db_session: AsyncSession, monkeypatch):
        """A failure after the review insert rolls back the game, genre and review too."""

        def failing_snapshot(payload, genre):  # type: ignore[no-untyped-def]
            raise OperationalError("INSERT INTO archived_reviews", {}, Exception("disk full"))

        monkeypatch.setattr(review_service, "build_snapshot", failing_snapshot)

        with pytest.raises(StorageError):
            await review_service.create_review(
                db_session, _payload(genre="Platformer", categoryName="Action")
            )

        for model in (Games, Reviews, ArchivedReviews, Genres, Categories):
            assert await _count(db_session, model) == 0


@pytest.mark.integration
class TestUpdateReview:
    async def test_replaces_fields_and_merges_snapshot(self, db_session: AsyncSession):
        review = await review_service.create_review(db_session, _payload())
        archived = await db_session.get(ArchivedReviews, review.id)
        archived.review_json = {**archived.review_json, "visible": False}
        await db_session.commit()

        updated = await review_service.update_review(
            db_session,
            review.id,
            ReviewUpdate.model_validate({**_payload().model_dump(), "rating": 7, "tags": ["hard"]}),
        )

        assert updated.rating == 7.0
        assert updated.tags == ["hard"]
        archived = await db_session.get(ArchivedReviews, review.id, populate_existing=True)
        assert archived.review_json["rating"] == 7.0
        assert archived.review_json["visible"] is False

    async def test_omitted_genre_cleared_in_snapshot(self, db_session: AsyncSession):
        review = await review_service.create_review(
            db_session, _payload(genre="platformer", categoryName="Action")
        )

        updated = await review_service.update_review(
            db_session, review.id, ReviewUpdate.model_validate(_payload().model_dump())
        )

        assert updated.genre is None
        assert updated.genre_id is None
        archived = await db_session.get(ArchivedReviews, review.id, populate_existing=True)
        assert archived.review_json["genre"] is None
        assert archived.review_json["categoryName"] is None

    async def test_unknown_review(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await review_service.update_review(db_session, uuid.uuid4(), ReviewUpdate.model_validate(_payload().model_dump()))


@pytest.mark.integration
class TestDeleteReview:
    async def test_keeps_snapshot(self, db_session: AsyncSession):
        review = await review_service.create_review(db_session, _payload())

        await review_service.delete_review(db_session, review.id)

        assert await db_session.get(Reviews, review.id) is None
        assert await db_session.get(ArchivedReviews, review.id) is not None

    async def test_unknown_review(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await review_service.delete_review(db_session, uuid.uuid4())


@pytest.mark.integration
class TestReviewTags:
    async def test_tags_normalized_and_mirrored(self, db_session: AsyncSession):
        review = await review_service.create_review(db_session, _payload())

        updated = await review_service.update_review_tags(db_session, review.id, ["hard", " hard", "", "pixel"])

        assert updated.tags == ["hard", "pixel"]
        archived = await db_session.get(ArchivedReviews, review.id, populate_existing=True)
        assert archived.review_json["tags"] == ["hard", "pixel"]

    async def test_tags_must_be_list(self, db_session: AsyncSession):
        review = await review_service.create_review(db_session, _payload())
        with pytest.raises(ValidationError):
            await review_service.update_review_tags(db_session, review.id, "hard")


@pytest.mark.integration
class TestSetReviewGenre:
    async def test_links_genre_and_writes_back(self, db_session: AsyncSession):
        review = await review_service.create_review(db_session, _payload())

        result = await review_service.set_review_genre(
            db_session, review.id, GenreAssignment(genre_name="Platformer", category_name="Action")
        )

        assert result.genre.name == "Platformer"
        assert result.review.genre_id == result.genre.id
        assert result.review.category_name == "Action"
        archived = await db_session.get(ArchivedReviews, review.id, populate_existing=True)
        assert archived.review_json["genre"] == "Platformer"
        assert archived.review_json["categoryName"] == "Action"

    async def test_unknown_review_creates_nothing(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await review_service.set_review_genre(
                db_session, uuid.uuid4(), GenreAssignment(genre_name="Platformer")
            )
        assert await _count(db_session, Genres) == 0

    async def test_requires_genre(self, db_session: AsyncSession):
        review = await review_service.create_review(db_session, _payload())
        with pytest.raises(ValidationError):
            await review_service.set_review_genre(db_session, review.id, GenreAssignment())
