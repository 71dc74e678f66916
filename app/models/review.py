"""
SQLModel-based Review models

ReviewBase (shared public fields)
    ├─> Reviews (database table, adds keys, list columns and timestamps)
    └─> ReviewResponse (API schema, defined in app/schemas)

A normalized review references exactly one game. game_id is not unique, but
the archive reconciliation treats "the review for this game" as singular.
When a review was materialized from an archive snapshot, both rows share the
same id.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from app.models.column_types import TextList


class ReviewBase(SQLModel):
    """Base model with shared public fields for Reviews."""

    title: str = Field(max_length=255)
    review_text: str
    rating: float
    # Legacy denormalized genre text, kept alongside genre_id
    genre: str | None = Field(default=None)


class Reviews(ReviewBase, table=True):
    """
    Database table for normalized reviews.

    Extends ReviewBase with:
    - Primary key (shared with the archive snapshot once materialized)
    - Game and genre links
    - Point and tag lists
    - Creation timestamp
    """

    __tablename__ = "reviews"

    # Foreign keys are declared here rather than via Field(foreign_key=...) so they
    # carry names and ON DELETE behavior. Alembic migrations remain the source of
    # truth for the production schema.
    __table_args__ = (
        ForeignKeyConstraint(
            ["game_id"],
            ["games.id"],
            ondelete="CASCADE",
            name="fk_reviews_game_id",
        ),
        ForeignKeyConstraint(
            ["genre_id"],
            ["genres.id"],
            ondelete="SET NULL",
            name="fk_reviews_genre_id",
        ),
        Index("ix_reviews_game_id", "game_id"),
        Index("ix_reviews_genre_id", "genre_id"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    game_id: uuid.UUID
    genre_id: uuid.UUID | None = Field(default=None)

    positive_points: list[str] = Field(
        default_factory=list, sa_column=Column(TextList, nullable=False)
    )
    negative_points: list[str] = Field(
        default_factory=list, sa_column=Column(TextList, nullable=False)
    )
    tags: list[str] = Field(default_factory=list, sa_column=Column(TextList, nullable=False))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    # Note: Relationships are intentionally omitted.
    # Foreign keys are sufficient for queries, and omitting relationships avoids
    # accidental eager loading and unwanted auto-serialization in API responses.
