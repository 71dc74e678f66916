"""
Work-in-progress review notes.

A scratch pad for games the user is still playing. Independent of the
review/archive model.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class WipReviewBase(SQLModel):
    """Base model with shared public fields for WIP reviews."""

    game_name: str = Field(max_length=255)
    remarks: str = Field(default="")


class WipReviews(WipReviewBase, table=True):
    """Database table for WIP review notes."""

    __tablename__ = "wip_reviews"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
