"""
Archived review snapshots.

Every review submission stores its full original payload here. The JSON
document is free-form; read it through app.schemas.archive.ReviewSnapshot,
which fills defaults for keys missing from older snapshots.

Always assign a new dict to review_json when changing it: in-place mutation
of the JSON value is not tracked by the ORM.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from app.models.column_types import JsonDocument


class ArchivedReviews(SQLModel, table=True):
    """Database table for archived review JSON snapshots."""

    __tablename__ = "archived_reviews"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    review_json: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JsonDocument, nullable=False)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
