"""
SQLModel-based Genre models

GenreBase (shared public fields)
    ├─> Genres (database table, adds the category link)
    └─> GenreCreate/GenreResponse (API schemas, defined in app/schemas)

Genre names are unique case-insensitively. A genre may belong to one category;
once set, the link is only replaced by an explicit new category, never cleared
by an upsert that omits one.
"""

import uuid

from sqlalchemy import ForeignKeyConstraint, Index, func
from sqlmodel import Field, SQLModel


class GenreBase(SQLModel):
    """Base model with shared public fields for Genres."""

    name: str = Field(max_length=100)


class Genres(GenreBase, table=True):
    """Database table for genres (e.g. "Shooter", "Roguelike")."""

    __tablename__ = "genres"

    # Foreign keys are declared here rather than via Field(foreign_key=...) so they
    # carry names and ON DELETE behavior. Alembic migrations remain the source of
    # truth for the production schema.
    __table_args__ = (
        ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            ondelete="SET NULL",
            name="fk_genres_category_id",
        ),
        Index("ix_genres_category_id", "category_id"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    category_id: uuid.UUID | None = Field(default=None)


Index(
    "uq_genres_name_lower",
    func.lower(Genres.__table__.c.name),  # type: ignore[attr-defined]
    unique=True,
)
