"""
SQLModel-based Category models

CategoryBase (shared public fields)
    ├─> Categories (database table)
    └─> CategoryCreate/CategoryResponse (API schemas, defined in app/schemas)

Category names are unique case-insensitively, enforced by a unique index on
lower(name).
"""

import uuid

from sqlalchemy import Index, func
from sqlmodel import Field, SQLModel


class CategoryBase(SQLModel):
    """Base model with shared public fields for Categories."""

    name: str = Field(max_length=100)


class Categories(CategoryBase, table=True):
    """Database table for genre categories (e.g. "Action", "Strategy")."""

    __tablename__ = "categories"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


Index(
    "uq_categories_name_lower",
    func.lower(Categories.__table__.c.name),  # type: ignore[attr-defined]
    unique=True,
)
