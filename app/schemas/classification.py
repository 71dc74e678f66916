"""Pydantic schemas for Category and Genre endpoints"""

import uuid

from pydantic import BaseModel, Field, field_validator

from app.models.category import CategoryBase
from app.models.genre import GenreBase


def _strip(v: str | None) -> str | None:
    if isinstance(v, str):
        return v.strip()
    return v


class CategoryCreate(BaseModel):
    """Schema for creating (or re-casing) a category"""

    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip(v)


class CategoryResponse(CategoryBase):
    """Schema for category response"""

    id: uuid.UUID

    model_config = {"from_attributes": True}


class GenreCreate(BaseModel):
    """Schema for creating a genre, optionally inside a category"""

    name: str | None = None
    category_id: uuid.UUID | None = Field(default=None, alias="categoryId")
    category_name: str | None = Field(default=None, alias="categoryName")

    model_config = {"populate_by_name": True}

    @field_validator("name", "category_name", mode="before")
    @classmethod
    def strip_names(cls, v: str | None) -> str | None:
        return _strip(v)


class GenreAssignment(BaseModel):
    """
    Classification request used by review genre updates and materialization.

    Either genre_id or genre_name identifies the genre; the category is optional.
    Accepts the camelCase keys sent by the browser UI.
    """

    genre_id: uuid.UUID | None = Field(default=None, alias="genreId")
    genre_name: str | None = Field(default=None, alias="genreName")
    category_id: uuid.UUID | None = Field(default=None, alias="categoryId")
    category_name: str | None = Field(default=None, alias="categoryName")

    model_config = {"populate_by_name": True}

    @field_validator("genre_name", "category_name", mode="before")
    @classmethod
    def strip_names(cls, v: str | None) -> str | None:
        return _strip(v)

    @property
    def is_empty(self) -> bool:
        """True when no classification was requested at all."""
        return not (self.genre_id or self.genre_name or self.category_id or self.category_name)


class GenreResponse(GenreBase):
    """Schema for genre response, with the linked category's name resolved"""

    id: uuid.UUID
    category_id: uuid.UUID | None = None
    category_name: str | None = Field(default=None, alias="categoryName")

    model_config = {"from_attributes": True, "populate_by_name": True}
