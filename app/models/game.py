"""
SQLModel-based Game models

GameBase (shared public fields)
    └─> Games (database table, adds the primary key)

Games are created lazily the first time a review references them and are
looked up by exact (case-sensitive) name.
"""

import uuid

from sqlmodel import Field, SQLModel


class GameBase(SQLModel):
    """Base model with shared public fields for Games."""

    game_name: str = Field(max_length=255, index=True)


class Games(GameBase, table=True):
    """Database table for games."""

    __tablename__ = "games"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
