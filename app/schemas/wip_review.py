"""Pydantic schemas for WIP review endpoints"""

import uuid

from pydantic import BaseModel, Field, field_validator

from app.schemas.base import UTCDatetime


class WipReviewCreate(BaseModel):
    """Schema for creating or replacing a WIP note"""

    game_name: str = Field(alias="gameName", min_length=1)
    remarks: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("game_name", mode="before")
    @classmethod
    def strip_game_name(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("remarks", mode="before")
    @classmethod
    def default_remarks(cls, v: str | None) -> str:
        return v or ""


class WipReviewResponse(BaseModel):
    """Schema for WIP note response, in the camelCase the UI expects"""

    id: uuid.UUID
    game_name: str = Field(alias="gameName")
    remarks: str
    created_at: UTCDatetime = Field(alias="createdAt")
    updated_at: UTCDatetime = Field(alias="updatedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}
