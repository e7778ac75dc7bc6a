"""Feature request schemas for request/response validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tracker.models.account import DeveloperTag
from tracker.models.feature import FeatureCategory, FeatureStatus
from tracker.schemas.common import BaseSchema
from tracker.utils.text import sanitize_rich_text, sanitize_text
from tracker.utils.validators import blank_to_none


class FeatureCreate(BaseSchema):
    """Schema for submitting a feature request."""

    developer: DeveloperTag
    category: FeatureCategory
    wow_class: Optional[str] = Field(default=None, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    discord_username: str = Field(..., min_length=1, max_length=100)
    sylvanas_username: str = Field(..., min_length=1, max_length=100)
    is_private: bool = False

    @field_validator("wow_class", mode="before")
    @classmethod
    def blank_class(cls, v):
        return blank_to_none(v)

    @field_validator("title", "wow_class", "discord_username", "sylvanas_username")
    @classmethod
    def sanitize_short_text(cls, v: Optional[str]) -> Optional[str]:
        """Strip markup from single-line fields."""
        if v is None:
            return None
        return sanitize_text(v)

    @field_validator("description")
    @classmethod
    def sanitize_description(cls, v: str) -> str:
        """Sanitize description to prevent XSS."""
        return sanitize_rich_text(v)


class FeatureStatusUpdate(BaseSchema):
    """Accept or reject a request (or reopen it)."""

    status: FeatureStatus


class FeatureResponse(BaseSchema):
    """Schema for feature request response."""

    id: uuid.UUID
    developer: DeveloperTag
    category: FeatureCategory
    wow_class: Optional[str]
    title: str
    description: str
    is_private: bool
    status: FeatureStatus
    discord_username: str
    sylvanas_username: str
    discord_message_id: Optional[str]
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class FeatureEnvelope(BaseModel):
    """Message plus the affected feature request."""

    message: str
    feature: FeatureResponse
