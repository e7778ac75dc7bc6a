"""Code change log schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tracker.models.account import DeveloperTag
from tracker.models.code_change import ChangeType
from tracker.schemas.common import BaseSchema
from tracker.utils.text import sanitize_text
from tracker.utils.validators import blank_to_none


class CodeChangeCreate(BaseSchema):
    """Schema for logging a code change by hand."""

    file_path: str = Field(..., min_length=1, max_length=500)
    change_description: str = Field(..., min_length=1, max_length=5000)
    change_type: ChangeType
    related_ticket_id: Optional[uuid.UUID] = None
    github_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("related_ticket_id", "github_url", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        """Forms send empty strings for untouched optional inputs."""
        return blank_to_none(v)

    @field_validator("file_path", "change_description")
    @classmethod
    def sanitize(cls, v: str) -> str:
        return sanitize_text(v)


class DeveloperSummary(BaseSchema):
    """Profile fields shown next to a change."""

    id: uuid.UUID
    username: str
    developer_type: DeveloperTag


class CodeChangeResponse(BaseSchema):
    """Schema for code change response."""

    id: uuid.UUID
    developer_id: uuid.UUID
    developer: Optional[DeveloperSummary] = None
    file_path: str
    change_description: str
    change_type: ChangeType
    related_ticket_id: Optional[uuid.UUID]
    github_url: Optional[str]
    created_at: datetime = Field(serialization_alias="createdAt")


class CodeChangeEnvelope(BaseModel):
    """Message plus the logged change."""

    message: str
    change: CodeChangeResponse
