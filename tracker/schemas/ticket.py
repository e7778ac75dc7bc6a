"""Bug ticket schemas for request/response validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationInfo, field_validator

from tracker.models.account import DeveloperTag
from tracker.models.ticket import (
    Expansion,
    GameMode,
    ResolveReason,
    TicketPriority,
    TicketStatus,
)
from tracker.schemas.common import BaseSchema
from tracker.utils.text import sanitize_rich_text, sanitize_text
from tracker.utils.validators import blank_to_none

MIN_BEHAVIOR_LENGTH = 50

BEHAVIOR_LABELS = {
    "current_behavior": "Current behavior",
    "expected_behavior": "Expected behavior",
}


def _check_behavior(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    if len(value) < MIN_BEHAVIOR_LENGTH:
        raise ValueError(
            f"{BEHAVIOR_LABELS[field_name]} must be at least {MIN_BEHAVIOR_LENGTH} characters"
        )
    return sanitize_rich_text(value)


class TicketCreate(BaseSchema):
    """Schema for filing a new bug report."""

    developer: DeveloperTag
    wow_class: str = Field(..., min_length=1, max_length=50)
    rotation: str = Field(..., min_length=1, max_length=100)
    pvpve_mode: GameMode
    level: int = Field(default=80, ge=1, le=80)
    expansion: Expansion

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(
        default=None,
        max_length=5000,
        description="Defaults to the current behavior",
    )
    current_behavior: str = Field(..., min_length=1, max_length=5000)
    expected_behavior: str = Field(..., min_length=1, max_length=5000)
    logs: str = Field(..., min_length=1, max_length=20000)
    video_url: Optional[str] = Field(default=None, max_length=500)
    screenshot_urls: list[str] = Field(default_factory=list, max_length=10)

    discord_username: str = Field(..., min_length=1, max_length=100)
    sylvanas_username: str = Field(..., min_length=1, max_length=100)
    reporter_name: str = Field(..., min_length=1, max_length=100)
    priority: TicketPriority = TicketPriority.MEDIUM

    @field_validator("current_behavior", "expected_behavior")
    @classmethod
    def check_behavior(cls, v: str, info: ValidationInfo) -> str:
        """Enforce the minimum length, then sanitize."""
        return _check_behavior(v, info.field_name)

    @field_validator("title", "wow_class", "rotation", "discord_username", "sylvanas_username", "reporter_name")
    @classmethod
    def sanitize_short_text(cls, v: str) -> str:
        """Strip markup from single-line fields."""
        return sanitize_text(v)

    @field_validator("description", "logs")
    @classmethod
    def sanitize_long_text(cls, v: Optional[str]) -> Optional[str]:
        """Sanitize multi-line fields to prevent XSS."""
        if v is None:
            return None
        return sanitize_rich_text(v)

    @field_validator("video_url", "description", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        return blank_to_none(v)


class TicketUpdate(BaseSchema):
    """Schema for editing a ticket's descriptive fields."""

    developer: Optional[DeveloperTag] = None
    wow_class: Optional[str] = Field(default=None, min_length=1, max_length=50)
    rotation: Optional[str] = Field(default=None, min_length=1, max_length=100)
    pvpve_mode: Optional[GameMode] = None
    level: Optional[int] = Field(default=None, ge=1, le=80)
    expansion: Optional[Expansion] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    current_behavior: Optional[str] = Field(default=None, max_length=5000)
    expected_behavior: Optional[str] = Field(default=None, max_length=5000)
    logs: Optional[str] = Field(default=None, max_length=20000)
    video_url: Optional[str] = Field(default=None, max_length=500)
    screenshot_urls: Optional[list[str]] = Field(default=None, max_length=10)
    priority: Optional[TicketPriority] = None

    @field_validator("current_behavior", "expected_behavior")
    @classmethod
    def check_behavior(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        """Enforce the minimum length, then sanitize."""
        return _check_behavior(v, info.field_name)

    @field_validator("title", "wow_class", "rotation")
    @classmethod
    def sanitize_short_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return sanitize_text(v)

    @field_validator("description", "logs")
    @classmethod
    def sanitize_long_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return sanitize_rich_text(v)


class TicketStatusUpdate(BaseSchema):
    """Status change, optionally with the reason for resolving."""

    status: TicketStatus
    resolve_reason: Optional[ResolveReason] = Field(
        default=None,
        validation_alias=AliasChoices("resolveReason", "resolve_reason"),
    )


class TicketResponse(BaseSchema):
    """Schema for ticket response."""

    id: uuid.UUID
    developer: DeveloperTag
    wow_class: str
    rotation: str
    pvpve_mode: GameMode
    level: int
    expansion: Expansion
    title: str
    description: str
    current_behavior: str
    expected_behavior: str
    logs: Optional[str]
    video_url: Optional[str]
    screenshot_urls: list[str]
    discord_username: str
    sylvanas_username: str
    reporter_name: str
    reporter_account_id: Optional[uuid.UUID]
    priority: TicketPriority
    status: TicketStatus
    is_archived: bool = Field(serialization_alias="isArchived")
    resolve_reason: Optional[ResolveReason] = Field(serialization_alias="resolveReason")
    discord_message_id: Optional[str]
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class TicketEnvelope(BaseModel):
    """Message plus the affected ticket."""

    message: str
    ticket: TicketResponse


class TicketStats(BaseModel):
    """Ticket counts for the dashboard."""

    total: int
    archived: int
    active: int
    by_status: dict[str, int]
    by_developer: dict[str, int]
    by_class: dict[str, int]
    by_resolve_reason: dict[str, int]
