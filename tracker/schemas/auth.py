"""Authentication schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, model_validator

from tracker.models.account import DeveloperTag
from tracker.schemas.common import BaseSchema


class RegisterRequest(BaseSchema):
    """Developer registration request schema."""

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr = Field(..., description="Valid email address")
    password: str = Field(..., min_length=1, max_length=128)
    developer_type: str = Field(..., min_length=1, max_length=20)
    registration_secret: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("registration_secret", "registration_password"),
        description="Shared secret handed out to the developers",
    )


class LoginRequest(BaseSchema):
    """Login request schema. ``email`` is accepted in place of ``identifier``."""

    identifier: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Email address or username",
    )
    password: str = Field(..., min_length=1, max_length=128)

    @model_validator(mode="before")
    @classmethod
    def fallback_to_email(cls, data):
        """Use the legacy ``email`` key when ``identifier`` is absent."""
        if isinstance(data, dict) and not data.get("identifier") and data.get("email"):
            data = {**data, "identifier": data["email"]}
        return data


class AccountSummary(BaseSchema):
    """Public part of an account."""

    id: uuid.UUID
    username: str
    email: str
    developer_type: DeveloperTag


class AuthResponse(BaseModel):
    """Token plus the authenticated account."""

    message: str
    token: str
    user: AccountSummary


class ProfileResponse(BaseSchema):
    """Developer profile with its account."""

    id: uuid.UUID
    account_id: uuid.UUID
    username: str
    developer_type: DeveloperTag
    avatar_url: Optional[str] = None
    created_at: datetime
    user: Optional[AccountSummary] = None
