"""Common Pydantic schemas used across the application."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ErrorDetail(BaseModel):
    """Error detail for validation errors."""

    field: Optional[str] = None
    message: str


class ErrorResponse(BaseModel):
    """Standardized error response format."""

    error: str = Field(..., examples=["Missing required fields"])
    code: str = Field(..., examples=["VALIDATION_ERROR"])
    details: Optional[list[ErrorDetail]] = Field(
        default=None,
        examples=[[{"field": "body.title", "message": "Field required"}]],
    )
    request_id: Optional[str] = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: Optional[str] = None
