"""Pydantic schemas for request/response validation."""

from tracker.schemas.auth import (
    AccountSummary,
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
)
from tracker.schemas.code_change import (
    CodeChangeCreate,
    CodeChangeEnvelope,
    CodeChangeResponse,
)
from tracker.schemas.common import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)
from tracker.schemas.feature import (
    FeatureCreate,
    FeatureEnvelope,
    FeatureResponse,
    FeatureStatusUpdate,
)
from tracker.schemas.guide import GuideAnswer, GuideQuestion
from tracker.schemas.ticket import (
    TicketCreate,
    TicketEnvelope,
    TicketResponse,
    TicketStats,
    TicketStatusUpdate,
    TicketUpdate,
)

__all__ = [
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "AccountSummary",
    "AuthResponse",
    "ProfileResponse",
    # Tickets
    "TicketCreate",
    "TicketUpdate",
    "TicketStatusUpdate",
    "TicketResponse",
    "TicketEnvelope",
    "TicketStats",
    # Features
    "FeatureCreate",
    "FeatureStatusUpdate",
    "FeatureResponse",
    "FeatureEnvelope",
    # Code changes
    "CodeChangeCreate",
    "CodeChangeResponse",
    "CodeChangeEnvelope",
    # Guides
    "GuideQuestion",
    "GuideAnswer",
    # Common
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
]
