"""Core security, attribution and error modules."""

from tracker.core.attribution import attribute_commit, classify_change
from tracker.core.exceptions import (
    APIException,
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from tracker.core.security import (
    TokenClaims,
    create_token,
    hash_password,
    verify_password,
    verify_token,
)
from tracker.core.webhooks import verify_discord_signature, verify_github_signature

__all__ = [
    # Security
    "TokenClaims",
    "hash_password",
    "verify_password",
    "create_token",
    "verify_token",
    # Webhooks
    "verify_github_signature",
    "verify_discord_signature",
    # Attribution
    "attribute_commit",
    "classify_change",
    # Exceptions
    "APIException",
    "AuthenticationError",
    "ConflictError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "UpstreamError",
    "ValidationError",
]
