"""Input validation utilities."""

import uuid
from typing import Any, Optional


def validate_uuid(value: str) -> Optional[uuid.UUID]:
    """
    Validate and parse a UUID string.

    Args:
        value: String to validate as UUID

    Returns:
        UUID object if valid, None otherwise
    """
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None


def is_http_url(value: Optional[str]) -> bool:
    """Check if a configured URL is usable (rejects blanks and placeholders)."""
    if not value:
        return False
    return value.startswith(("http://", "https://"))


def blank_to_none(value: Any) -> Any:
    """Treat empty or whitespace-only strings as missing."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
