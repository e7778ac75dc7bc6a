"""Utility functions and helpers."""

from tracker.utils.text import humanize, sanitize_rich_text, sanitize_text, truncate
from tracker.utils.validators import blank_to_none, is_http_url, validate_uuid

__all__ = [
    "sanitize_text",
    "sanitize_rich_text",
    "humanize",
    "truncate",
    "blank_to_none",
    "is_http_url",
    "validate_uuid",
]
