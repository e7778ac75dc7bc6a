"""Text cleaning and formatting helpers."""

import bleach

# Markup allowed in long free-text fields (behaviour descriptions, logs)
ALLOWED_TAGS = [
    "p", "br",
    "ul", "ol", "li",
    "strong", "em", "b", "i", "code", "pre",
    "blockquote", "a",
]

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title"],
}

ALLOWED_PROTOCOLS = ["http", "https"]


def sanitize_text(content: str) -> str:
    """
    Strip all HTML from a short free-text value.

    Args:
        content: Raw user input

    Returns:
        Plain text with markup removed
    """
    if not content:
        return content

    return bleach.clean(content, tags=[], strip=True)


def sanitize_rich_text(content: str) -> str:
    """
    Sanitize a long free-text value, keeping a small set of formatting tags.

    Args:
        content: Raw user input

    Returns:
        Sanitized content safe for rendering
    """
    if not content:
        return content

    return bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )


def humanize(value: str) -> str:
    """Capitalize the first letter and turn hyphens into spaces ("death-knight" -> "Death knight")."""
    if not value:
        return ""
    return value[0].upper() + value[1:].replace("-", " ")


def truncate(value: str, max_length: int) -> str:
    """Shorten text to fit a Discord embed field."""
    if not value:
        return "N/A"
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."
