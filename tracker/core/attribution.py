"""Commit attribution and change-type classification for pushed commits."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Optional, Protocol

from tracker.models.code_change import ChangeType

MERGE_PREFIX = "Merge branch"

# Evaluated in order; first rule with a matching keyword wins
CHANGE_TYPE_RULES: tuple[tuple[tuple[str, ...], ChangeType], ...] = (
    (("fix", "bug"), ChangeType.FIX),
    (("feat", "add", "new"), ChangeType.FEATURE),
    (("del", "remove"), ChangeType.DELETE),
    (("create", "init"), ChangeType.CREATE),
)


class DeveloperIdentity(Protocol):
    """Anything carrying a username and a developer tag (e.g. a Profile)."""

    username: str
    developer_type: object


def _tag(identity: DeveloperIdentity) -> str:
    tag = identity.developer_type
    return str(getattr(tag, "value", tag)).lower()


def is_merge_commit(message: Optional[str]) -> bool:
    """Check if a commit message is an automatic branch merge."""
    return (message or "").startswith(MERGE_PREFIX)


def attribute_commit(
    author_name: str,
    author_username: Optional[str],
    profiles: Sequence[DeveloperIdentity],
    aliases: Mapping[str, Iterable[str]],
) -> Optional[DeveloperIdentity]:
    """
    Pick the developer profile a commit belongs to.

    A profile matches when the lower-cased author name or username contains
    the profile's username, or when the author name contains one of the
    aliases listed for the profile's developer tag. Profiles are tried in
    the given order and the first match wins.

    Args:
        author_name: Commit author display name
        author_username: Commit author GitHub login (may be missing)
        profiles: Candidate profiles in priority order
        aliases: Alias substrings keyed by developer tag

    Returns:
        The matching profile or None
    """
    name = (author_name or "").lower()
    login = (author_username or "").lower()

    for profile in profiles:
        profile_name = profile.username.lower()
        if profile_name and (profile_name in name or profile_name in login):
            return profile

        for alias in aliases.get(_tag(profile), ()):
            alias = alias.strip().lower()
            if alias and alias in name:
                return profile

    return None


def classify_change(message: Optional[str]) -> ChangeType:
    """Derive a change type from keywords in a commit message."""
    text = (message or "").lower()
    for keywords, change_type in CHANGE_TYPE_RULES:
        if any(keyword in text for keyword in keywords):
            return change_type
    return ChangeType.UPDATE


def describe_touched_files(
    added: Iterable[str] = (),
    modified: Iterable[str] = (),
    removed: Iterable[str] = (),
) -> str:
    """Display text for the distinct files touched by a commit."""
    files = set(added) | set(modified) | set(removed)
    if len(files) == 1:
        return next(iter(files))
    if files:
        return f"Multiple files ({len(files)})"
    return "Unknown file"
