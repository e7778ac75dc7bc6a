"""SQLAlchemy models for the Azeroth Bug Tracker."""

from tracker.models.account import Account, DeveloperTag, Profile
from tracker.models.code_change import ChangeType, CodeChange
from tracker.models.feature import FeatureCategory, FeatureRequest, FeatureStatus
from tracker.models.ticket import (
    BugTicket,
    Expansion,
    GameMode,
    ResolveReason,
    TicketPriority,
    TicketStatus,
)

__all__ = [
    "Account",
    "Profile",
    "DeveloperTag",
    "BugTicket",
    "TicketStatus",
    "TicketPriority",
    "GameMode",
    "Expansion",
    "ResolveReason",
    "FeatureRequest",
    "FeatureStatus",
    "FeatureCategory",
    "CodeChange",
    "ChangeType",
]
