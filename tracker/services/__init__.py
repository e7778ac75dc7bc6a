"""Service layer for business logic."""

from tracker.services.auth import AuthService
from tracker.services.code_change import CodeChangeService
from tracker.services.discord import DiscordNotifier
from tracker.services.feature import FeatureService
from tracker.services.github import GitHubIngestService
from tracker.services.guide import GuideService
from tracker.services.ticket import TicketService

__all__ = [
    "AuthService",
    "TicketService",
    "FeatureService",
    "CodeChangeService",
    "GitHubIngestService",
    "DiscordNotifier",
    "GuideService",
]
