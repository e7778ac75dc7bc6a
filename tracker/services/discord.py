"""Discord webhook mirror for tickets, feature requests and code changes."""

import functools
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import structlog

from tracker.config import Settings
from tracker.models.code_change import CodeChange
from tracker.models.feature import FeatureRequest, FeatureStatus
from tracker.models.ticket import BugTicket, ResolveReason, TicketStatus
from tracker.utils.text import humanize, truncate
from tracker.utils.validators import is_http_url

logger = structlog.get_logger()

BOT_NAME = "Bug Reporter"
FOOTER = "Bungee × Astro Bug Tracker"

# WoW class colors for embeds
CLASS_COLORS: dict[str, int] = {
    "warrior": 0xC79C6E,
    "paladin": 0xF58CBA,
    "hunter": 0xABD473,
    "rogue": 0xFFF569,
    "priest": 0xFFFFFF,
    "shaman": 0x0070DE,
    "mage": 0x69CCF0,
    "warlock": 0x9482C9,
    "druid": 0xFF7D0A,
    "death-knight": 0xC41F3B,
}
DEFAULT_COLOR = 0xFFD100

PRIORITY_EMOJIS: dict[str, str] = {
    "low": "🟢",
    "medium": "🟡",
    "high": "🟠",
    "critical": "🔴",
}

STATUS_LABELS: dict[TicketStatus, str] = {
    TicketStatus.OPEN: "🆕 Open",
    TicketStatus.IN_PROGRESS: "🛠️ In progress",
    TicketStatus.RESOLVED: "✅ Resolved",
}

RESOLVE_REASON_LABELS: dict[ResolveReason, str] = {
    ResolveReason.NO_RESPONSE: "No response from reporter",
    ResolveReason.NOT_REPRODUCIBLE: "Not reproducible",
    ResolveReason.USER_SIDE: "User-side issue",
    ResolveReason.FIXED: "Fixed",
}

FEATURE_COLORS: dict[FeatureStatus, int] = {
    FeatureStatus.OPEN: 0x5865F2,
    FeatureStatus.ACCEPTED: 0x57F287,
    FeatureStatus.REJECTED: 0xED4245,
}

RESOLVED_COLOR = 0x57F287
CODE_CHANGE_COLOR = 0x9B59B6

# Discord component constants
ACTION_ROW = 1
BUTTON = 2
BUTTON_SUCCESS = 3
BUTTON_DANGER = 4


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _best_effort(action: str):
    """Log and swallow any failure of a notification call."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                logger.warning(
                    "discord_notification_failed",
                    action=action,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                return None

        return wrapper

    return decorator


def ticket_embed(ticket: BugTicket) -> dict[str, Any]:
    """Embed describing a bug ticket in its current state."""
    wow_class = ticket.wow_class.lower()
    priority = ticket.priority.value
    emoji = PRIORITY_EMOJIS.get(priority, "⚪")

    if ticket.status == TicketStatus.OPEN:
        title = f"{emoji} New Bug Report: {ticket.title}"
    else:
        title = f"{emoji} [{humanize(ticket.status.value).upper()}] {ticket.title}"

    return {
        "title": truncate(title, 256),
        "color": CLASS_COLORS.get(wow_class, DEFAULT_COLOR),
        "fields": [
            {
                "name": "📋 Class & Spec",
                "value": f"{humanize(ticket.wow_class)} - {ticket.rotation}",
                "inline": True,
            },
            {
                "name": "🎮 Mode",
                "value": (
                    f"{ticket.pvpve_mode.value.upper()} | "
                    f"{ticket.expansion.value.upper()} | Lvl {ticket.level or '??'}"
                ),
                "inline": True,
            },
            {"name": "⚠️ Priority", "value": humanize(priority), "inline": True},
            {"name": "📌 Status", "value": STATUS_LABELS[ticket.status], "inline": True},
            {
                "name": "🔴 Current Behavior",
                "value": truncate(ticket.current_behavior, 500),
                "inline": False,
            },
            {
                "name": "🟢 Expected Behavior",
                "value": truncate(ticket.expected_behavior, 500),
                "inline": False,
            },
            {
                "name": "👤 Reporter",
                "value": (
                    f"{ticket.reporter_name}\n"
                    f"📱 Discord: {ticket.discord_username}\n"
                    f"🎮 Sylvanas: {ticket.sylvanas_username}"
                ),
                "inline": False,
            },
            {
                "name": "🎞️ Video/Logs",
                "value": truncate(f"Logs: {ticket.logs or 'N/A'}\nVideo: {ticket.video_url or 'N/A'}", 1024),
                "inline": False,
            },
        ],
        "footer": {"text": f"Assigned to: {humanize(ticket.developer.value)} | {FOOTER}"},
        "timestamp": _now(),
    }


def resolution_embed(ticket: BugTicket, reason: Optional[ResolveReason]) -> dict[str, Any]:
    """Summary posted to the archive channel when a ticket is resolved."""
    return {
        "title": truncate(f"✅ Resolved: {ticket.title}", 256),
        "color": RESOLVED_COLOR,
        "fields": [
            {
                "name": "📋 Class & Spec",
                "value": f"{humanize(ticket.wow_class)} - {ticket.rotation}",
                "inline": True,
            },
            {
                "name": "📝 Reason",
                "value": RESOLVE_REASON_LABELS.get(reason, "Not specified"),
                "inline": True,
            },
            {"name": "👤 Reporter", "value": ticket.reporter_name, "inline": True},
        ],
        "footer": {"text": f"Resolved by: {humanize(ticket.developer.value)} | {FOOTER}"},
        "timestamp": _now(),
    }


def feature_embed(feature: FeatureRequest) -> dict[str, Any]:
    """Embed describing a feature request."""
    if feature.is_decided:
        title = f"💡 [{feature.status.value.upper()}] {feature.title}"
    else:
        title = f"💡 Feature Request: {feature.title}"

    fields = [
        {"name": "📂 Category", "value": humanize(feature.category.value), "inline": True},
        {"name": "📌 Status", "value": humanize(feature.status.value), "inline": True},
    ]
    if feature.wow_class:
        fields.append({"name": "📋 Class", "value": humanize(feature.wow_class), "inline": True})
    fields.append(
        {
            "name": "👤 Requested by",
            "value": (
                f"📱 Discord: {feature.discord_username}\n"
                f"🎮 Sylvanas: {feature.sylvanas_username}"
            ),
            "inline": False,
        }
    )

    return {
        "title": truncate(title, 256),
        "description": truncate(feature.description, 2000),
        "color": FEATURE_COLORS[feature.status],
        "fields": fields,
        "footer": {"text": f"Assigned to: {humanize(feature.developer.value)} | {FOOTER}"},
        "timestamp": _now(),
    }


def feature_components(feature: FeatureRequest) -> list[dict[str, Any]]:
    """Accept/reject buttons; none once the request is decided."""
    if feature.is_decided:
        return []
    return [
        {
            "type": ACTION_ROW,
            "components": [
                {
                    "type": BUTTON,
                    "style": BUTTON_SUCCESS,
                    "label": "Accept",
                    "custom_id": f"feature_accept_{feature.id}",
                },
                {
                    "type": BUTTON,
                    "style": BUTTON_DANGER,
                    "label": "Reject",
                    "custom_id": f"feature_reject_{feature.id}",
                },
            ],
        }
    ]


def code_change_embed(change: CodeChange, developer_name: str) -> dict[str, Any]:
    """Embed announcing a logged code change."""
    return {
        "title": truncate(f"📂 Code Change: {change.file_path}", 256),
        "color": CODE_CHANGE_COLOR,
        "description": truncate(change.change_description, 2000),
        "fields": [
            {"name": "Type", "value": change.change_type.value.upper(), "inline": True},
            {"name": "Developer", "value": developer_name, "inline": True},
            {
                "name": "GitHub URL",
                "value": f"[Link]({change.github_url})" if change.github_url else "N/A",
                "inline": True,
            },
        ],
        "footer": {"text": f"{FOOTER} - Code Tracker"},
        "timestamp": _now(),
    }


class DiscordNotifier:
    """
    Mirror entity state into Discord channels through webhooks.

    Every public method is a post-commit hook: unconfigured webhooks are
    skipped and failures are logged, never raised.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def _request(
        self,
        method: str,
        url: str,
        payload: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Optional[httpx.Response]:
        """Send one webhook call; returns None when the URL is not configured."""
        if not is_http_url(url):
            logger.debug("discord_webhook_not_configured", method=method)
            return None

        response = await self.client.request(method, url, json=payload, params=params)
        response.raise_for_status()
        return response

    async def _post_message(self, url: str, payload: dict[str, Any]) -> Optional[str]:
        response = await self._request("POST", url, payload, params={"wait": "true"})
        if response is None:
            return None
        return str(response.json()["id"])

    async def _edit_message(self, url: str, message_id: Optional[str], payload: dict[str, Any]) -> None:
        if not message_id or not is_http_url(url):
            return
        await self._request("PATCH", f"{url}/messages/{message_id}", payload)

    async def _delete_message(self, url: str, message_id: Optional[str]) -> bool:
        if not message_id or not is_http_url(url):
            return False
        await self._request("DELETE", f"{url}/messages/{message_id}")
        return True

    # Bug tickets

    @_best_effort("ticket_created")
    async def ticket_created(self, ticket: BugTicket) -> Optional[str]:
        """Post a new ticket to the developer's channel; returns the message id."""
        message_id = await self._post_message(
            self.settings.live_webhook(ticket.developer.value),
            {"username": BOT_NAME, "embeds": [ticket_embed(ticket)]},
        )
        if message_id:
            logger.info("discord_ticket_posted", ticket_id=str(ticket.id), message_id=message_id)
        return message_id

    @_best_effort("ticket_updated")
    async def ticket_updated(self, ticket: BugTicket) -> None:
        """Edit the mirrored message in place."""
        await self._edit_message(
            self.settings.live_webhook(ticket.developer.value),
            ticket.discord_message_id,
            {"embeds": [ticket_embed(ticket)]},
        )

    @_best_effort("ticket_resolved")
    async def ticket_resolved(self, ticket: BugTicket, reason: Optional[ResolveReason] = None) -> bool:
        """
        Post a summary to the archive channel, then remove the live message.

        Returns True once the live message is gone, so the caller can forget its id.
        """
        developer = ticket.developer.value
        await self._request(
            "POST",
            self.settings.archive_webhook(developer),
            {"username": BOT_NAME, "embeds": [resolution_embed(ticket, reason)]},
        )
        deleted = await self._delete_message(self.settings.live_webhook(developer), ticket.discord_message_id)
        logger.info("discord_ticket_archived", ticket_id=str(ticket.id))
        return deleted

    @_best_effort("ticket_deleted")
    async def ticket_deleted(self, ticket: BugTicket) -> None:
        """Remove the mirrored message."""
        await self._delete_message(
            self.settings.live_webhook(ticket.developer.value),
            ticket.discord_message_id,
        )

    # Feature requests

    @_best_effort("feature_created")
    async def feature_created(self, feature: FeatureRequest) -> Optional[str]:
        """Post a new request with accept/reject buttons; returns the message id."""
        return await self._post_message(
            self.settings.live_webhook(feature.developer.value),
            {
                "username": BOT_NAME,
                "embeds": [feature_embed(feature)],
                "components": feature_components(feature),
            },
        )

    @_best_effort("feature_updated")
    async def feature_updated(self, feature: FeatureRequest) -> None:
        """Edit the mirrored message; buttons disappear once decided."""
        await self._edit_message(
            self.settings.live_webhook(feature.developer.value),
            feature.discord_message_id,
            {"embeds": [feature_embed(feature)], "components": feature_components(feature)},
        )

    @_best_effort("feature_deleted")
    async def feature_deleted(self, feature: FeatureRequest) -> None:
        """Remove the mirrored message."""
        await self._delete_message(
            self.settings.live_webhook(feature.developer.value),
            feature.discord_message_id,
        )

    # Code changes

    @_best_effort("code_change_logged")
    async def code_change_logged(self, change: CodeChange, developer_name: str, developer_type: str) -> None:
        """Announce a logged change in the developer's channel."""
        await self._request(
            "POST",
            self.settings.live_webhook(developer_type),
            {"username": BOT_NAME, "embeds": [code_change_embed(change, developer_name)]},
        )
