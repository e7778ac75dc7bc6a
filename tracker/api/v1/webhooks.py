"""Inbound webhook endpoints (GitHub pushes, Discord interactions)."""

from typing import Annotated, Any, Optional

import structlog
from fastapi import APIRouter, Header, Request
from pydantic import ValidationError as PydanticValidationError

from tracker.api.deps import AppSettings, DbSession, Notifier
from tracker.core.exceptions import AuthenticationError, InternalError, ValidationError
from tracker.core.webhooks import verify_discord_signature, verify_github_signature
from tracker.schemas.common import MessageResponse
from tracker.schemas.webhook import Interaction, PushEvent, PushResult
from tracker.services.feature import FeatureService
from tracker.services.github import GitHubIngestService
from tracker.services.interaction import handle_interaction

logger = structlog.get_logger()

router = APIRouter()


@router.post(
    "/github",
    response_model=PushResult | MessageResponse,
    summary="GitHub push webhook",
    description=(
        "Verifies `X-Hub-Signature-256` and records one code change per "
        "attributable commit. `ping` events are acknowledged without verification."
    ),
)
async def github_webhook(
    request: Request,
    db: DbSession,
    settings: AppSettings,
    x_github_event: Annotated[Optional[str], Header()] = None,
    x_hub_signature_256: Annotated[Optional[str], Header()] = None,
) -> PushResult | MessageResponse:
    """Process a GitHub webhook delivery."""
    body = await request.body()

    if x_github_event == "ping":
        return MessageResponse(message="Pong!")

    if not verify_github_signature(body, x_hub_signature_256, settings.github_webhook_secret):
        logger.warning("github_signature_rejected", github_event=x_github_event)
        raise AuthenticationError(message="Invalid signature", code="INVALID_SIGNATURE")

    if x_github_event != "push":
        return MessageResponse(message="Ignored event type")

    try:
        event = PushEvent.model_validate_json(body)
    except PydanticValidationError:
        raise ValidationError(message="Invalid push payload")

    ingest = GitHubIngestService(db, settings.developer_aliases)
    created = await ingest.process_push(event)

    return PushResult(message="Processed push event", changes_created=created)


@router.post(
    "/discord",
    summary="Discord interactions endpoint",
    description="Verifies the Ed25519 signature, answers pings and handles feature request buttons.",
)
async def discord_webhook(
    request: Request,
    db: DbSession,
    settings: AppSettings,
    notifier: Notifier,
    x_signature_ed25519: Annotated[Optional[str], Header()] = None,
    x_signature_timestamp: Annotated[Optional[str], Header()] = None,
) -> dict[str, Any]:
    """Process a Discord interaction."""
    body = await request.body()

    if not x_signature_ed25519 or not x_signature_timestamp:
        raise AuthenticationError(message="Missing signature headers", code="INVALID_SIGNATURE")

    if not settings.discord_public_key:
        logger.error("discord_public_key_missing")
        raise InternalError(message="Configuration error", code="CONFIGURATION_ERROR")

    if not verify_discord_signature(
        body,
        x_signature_ed25519,
        x_signature_timestamp,
        settings.discord_public_key,
    ):
        logger.warning("discord_signature_rejected")
        raise AuthenticationError(message="Invalid request signature", code="INVALID_SIGNATURE")

    try:
        interaction = Interaction.model_validate_json(body)
    except PydanticValidationError:
        raise ValidationError(message="Unknown interaction", code="UNKNOWN_INTERACTION")

    return await handle_interaction(interaction, FeatureService(db, notifier))
