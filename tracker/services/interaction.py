"""Discord interaction handling (feature request buttons)."""

from typing import Any, Optional

import structlog

from tracker.core.exceptions import NotFoundError, ValidationError
from tracker.models.feature import FeatureStatus
from tracker.schemas.webhook import Interaction
from tracker.services.feature import FeatureService
from tracker.utils.validators import validate_uuid

logger = structlog.get_logger()

PING = 1
MESSAGE_COMPONENT = 3

PONG = 1
CHANNEL_MESSAGE_WITH_SOURCE = 4
EPHEMERAL = 64

BUTTON_ACTIONS = {
    "accept": FeatureStatus.ACCEPTED,
    "reject": FeatureStatus.REJECTED,
}


def parse_feature_button(custom_id: Optional[str]) -> Optional[tuple[FeatureStatus, str]]:
    """Split ``feature_{accept|reject}_{id}`` into (status, raw id)."""
    if not custom_id:
        return None
    parts = custom_id.split("_", 2)
    if len(parts) != 3 or parts[0] != "feature" or parts[1] not in BUTTON_ACTIONS:
        return None
    return BUTTON_ACTIONS[parts[1]], parts[2]


async def handle_interaction(interaction: Interaction, features: FeatureService) -> dict[str, Any]:
    """
    Answer a verified Discord interaction.

    Raises:
        NotFoundError: The button refers to an unknown feature request
        ValidationError: Anything other than a ping or a feature button
    """
    if interaction.type == PING:
        return {"type": PONG}

    if interaction.type == MESSAGE_COMPONENT and interaction.data is not None:
        parsed = parse_feature_button(interaction.data.custom_id)
        if parsed is not None:
            status, raw_id = parsed
            feature_id = validate_uuid(raw_id)
            feature = await features.get_by_id(feature_id) if feature_id else None
            if feature is None:
                raise NotFoundError(resource="Feature request")

            await features.set_status(feature, status)
            logger.info(
                "feature_decided_in_discord",
                feature_id=str(feature.id),
                status=status.value,
                actor=interaction.actor_id,
            )

            actor = f" by <@{interaction.actor_id}>" if interaction.actor_id else ""
            return {
                "type": CHANNEL_MESSAGE_WITH_SOURCE,
                "data": {
                    "content": f'Feature request "{feature.title}" has been {status.value}{actor}.',
                    "flags": EPHEMERAL,
                },
            }

    raise ValidationError(message="Unknown interaction", code="UNKNOWN_INTERACTION")
