"""Feature request service."""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.exceptions import NotFoundError
from tracker.models.feature import FeatureRequest, FeatureStatus
from tracker.schemas.feature import FeatureCreate
from tracker.services.discord import DiscordNotifier

logger = structlog.get_logger()


class FeatureService:
    """Service for feature request operations."""

    def __init__(self, db: AsyncSession, notifier: DiscordNotifier):
        self.db = db
        self.notifier = notifier

    async def get_by_id(self, feature_id: uuid.UUID) -> Optional[FeatureRequest]:
        """Get feature request by ID."""
        result = await self.db.execute(
            select(FeatureRequest).where(FeatureRequest.id == feature_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(
        self,
        feature_id: uuid.UUID,
        include_private: bool = True,
    ) -> FeatureRequest:
        """Get feature request by ID or raise NotFoundError (private ones hidden on request)."""
        feature = await self.get_by_id(feature_id)
        if not feature or (feature.is_private and not include_private):
            raise NotFoundError(resource="Feature request")
        return feature

    async def list_features(self, include_private: bool = False) -> list[FeatureRequest]:
        """List feature requests newest first."""
        query = select(FeatureRequest)
        if not include_private:
            query = query.where(FeatureRequest.is_private.is_(False))
        result = await self.db.execute(query.order_by(FeatureRequest.created_at.desc()))
        return list(result.scalars().all())

    async def _save(self, feature: FeatureRequest) -> FeatureRequest:
        await self.db.flush()
        await self.db.refresh(feature)
        await self.db.commit()
        return feature

    async def create(self, data: FeatureCreate) -> FeatureRequest:
        """Store a feature request, then post it with accept/reject buttons."""
        feature = FeatureRequest(**data.model_dump(), status=FeatureStatus.OPEN)
        self.db.add(feature)
        await self._save(feature)

        logger.info("feature_created", feature_id=str(feature.id), developer=feature.developer.value)

        message_id = await self.notifier.feature_created(feature)
        if message_id:
            feature.discord_message_id = message_id
            await self._save(feature)

        return feature

    async def set_status(self, feature: FeatureRequest, status: FeatureStatus) -> FeatureRequest:
        """Change the status and refresh the mirrored message."""
        feature.status = status
        await self._save(feature)

        logger.info("feature_status_changed", feature_id=str(feature.id), status=status.value)

        await self.notifier.feature_updated(feature)
        return feature

    async def delete(self, feature: FeatureRequest) -> None:
        """Remove the request and its Discord message."""
        await self.db.delete(feature)
        await self.db.flush()
        await self.db.commit()

        logger.info("feature_deleted", feature_id=str(feature.id))

        await self.notifier.feature_deleted(feature)
