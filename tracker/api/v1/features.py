"""Feature request API endpoints."""

import uuid

from fastapi import APIRouter

from tracker.api.deps import CurrentDeveloper, DbSession, Notifier, OptionalDeveloper
from tracker.schemas.common import MessageResponse
from tracker.schemas.feature import (
    FeatureCreate,
    FeatureEnvelope,
    FeatureResponse,
    FeatureStatusUpdate,
)
from tracker.services.feature import FeatureService

router = APIRouter()


@router.get(
    "",
    response_model=list[FeatureResponse],
    summary="List feature requests",
    description="Newest first. Private requests are only listed for authenticated developers.",
)
async def list_features(
    db: DbSession,
    notifier: Notifier,
    developer: OptionalDeveloper,
) -> list[FeatureResponse]:
    """List feature requests."""
    features = await FeatureService(db, notifier).list_features(include_private=developer is not None)
    return [FeatureResponse.model_validate(f) for f in features]


@router.post(
    "",
    response_model=FeatureEnvelope,
    status_code=201,
    summary="Submit a feature request",
)
async def create_feature(
    data: FeatureCreate,
    db: DbSession,
    notifier: Notifier,
) -> FeatureEnvelope:
    """Create a feature request and post it to Discord."""
    feature = await FeatureService(db, notifier).create(data)
    return FeatureEnvelope(
        message="Feature request successfully created!",
        feature=FeatureResponse.model_validate(feature),
    )


@router.get(
    "/{feature_id}",
    response_model=FeatureResponse,
    summary="Get feature request details",
)
async def get_feature(
    feature_id: uuid.UUID,
    db: DbSession,
    notifier: Notifier,
    developer: OptionalDeveloper,
) -> FeatureResponse:
    """Get a feature request by ID."""
    feature = await FeatureService(db, notifier).get_or_404(
        feature_id,
        include_private=developer is not None,
    )
    return FeatureResponse.model_validate(feature)


@router.patch(
    "/{feature_id}",
    response_model=FeatureEnvelope,
    summary="Change feature request status",
)
async def update_feature_status(
    feature_id: uuid.UUID,
    data: FeatureStatusUpdate,
    current_developer: CurrentDeveloper,
    db: DbSession,
    notifier: Notifier,
) -> FeatureEnvelope:
    """Accept, reject or reopen a feature request."""
    feature_service = FeatureService(db, notifier)
    feature = await feature_service.get_or_404(feature_id)

    feature = await feature_service.set_status(feature, data.status)

    return FeatureEnvelope(
        message="Status updated",
        feature=FeatureResponse.model_validate(feature),
    )


@router.delete(
    "/{feature_id}",
    response_model=MessageResponse,
    summary="Delete a feature request",
)
async def delete_feature(
    feature_id: uuid.UUID,
    current_developer: CurrentDeveloper,
    db: DbSession,
    notifier: Notifier,
) -> MessageResponse:
    """Permanently delete a feature request."""
    feature_service = FeatureService(db, notifier)
    feature = await feature_service.get_or_404(feature_id)

    await feature_service.delete(feature)

    return MessageResponse(message="Feature request deleted successfully")
