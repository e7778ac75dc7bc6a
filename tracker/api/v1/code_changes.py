"""Code change log API endpoints."""

import uuid

from fastapi import APIRouter

from tracker.api.deps import CurrentDeveloper, DbSession, Notifier, account_id_of
from tracker.schemas.code_change import (
    CodeChangeCreate,
    CodeChangeEnvelope,
    CodeChangeResponse,
)
from tracker.schemas.common import MessageResponse
from tracker.services.auth import AuthService
from tracker.services.code_change import CodeChangeService

router = APIRouter()


@router.get(
    "",
    response_model=list[CodeChangeResponse],
    summary="Recent code changes",
    description="The 50 newest entries with the developer's username and type.",
)
async def list_code_changes(db: DbSession) -> list[CodeChangeResponse]:
    """List recent code changes."""
    changes = await CodeChangeService(db).list_recent()
    return [CodeChangeResponse.model_validate(c) for c in changes]


@router.post(
    "",
    response_model=CodeChangeEnvelope,
    status_code=201,
    summary="Log a code change",
)
async def create_code_change(
    data: CodeChangeCreate,
    current_developer: CurrentDeveloper,
    db: DbSession,
    notifier: Notifier,
) -> CodeChangeEnvelope:
    """Log a change under the caller's profile."""
    profile = await AuthService(db).get_profile_or_404(account_id_of(current_developer))

    change = await CodeChangeService(db, notifier).create(data, profile)

    return CodeChangeEnvelope(
        message="Code change logged!",
        change=CodeChangeResponse.model_validate(change),
    )


@router.delete(
    "/{change_id}",
    response_model=MessageResponse,
    summary="Delete a code change",
)
async def delete_code_change(
    change_id: uuid.UUID,
    current_developer: CurrentDeveloper,
    db: DbSession,
) -> MessageResponse:
    """Delete a code change entry."""
    change_service = CodeChangeService(db)
    change = await change_service.get_or_404(change_id)

    await change_service.delete(change)

    return MessageResponse(message="Entry deleted")
