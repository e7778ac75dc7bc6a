"""User profile endpoints."""

from fastapi import APIRouter

from tracker.api.deps import CurrentDeveloper, DbSession, account_id_of
from tracker.schemas.auth import AccountSummary, ProfileResponse
from tracker.services.auth import AuthService

router = APIRouter()


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get own profile",
    description="Get the profile of the authenticated developer together with the account.",
)
async def get_profile(
    current_developer: CurrentDeveloper,
    db: DbSession,
) -> ProfileResponse:
    """Get the caller's profile."""
    auth_service = AuthService(db)
    account_id = account_id_of(current_developer)

    profile = await auth_service.get_profile_or_404(account_id)
    account = await auth_service.get_account(account_id)

    response = ProfileResponse.model_validate(profile)
    if account is not None:
        response.user = AccountSummary.model_validate(account)
    return response
