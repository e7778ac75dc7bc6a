"""Authentication API endpoints."""

from fastapi import APIRouter

from tracker.api.deps import DbSession, Policy
from tracker.schemas.auth import AccountSummary, AuthResponse, LoginRequest, RegisterRequest
from tracker.services.auth import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    summary="Register a developer",
    description=(
        "Create one of the allowed developer accounts. Requires the shared "
        "registration secret; the username must equal the developer type."
    ),
)
async def register(
    data: RegisterRequest,
    db: DbSession,
    policy: Policy,
) -> AuthResponse:
    """Register a developer and return a token."""
    auth_service = AuthService(db)
    account, token = await auth_service.register(data, policy)

    return AuthResponse(
        message="Registration successful",
        token=token,
        user=AccountSummary.model_validate(account),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login to get a token",
    description="Authenticate with email or username and password.",
)
async def login(
    data: LoginRequest,
    db: DbSession,
) -> AuthResponse:
    """Login and return a token."""
    auth_service = AuthService(db)
    account, token = await auth_service.authenticate(data)

    return AuthResponse(
        message="Welcome back, hero!",
        token=token,
        user=AccountSummary.model_validate(account),
    )
