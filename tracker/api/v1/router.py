"""API router combining all endpoint routers."""

from fastapi import APIRouter

from tracker.api.v1 import auth, code_changes, features, guides, tickets, users, webhooks
from tracker.schemas.common import ErrorResponse

# Every error is rendered in the common error shape
router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)

# Include all routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(tickets.router, prefix="/bugs", tags=["Bug Tickets"])
router.include_router(features.router, prefix="/features", tags=["Feature Requests"])
router.include_router(code_changes.router, prefix="/code-changes", tags=["Code Changes"])
router.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])
router.include_router(guides.router, prefix="/guides", tags=["Guides"])
