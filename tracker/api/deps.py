"""API dependencies for authentication and service wiring."""

import uuid
from typing import Annotated, Optional

import httpx
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.config import RegistrationPolicy, Settings, get_settings
from tracker.core.exceptions import AuthenticationError
from tracker.core.security import TokenClaims, extract_token, verify_token
from tracker.database import get_db
from tracker.http import get_http_client
from tracker.services.discord import DiscordNotifier
from tracker.services.guide import GuideService

# HTTP Bearer token security scheme (header parsed by extract_token)
security = HTTPBearer(auto_error=False)


def _claims_from_request(request: Request) -> Optional[TokenClaims]:
    token = extract_token(request.headers.get("Authorization"))
    if not token:
        return None
    return verify_token(token)


async def get_current_developer(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> TokenClaims:
    """
    Get the authenticated developer from the bearer token.

    The token is self-contained; no database lookup is made.

    Raises:
        AuthenticationError: If the token is missing, malformed or expired
    """
    if not credentials:
        raise AuthenticationError(message="Authentication required")

    claims = _claims_from_request(request)
    if claims is None:
        raise AuthenticationError(message="Invalid or expired token", code="INVALID_TOKEN")

    # Store developer ID in request state for logging
    request.state.user_id = claims.id

    return claims


async def get_optional_developer(request: Request) -> Optional[TokenClaims]:
    """
    Get the developer if a valid token is present, otherwise None.

    Invalid tokens are treated exactly like missing ones.
    """
    claims = _claims_from_request(request)
    if claims is not None:
        request.state.user_id = claims.id
    return claims


def get_registration_policy(
    settings: Annotated[Settings, Depends(get_settings)],
) -> RegistrationPolicy:
    """Registration allow-list and secret."""
    return settings.registration_policy


def get_notifier(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DiscordNotifier:
    """Discord notifier on the shared HTTP client."""
    return DiscordNotifier(client, settings)


def get_guide_service(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> GuideService:
    """Guide assistant on the shared HTTP client."""
    return GuideService(client, settings)


def account_id_of(claims: TokenClaims) -> uuid.UUID:
    """Account UUID carried by a token."""
    try:
        return uuid.UUID(claims.id)
    except ValueError:
        raise AuthenticationError(message="Invalid user ID in token", code="INVALID_TOKEN")


# Type aliases for common dependencies
CurrentDeveloper = Annotated[TokenClaims, Depends(get_current_developer)]
OptionalDeveloper = Annotated[Optional[TokenClaims], Depends(get_optional_developer)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Policy = Annotated[RegistrationPolicy, Depends(get_registration_policy)]
Notifier = Annotated[DiscordNotifier, Depends(get_notifier)]
Guides = Annotated[GuideService, Depends(get_guide_service)]
