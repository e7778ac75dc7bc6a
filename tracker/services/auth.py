"""Credential store: developer registration, login and profile lookup."""

import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.config import RegistrationPolicy
from tracker.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from tracker.core.security import (
    TokenClaims,
    create_token,
    hash_password,
    needs_rehash,
    verify_password,
)
from tracker.middleware.audit_logger import log_auth_event
from tracker.models.account import Account, DeveloperTag, Profile
from tracker.schemas.auth import LoginRequest, RegisterRequest


def claims_for(account: Account) -> TokenClaims:
    """Token claims describing an account."""
    return TokenClaims(
        id=str(account.id),
        username=account.username,
        email=account.email,
        developer_type=account.developer_type.value,
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(
        self,
        data: RegisterRequest,
        policy: RegistrationPolicy,
    ) -> tuple[Account, str]:
        """
        Register one of the allowed developers.

        Args:
            data: Registration data
            policy: Allow-list and shared secret

        Returns:
            Tuple of (created account, token)

        Raises:
            ForbiddenError: Wrong secret or username not on the allow-list
            ValidationError: Username does not equal the developer type
            ConflictError: Email or username already registered
        """
        if not policy.secret or data.registration_secret != policy.secret:
            raise ForbiddenError(
                message="Invalid registration secret",
                code="INVALID_REGISTRATION_SECRET",
            )

        username = data.username.lower()
        if not policy.allows(username):
            raise ForbiddenError(
                message="Registration is not allowed for this username",
                code="REGISTRATION_NOT_ALLOWED",
            )

        if username != data.developer_type.lower():
            raise ValidationError(
                message=f"Username must be '{data.developer_type}'",
                details=[{"field": "username", "message": "Username must equal the developer type"}],
            )

        try:
            developer_type = DeveloperTag(username)
        except ValueError:
            raise ValidationError(
                message=f"Unknown developer type '{data.developer_type}'",
                details=[{"field": "developer_type", "message": "Not a known developer"}],
            )

        email = data.email.lower()
        existing = await self.db.execute(
            select(Account.id).where(
                or_(Account.email == email, Account.username == username)
            )
        )
        if existing.first() is not None:
            raise ConflictError(
                message="An account with this email or username already exists",
                code="ACCOUNT_EXISTS",
            )

        account = Account(
            username=username,
            email=email,
            password_hash=hash_password(data.password),
            developer_type=developer_type,
        )
        self.db.add(account)
        await self.db.flush()

        self.db.add(
            Profile(
                account_id=account.id,
                username=account.username,
                developer_type=account.developer_type,
            )
        )
        await self.db.flush()
        await self.db.refresh(account)

        log_auth_event("register", user_id=str(account.id), username=username)

        return account, create_token(claims_for(account))

    async def authenticate(self, data: LoginRequest) -> tuple[Account, str]:
        """
        Authenticate by email or username.

        Args:
            data: Login data; an identifier containing ``@`` is an email

        Returns:
            Tuple of (account, token)

        Raises:
            AuthenticationError: Unknown identifier or wrong password
        """
        identifier = data.identifier.lower()
        column = Account.email if "@" in identifier else Account.username

        result = await self.db.execute(select(Account).where(column == identifier))
        account = result.scalar_one_or_none()

        if not account or not verify_password(data.password, account.password_hash):
            log_auth_event("login", username=identifier, success=False, reason="invalid_credentials")
            raise AuthenticationError(message="Invalid credentials", code="INVALID_CREDENTIALS")

        # Check if password needs rehashing
        if needs_rehash(account.password_hash):
            account.password_hash = hash_password(data.password)
            await self.db.flush()

        log_auth_event("login", user_id=str(account.id), username=account.username)

        return account, create_token(claims_for(account))

    async def get_account(self, account_id: uuid.UUID) -> Optional[Account]:
        """Get account by ID."""
        result = await self.db.execute(select(Account).where(Account.id == account_id))
        return result.scalar_one_or_none()

    async def get_profile(self, account_id: uuid.UUID) -> Optional[Profile]:
        """Get the profile belonging to an account."""
        result = await self.db.execute(
            select(Profile).where(Profile.account_id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_profile_or_404(self, account_id: uuid.UUID) -> Profile:
        """Get the profile of an account or raise NotFoundError."""
        profile = await self.get_profile(account_id)
        if not profile:
            raise NotFoundError(resource="Profile")
        return profile
