"""Password hashing and developer token utilities."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import JWTError, jwt
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tracker.config import settings

# Initialize Argon2 password hasher with secure defaults
password_hasher = PasswordHasher(
    time_cost=3,  # Number of iterations
    memory_cost=65536,  # 64 MB
    parallelism=4,  # Number of parallel threads
    hash_len=32,  # Length of the hash in bytes
    salt_len=16,  # Length of the salt in bytes
)


class TokenClaims(BaseModel):
    """Identity claims carried by a developer token."""

    id: str
    username: str
    email: str
    developer_type: str


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Every call draws a fresh random salt, so equal passwords hash differently.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return password_hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    try:
        password_hasher.verify(hashed_password, password)
        return True
    except (VerificationError, InvalidHashError):
        return False


def create_token(
    claims: TokenClaims,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed developer token.

    Args:
        claims: Identity claims to embed
        expires_delta: Optional custom lifetime (defaults to the configured days)

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(days=settings.token_expire_days)

    payload = {
        **claims.model_dump(),
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[TokenClaims]:
    """
    Verify a developer token.

    Never raises: a bad signature, an expired token or a malformed payload
    all yield None so callers can treat the request as anonymous.

    Args:
        token: Encoded JWT

    Returns:
        The embedded claims, or None
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return TokenClaims.model_validate(payload)
    except (JWTError, PydanticValidationError):
        return None


def extract_token(header_value: Optional[str]) -> Optional[str]:
    """
    Extract the token from an ``Authorization`` header.

    Args:
        header_value: Raw header value

    Returns:
        The token if the header is exactly ``Bearer <token>``, otherwise None
    """
    if not header_value:
        return None

    parts = header_value.split(" ")
    if len(parts) == 2 and parts[0] == "Bearer" and parts[1]:
        return parts[1]
    return None


def needs_rehash(hashed_password: str) -> bool:
    """
    Check if a password hash needs to be rehashed.

    This is useful when updating hashing parameters.
    """
    return password_hasher.check_needs_rehash(hashed_password)
