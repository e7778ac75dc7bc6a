"""Account and profile model definitions."""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from tracker.database import Base
from tracker.models.types import GUID, value_enum


class DeveloperTag(str, enum.Enum):
    """The two developers; also the routing key for tickets and channels."""

    ASTRO = "astro"
    BUNGEE = "bungee"


class Account(Base):
    """Developer account used for authentication."""

    __tablename__ = "accounts"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )

    # Credentials
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    developer_type: Mapped[DeveloperTag] = mapped_column(
        value_enum(DeveloperTag, "developer_tag"),
        nullable=False,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, username={self.username})>"


class Profile(Base):
    """Public developer profile, one per account."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )

    # Account reference (no cascade: profiles outlive their account)
    account_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("accounts.id"),
        unique=True,
        nullable=False,
        index=True,
    )

    # Copied from the account so lookups need no join
    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    developer_type: Mapped[DeveloperTag] = mapped_column(
        value_enum(DeveloperTag, "developer_tag"),
        nullable=False,
    )
    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username={self.username})>"
