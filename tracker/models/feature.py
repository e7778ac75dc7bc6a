"""Feature request model definition."""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from tracker.database import Base
from tracker.models.account import DeveloperTag
from tracker.models.types import GUID, value_enum


class FeatureStatus(str, enum.Enum):
    """Feature request status enumeration."""

    OPEN = "open"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FeatureCategory(str, enum.Enum):
    """Area of the add-on a feature request targets."""

    CLASS = "class"
    ESP = "esp"
    FISHINGBOT = "fishingbot"
    OTHER = "other"


class FeatureRequest(Base):
    """Feature request submitted by the community."""

    __tablename__ = "feature_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )

    developer: Mapped[DeveloperTag] = mapped_column(
        value_enum(DeveloperTag, "developer_tag"),
        nullable=False,
        index=True,
    )
    category: Mapped[FeatureCategory] = mapped_column(
        value_enum(FeatureCategory, "feature_category"),
        nullable=False,
        default=FeatureCategory.CLASS,
    )
    wow_class: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Hidden from the public listing
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    status: Mapped[FeatureStatus] = mapped_column(
        value_enum(FeatureStatus, "feature_status"),
        nullable=False,
        default=FeatureStatus.OPEN,
        index=True,
    )

    discord_username: Mapped[str] = mapped_column(String(100), nullable=False)
    sylvanas_username: Mapped[str] = mapped_column(String(100), nullable=False)
    discord_message_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

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
        return f"<FeatureRequest(id={self.id}, title={self.title}, status={self.status})>"

    @property
    def is_decided(self) -> bool:
        """Check if the request has been accepted or rejected."""
        return self.status != FeatureStatus.OPEN
