"""Code change log model definition."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.database import Base
from tracker.models.types import GUID, value_enum

if TYPE_CHECKING:
    from tracker.models.account import Profile


class ChangeType(str, enum.Enum):
    """Kind of change recorded in the activity log."""

    FIX = "fix"
    FEATURE = "feature"
    DELETE = "delete"
    CREATE = "create"
    UPDATE = "update"


class CodeChange(Base):
    """Entry of the code change activity log."""

    __tablename__ = "code_changes"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )

    # Owning profile (no cascade)
    developer_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("profiles.id"),
        nullable=False,
        index=True,
    )

    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    change_description: Mapped[str] = mapped_column(Text, nullable=False)
    change_type: Mapped[ChangeType] = mapped_column(
        value_enum(ChangeType, "change_type"),
        nullable=False,
    )

    related_ticket_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(),
        ForeignKey("bug_tickets.id", ondelete="SET NULL"),
        nullable=True,
    )
    github_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    developer: Mapped["Profile"] = relationship(
        "Profile",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<CodeChange(id={self.id}, file_path={self.file_path}, type={self.change_type})>"
