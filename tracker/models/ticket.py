"""Bug ticket model definition."""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from tracker.database import Base
from tracker.models.account import DeveloperTag
from tracker.models.types import GUID, value_enum


class TicketStatus(str, enum.Enum):
    """Ticket status enumeration."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class TicketPriority(str, enum.Enum):
    """Ticket priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class GameMode(str, enum.Enum):
    """Whether the rotation was used in PvE or PvP."""

    PVE = "pve"
    PVP = "pvp"


class Expansion(str, enum.Enum):
    """Game flavour the report applies to."""

    TBC = "tbc"
    ERA = "era"
    HC = "hc"


class ResolveReason(str, enum.Enum):
    """Why a ticket was resolved."""

    NO_RESPONSE = "no_response"
    NOT_REPRODUCIBLE = "not_reproducible"
    USER_SIDE = "user_side"
    FIXED = "fixed"


class BugTicket(Base):
    """Bug report filed against one developer's rotations."""

    __tablename__ = "bug_tickets"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )

    # Routing
    developer: Mapped[DeveloperTag] = mapped_column(
        value_enum(DeveloperTag, "developer_tag"),
        nullable=False,
        index=True,
    )

    # Game context
    wow_class: Mapped[str] = mapped_column(String(50), nullable=False)
    rotation: Mapped[str] = mapped_column(String(100), nullable=False)
    pvpve_mode: Mapped[GameMode] = mapped_column(value_enum(GameMode, "game_mode"), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=80)
    expansion: Mapped[Expansion] = mapped_column(value_enum(Expansion, "expansion"), nullable=False)

    # Report
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    current_behavior: Mapped[str] = mapped_column(Text, nullable=False)
    expected_behavior: Mapped[str] = mapped_column(Text, nullable=False)
    logs: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    screenshot_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Reporter
    discord_username: Mapped[str] = mapped_column(String(100), nullable=False)
    sylvanas_username: Mapped[str] = mapped_column(String(100), nullable=False)
    reporter_name: Mapped[str] = mapped_column(String(100), nullable=False)
    reporter_account_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(),
        ForeignKey("accounts.id"),
        nullable=True,
    )

    # Workflow
    priority: Mapped[TicketPriority] = mapped_column(
        value_enum(TicketPriority, "ticket_priority"),
        nullable=False,
        default=TicketPriority.MEDIUM,
    )
    status: Mapped[TicketStatus] = mapped_column(
        value_enum(TicketStatus, "ticket_status"),
        nullable=False,
        default=TicketStatus.OPEN,
        index=True,
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )
    resolve_reason: Mapped[Optional[ResolveReason]] = mapped_column(
        value_enum(ResolveReason, "resolve_reason"),
        nullable=True,
    )

    # Id of the mirrored Discord message
    discord_message_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

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
        return f"<BugTicket(id={self.id}, title={self.title}, status={self.status})>"

    @property
    def is_resolved(self) -> bool:
        """Check if the ticket is resolved."""
        return self.status == TicketStatus.RESOLVED
