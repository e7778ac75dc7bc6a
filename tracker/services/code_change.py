"""Code change log service."""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tracker.core.exceptions import NotFoundError
from tracker.models.account import Profile
from tracker.models.code_change import ChangeType, CodeChange
from tracker.models.ticket import BugTicket
from tracker.schemas.code_change import CodeChangeCreate
from tracker.services.discord import DiscordNotifier

logger = structlog.get_logger()

RECENT_LIMIT = 50


class CodeChangeService:
    """Service for code change log operations."""

    def __init__(self, db: AsyncSession, notifier: Optional[DiscordNotifier] = None):
        self.db = db
        self.notifier = notifier

    async def get_by_id(self, change_id: uuid.UUID) -> Optional[CodeChange]:
        """Get code change by ID with its developer."""
        result = await self.db.execute(
            select(CodeChange)
            .options(selectinload(CodeChange.developer))
            .where(CodeChange.id == change_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, change_id: uuid.UUID) -> CodeChange:
        """Get code change by ID or raise NotFoundError."""
        change = await self.get_by_id(change_id)
        if not change:
            raise NotFoundError(resource="Code change")
        return change

    async def list_recent(self, limit: int = RECENT_LIMIT) -> list[CodeChange]:
        """Newest changes first, with developer username and type."""
        result = await self.db.execute(
            select(CodeChange)
            .options(selectinload(CodeChange.developer))
            .order_by(CodeChange.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def record(
        self,
        developer: Profile,
        file_path: str,
        description: str,
        change_type: ChangeType,
        related_ticket_id: Optional[uuid.UUID] = None,
        github_url: Optional[str] = None,
    ) -> CodeChange:
        """
        Persist and commit one change.

        Each row is committed on its own so earlier rows of a batch survive
        a later failure.
        """
        change = CodeChange(
            developer_id=developer.id,
            file_path=file_path,
            change_description=description,
            change_type=change_type,
            related_ticket_id=related_ticket_id,
            github_url=github_url,
        )
        self.db.add(change)
        await self.db.flush()
        await self.db.commit()

        # Load relationships
        result = await self.db.execute(
            select(CodeChange)
            .options(selectinload(CodeChange.developer))
            .where(CodeChange.id == change.id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def create(self, data: CodeChangeCreate, developer: Profile) -> CodeChange:
        """Log a change by hand and announce it."""
        if data.related_ticket_id is not None:
            ticket = await self.db.get(BugTicket, data.related_ticket_id)
            if ticket is None:
                raise NotFoundError(resource="Related ticket")

        change = await self.record(
            developer,
            file_path=data.file_path,
            description=data.change_description,
            change_type=data.change_type,
            related_ticket_id=data.related_ticket_id,
            github_url=data.github_url,
        )

        logger.info("code_change_logged", change_id=str(change.id), developer=developer.username)

        if self.notifier is not None:
            await self.notifier.code_change_logged(
                change,
                developer_name=developer.username,
                developer_type=developer.developer_type.value,
            )
        return change

    async def delete(self, change: CodeChange) -> None:
        """Remove a change."""
        await self.db.delete(change)
        await self.db.flush()

        logger.info("code_change_deleted", change_id=str(change.id))
