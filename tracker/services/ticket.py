"""Ticket service for bug report operations."""

import uuid
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.exceptions import NotFoundError
from tracker.models.account import DeveloperTag
from tracker.models.ticket import BugTicket, TicketStatus
from tracker.schemas.ticket import TicketCreate, TicketStats, TicketStatusUpdate, TicketUpdate
from tracker.services.discord import DiscordNotifier

logger = structlog.get_logger()


class TicketService:
    """
    Service for bug ticket operations.

    Writes are committed before the notifier runs, so a Discord failure can
    never undo them. The returned message id is stored in a second commit.
    """

    def __init__(self, db: AsyncSession, notifier: DiscordNotifier):
        self.db = db
        self.notifier = notifier

    async def get_by_id(self, ticket_id: uuid.UUID) -> Optional[BugTicket]:
        """Get ticket by ID."""
        result = await self.db.execute(select(BugTicket).where(BugTicket.id == ticket_id))
        return result.scalar_one_or_none()

    async def get_or_404(self, ticket_id: uuid.UUID) -> BugTicket:
        """Get ticket by ID or raise NotFoundError."""
        ticket = await self.get_by_id(ticket_id)
        if not ticket:
            raise NotFoundError(resource="Ticket")
        return ticket

    async def list_tickets(
        self,
        developer: Optional[DeveloperTag] = None,
        status: Optional[TicketStatus] = None,
        archived: Optional[bool] = None,
    ) -> list[BugTicket]:
        """List tickets newest first, optionally filtered."""
        query = select(BugTicket)

        if developer is not None:
            query = query.where(BugTicket.developer == developer)
        if status is not None:
            query = query.where(BugTicket.status == status)
        if archived is not None:
            query = query.where(BugTicket.is_archived == archived)

        result = await self.db.execute(query.order_by(BugTicket.created_at.desc()))
        return list(result.scalars().all())

    async def _save(self, ticket: BugTicket) -> BugTicket:
        await self.db.flush()
        await self.db.refresh(ticket)
        await self.db.commit()
        return ticket

    async def create(
        self,
        data: TicketCreate,
        reporter_account_id: Optional[uuid.UUID] = None,
    ) -> BugTicket:
        """
        File a new bug report.

        Args:
            data: Validated ticket data
            reporter_account_id: Account of an authenticated reporter, if any

        Returns:
            Created ticket (with its Discord message id when the post succeeded)
        """
        values = data.model_dump()
        values["description"] = values["description"] or data.current_behavior

        ticket = BugTicket(
            **values,
            reporter_account_id=reporter_account_id,
            status=TicketStatus.OPEN,
            is_archived=False,
        )
        self.db.add(ticket)
        await self._save(ticket)

        logger.info("ticket_created", ticket_id=str(ticket.id), developer=ticket.developer.value)

        message_id = await self.notifier.ticket_created(ticket)
        if message_id:
            ticket.discord_message_id = message_id
            await self._save(ticket)

        return ticket

    async def change_status(self, ticket: BugTicket, data: TicketStatusUpdate) -> BugTicket:
        """
        Move a ticket between open, in-progress and resolved.

        Resolving archives the ticket and records the reason; any other status
        reopens it. Resolving an already resolved ticket changes nothing.
        """
        if data.status == TicketStatus.RESOLVED and ticket.is_resolved:
            return ticket

        resolving = data.status == TicketStatus.RESOLVED
        reopening = ticket.is_resolved and not resolving
        ticket.status = data.status
        ticket.is_archived = resolving
        ticket.resolve_reason = data.resolve_reason if resolving else None
        await self._save(ticket)

        logger.info("ticket_status_changed", ticket_id=str(ticket.id), status=ticket.status.value)

        if resolving:
            await self._archive_message(ticket)
        elif reopening and not ticket.discord_message_id:
            message_id = await self.notifier.ticket_created(ticket)
            if message_id:
                ticket.discord_message_id = message_id
                await self._save(ticket)
        else:
            await self.notifier.ticket_updated(ticket)
        return ticket

    async def _archive_message(self, ticket: BugTicket) -> None:
        """Move the mirror to the archive channel and drop the dead message id."""
        if await self.notifier.ticket_resolved(ticket, ticket.resolve_reason):
            ticket.discord_message_id = None
            await self._save(ticket)

    async def update(self, ticket: BugTicket, data: TicketUpdate) -> BugTicket:
        """Apply a partial update of the descriptive fields."""
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(ticket, field, value)
        await self._save(ticket)

        logger.info("ticket_updated", ticket_id=str(ticket.id))

        await self.notifier.ticket_updated(ticket)
        return ticket

    async def archive(self, ticket: BugTicket) -> BugTicket:
        """Soft delete: resolve and archive. Archiving twice is a no-op."""
        if ticket.is_archived:
            return ticket

        ticket.is_archived = True
        ticket.status = TicketStatus.RESOLVED
        await self._save(ticket)

        logger.info("ticket_archived", ticket_id=str(ticket.id))

        await self._archive_message(ticket)
        return ticket

    async def delete(self, ticket: BugTicket) -> None:
        """Hard delete: remove the row and its Discord message."""
        await self.db.delete(ticket)
        await self.db.flush()
        await self.db.commit()

        logger.info("ticket_deleted", ticket_id=str(ticket.id))

        await self.notifier.ticket_deleted(ticket)

    async def stats(self) -> TicketStats:
        """Count tickets by status, developer, class and resolve reason."""

        async def grouped(column) -> dict[str, int]:
            result = await self.db.execute(
                select(column, func.count(BugTicket.id)).group_by(column)
            )
            counts = {}
            for key, count in result.all():
                if key is None:
                    continue
                counts[getattr(key, "value", key)] = count
            return counts

        by_status = await grouped(BugTicket.status)
        total = sum(by_status.values())
        archived_result = await self.db.execute(
            select(func.count(BugTicket.id)).where(BugTicket.is_archived.is_(True))
        )
        archived = archived_result.scalar() or 0

        return TicketStats(
            total=total,
            archived=archived,
            active=total - archived,
            by_status=by_status,
            by_developer=await grouped(BugTicket.developer),
            by_class=await grouped(func.lower(BugTicket.wow_class)),
            by_resolve_reason=await grouped(BugTicket.resolve_reason),
        )
