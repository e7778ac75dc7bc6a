"""Bug ticket API endpoints."""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Query

from tracker.api.deps import CurrentDeveloper, DbSession, Notifier, OptionalDeveloper, account_id_of
from tracker.models.account import DeveloperTag
from tracker.models.ticket import TicketStatus
from tracker.schemas.common import MessageResponse
from tracker.schemas.ticket import (
    TicketCreate,
    TicketEnvelope,
    TicketResponse,
    TicketStats,
    TicketStatusUpdate,
    TicketUpdate,
)
from tracker.services.ticket import TicketService

router = APIRouter()


@router.get(
    "/tickets",
    response_model=list[TicketResponse],
    summary="List bug tickets",
    description="Public list of tickets, newest first, with optional filters.",
)
async def list_tickets(
    db: DbSession,
    notifier: Notifier,
    developer: Annotated[Optional[DeveloperTag], Query()] = None,
    status: Annotated[Optional[TicketStatus], Query()] = None,
    archived: Annotated[Optional[bool], Query()] = None,
) -> list[TicketResponse]:
    """List tickets."""
    ticket_service = TicketService(db, notifier)
    tickets = await ticket_service.list_tickets(developer=developer, status=status, archived=archived)
    return [TicketResponse.model_validate(t) for t in tickets]


@router.get(
    "/stats",
    response_model=TicketStats,
    summary="Ticket statistics",
    description="Counts by status, developer, class and resolve reason. Archived tickets are included.",
)
async def ticket_stats(
    db: DbSession,
    notifier: Notifier,
) -> TicketStats:
    """Get ticket statistics."""
    return await TicketService(db, notifier).stats()


@router.post(
    "/tickets",
    response_model=TicketEnvelope,
    status_code=201,
    summary="File a bug report",
    description="Public. A valid bearer token links the report to the reporter's account.",
)
async def create_ticket(
    data: TicketCreate,
    db: DbSession,
    notifier: Notifier,
    reporter: OptionalDeveloper,
) -> TicketEnvelope:
    """Create a ticket and mirror it to Discord."""
    ticket_service = TicketService(db, notifier)
    reporter_id = account_id_of(reporter) if reporter else None

    ticket = await ticket_service.create(data, reporter_account_id=reporter_id)

    return TicketEnvelope(
        message="Bug report successfully created!",
        ticket=TicketResponse.model_validate(ticket),
    )


@router.get(
    "/tickets/{ticket_id}",
    response_model=TicketResponse,
    summary="Get ticket details",
)
async def get_ticket(
    ticket_id: uuid.UUID,
    db: DbSession,
    notifier: Notifier,
) -> TicketResponse:
    """Get a ticket by ID."""
    ticket = await TicketService(db, notifier).get_or_404(ticket_id)
    return TicketResponse.model_validate(ticket)


@router.patch(
    "/tickets/{ticket_id}",
    response_model=TicketEnvelope,
    summary="Change ticket status",
    description=(
        "Resolving archives the ticket and records the optional resolve reason; "
        "any other status reopens it."
    ),
)
async def change_ticket_status(
    ticket_id: uuid.UUID,
    data: TicketStatusUpdate,
    current_developer: CurrentDeveloper,
    db: DbSession,
    notifier: Notifier,
) -> TicketEnvelope:
    """Change a ticket's status."""
    ticket_service = TicketService(db, notifier)
    ticket = await ticket_service.get_or_404(ticket_id)

    ticket = await ticket_service.change_status(ticket, data)

    return TicketEnvelope(
        message="Status updated",
        ticket=TicketResponse.model_validate(ticket),
    )


@router.put(
    "/tickets/{ticket_id}",
    response_model=TicketEnvelope,
    summary="Edit a ticket",
    description="Partial update of the descriptive fields.",
)
async def update_ticket(
    ticket_id: uuid.UUID,
    data: TicketUpdate,
    current_developer: CurrentDeveloper,
    db: DbSession,
    notifier: Notifier,
) -> TicketEnvelope:
    """Update a ticket."""
    ticket_service = TicketService(db, notifier)
    ticket = await ticket_service.get_or_404(ticket_id)

    ticket = await ticket_service.update(ticket, data)

    return TicketEnvelope(
        message="Ticket updated",
        ticket=TicketResponse.model_validate(ticket),
    )


@router.delete(
    "/tickets/{ticket_id}",
    response_model=MessageResponse,
    summary="Archive or delete a ticket",
    description="Archives (resolves) the ticket; `hard=true` removes it permanently.",
)
async def delete_ticket(
    ticket_id: uuid.UUID,
    current_developer: CurrentDeveloper,
    db: DbSession,
    notifier: Notifier,
    hard: Annotated[bool, Query()] = False,
) -> MessageResponse:
    """Archive or permanently delete a ticket."""
    ticket_service = TicketService(db, notifier)
    ticket = await ticket_service.get_or_404(ticket_id)

    if hard:
        await ticket_service.delete(ticket)
        return MessageResponse(message="Ticket deleted")

    await ticket_service.archive(ticket)
    return MessageResponse(message="Ticket archived")
