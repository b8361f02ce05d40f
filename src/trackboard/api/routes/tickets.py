"""Ticket endpoints, including the status update used by the board."""

from enum import StrEnum
from typing import TypeVar

from fastapi import APIRouter, Query
from fastapi import status as http_status

from trackboard.api.dependencies import StateStoreDep
from trackboard.api.models import (
    APIResponse,
    TicketAssign,
    TicketCreate,
    TicketResponse,
    TicketStatusUpdate,
    TicketUpdate,
    ticket_to_response,
)
from trackboard.board.models import TicketPriority, TicketStatus
from trackboard.state_store import UNSET

router = APIRouter(prefix="/tickets", tags=["tickets"])

E = TypeVar("E", bound=StrEnum)


def _known(enum_cls: type[E], value: str | None) -> E | None:
    """Return the enum member for ``value``; unknown filter values are ignored."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


@router.get("", response_model=APIResponse[list[TicketResponse]])
def list_tickets(
    store: StateStoreDep,
    project_id: str = Query(..., description="Project whose tickets to list"),
    status: str | None = Query(default=None, description="Filter by status"),
    priority: str | None = Query(default=None, description="Filter by priority"),
    assignee: str | None = Query(default=None, description="Filter by assignee ID"),
    search: str | None = Query(default=None, description="Match title or description"),
) -> APIResponse[list[TicketResponse]]:
    """List a project's tickets, newest first."""
    tickets = store.list_tickets(
        project_id,
        status=_known(TicketStatus, status),
        priority=_known(TicketPriority, priority),
        assignee_id=assignee or None,
        search=search or None,
    )
    return APIResponse(data=[ticket_to_response(t) for t in tickets])


@router.post(
    "",
    response_model=APIResponse[TicketResponse],
    status_code=http_status.HTTP_201_CREATED,
)
def create_ticket(ticket: TicketCreate, store: StateStoreDep) -> APIResponse[TicketResponse]:
    """Create a ticket."""
    created = store.create_ticket(
        project_id=ticket.project_id,
        title=ticket.title,
        description=ticket.description,
        status=ticket.status,
        priority=ticket.priority,
        type=ticket.type,
        assignee_id=ticket.assignee_id,
        due_date=ticket.due_date,
        labels=ticket.labels,
    )
    return APIResponse(data=ticket_to_response(created))


@router.get("/search", response_model=APIResponse[list[TicketResponse]])
def search_tickets(
    store: StateStoreDep,
    project_id: str = Query(..., description="Project to search"),
    q: str = Query(..., description="Text to find in title, description or labels"),
) -> APIResponse[list[TicketResponse]]:
    """Search a project's tickets."""
    tickets = store.search_tickets(project_id, q)
    return APIResponse(data=[ticket_to_response(t) for t in tickets])


@router.get("/{ticket_id}", response_model=APIResponse[TicketResponse])
def get_ticket(ticket_id: str, store: StateStoreDep) -> APIResponse[TicketResponse]:
    """Get a ticket by ID."""
    ticket = store.get_ticket(ticket_id)
    return APIResponse(data=ticket_to_response(ticket))


@router.put("/{ticket_id}", response_model=APIResponse[TicketResponse])
def update_ticket(
    ticket_id: str, ticket: TicketUpdate, store: StateStoreDep
) -> APIResponse[TicketResponse]:
    """Update a ticket. Fields left out of the body are unchanged."""
    sent = ticket.model_fields_set
    updated = store.update_ticket(
        ticket_id,
        title=ticket.title,
        description=ticket.description,
        status=ticket.status,
        priority=ticket.priority,
        type=ticket.type,
        assignee_id=ticket.assignee_id if "assignee_id" in sent else UNSET,
        due_date=ticket.due_date if "due_date" in sent else UNSET,
        labels=ticket.labels,
    )
    return APIResponse(data=ticket_to_response(updated))


@router.patch("/{ticket_id}/status", response_model=APIResponse[TicketResponse])
def update_ticket_status(
    ticket_id: str, body: TicketStatusUpdate, store: StateStoreDep
) -> APIResponse[TicketResponse]:
    """Move a ticket to another column."""
    updated = store.update_ticket_status(ticket_id, body.status)
    return APIResponse(data=ticket_to_response(updated))


@router.patch("/{ticket_id}/assign", response_model=APIResponse[TicketResponse])
def assign_ticket(
    ticket_id: str, body: TicketAssign, store: StateStoreDep
) -> APIResponse[TicketResponse]:
    """Set or clear a ticket's assignee."""
    updated = store.assign_ticket(ticket_id, body.assignee_id)
    return APIResponse(data=ticket_to_response(updated))


@router.delete("/{ticket_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_ticket(ticket_id: str, store: StateStoreDep) -> None:
    """Delete a ticket and its comments."""
    store.delete_ticket(ticket_id)
