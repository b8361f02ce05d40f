"""Data models for the Kanban board core."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TicketStatus(StrEnum):
    """Ticket status; each value is one board column."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    IN_REVIEW = "in-review"
    DONE = "done"


class TicketPriority(StrEnum):
    """Ticket priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TicketType(StrEnum):
    """Ticket type enum."""

    BUG = "bug"
    FEATURE = "feature"
    TASK = "task"
    IMPROVEMENT = "improvement"


# Board columns in display order: status -> title
STATUS_COLUMNS: dict[TicketStatus, str] = {
    TicketStatus.TODO: "To Do",
    TicketStatus.IN_PROGRESS: "In Progress",
    TicketStatus.IN_REVIEW: "In Review",
    TicketStatus.DONE: "Done",
}


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class Ticket:
    """A ticket as the server last reported it.

    Instances are immutable; the board derives changed copies with
    ``with_status`` so that every list handed out stays a snapshot.
    """

    id: str
    title: str
    status: TicketStatus = TicketStatus.TODO
    description: str = ""
    priority: TicketPriority = TicketPriority.MEDIUM
    type: TicketType = TicketType.BUG
    project_id: str | None = None
    assignee_id: str | None = None
    due_date: datetime | None = None
    labels: tuple[str, ...] = ()
    comment_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def with_status(self, status: TicketStatus) -> Ticket:
        """Return a copy of this ticket in another column."""
        return dataclasses.replace(self, status=TicketStatus(status))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Ticket:
        """Build a ticket from an API payload."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            status=TicketStatus(data.get("status", TicketStatus.TODO)),
            description=data.get("description") or "",
            priority=TicketPriority(data.get("priority", TicketPriority.MEDIUM)),
            type=TicketType(data.get("type", TicketType.BUG)),
            project_id=data.get("project_id"),
            assignee_id=data.get("assignee_id"),
            due_date=_parse_datetime(data.get("due_date")),
            labels=tuple(data.get("labels") or ()),
            comment_count=int(data.get("comment_count") or 0),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class BoardColumn:
    """A rendered column: one status and the tickets currently in it."""

    key: TicketStatus
    title: str
    tickets: list[Ticket] = field(default_factory=list)
    is_over: bool = False
    collapsed: bool = False

    @property
    def count(self) -> int:
        """Number of tickets in the column."""
        return len(self.tickets)
