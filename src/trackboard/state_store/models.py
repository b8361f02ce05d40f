"""SQLAlchemy models for State Store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    String,
    Text,
    func,
    select,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    column_property,
    mapped_column,
    relationship,
)

from trackboard.board.models import TicketPriority, TicketStatus, TicketType

MAX_TITLE_LENGTH = 200


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp with microseconds (SQLite keeps no timezone)."""
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Project(Base):
    """Project model - a board's worth of tickets."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    tickets: Mapped[list[Ticket]] = relationship(
        "Ticket", back_populates="project", cascade="all, delete-orphan"
    )

    def __init__(
        self,
        name: str,
        id: str | None = None,
        description: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.name = name
        self.description = description

    def __repr__(self) -> str:
        return f"<Project(id={self.id!r}, name={self.name!r})>"


class Comment(Base):
    """Comment model - a note left on a ticket."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    # Relationships
    ticket: Mapped[Ticket] = relationship("Ticket", back_populates="comments")

    def __init__(
        self,
        ticket_id: str,
        author: str,
        content: str,
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.ticket_id = ticket_id
        self.author = author
        self.content = content

    def __repr__(self) -> str:
        return f"<Comment(id={self.id!r}, ticket_id={self.ticket_id!r})>"


class Ticket(Base):
    """Ticket model - the authoritative copy of an issue."""

    __tablename__ = "tickets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(MAX_TITLE_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    assignee_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    labels: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    project: Mapped[Project] = relationship("Project", back_populates="tickets")
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )

    def __init__(
        self,
        project_id: str,
        title: str,
        id: str | None = None,
        description: str = "",
        status: str | None = None,
        priority: str | None = None,
        type: str | None = None,
        assignee_id: str | None = None,
        due_date: datetime | None = None,
        labels: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.project_id = project_id
        self.title = title
        self.description = description
        self.status = status if status is not None else TicketStatus.TODO.value
        self.priority = priority if priority is not None else TicketPriority.MEDIUM.value
        self.type = type if type is not None else TicketType.BUG.value
        self.assignee_id = assignee_id
        self.due_date = due_date
        self.labels = labels if labels is not None else []

    @property
    def ticket_status(self) -> TicketStatus:
        """Get status as TicketStatus enum."""
        return TicketStatus(self.status)

    @ticket_status.setter
    def ticket_status(self, value: TicketStatus) -> None:
        """Set status from TicketStatus enum."""
        self.status = value.value

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id!r}, title={self.title!r}, status={self.status!r})>"


# Loaded with every ticket so it stays readable after the session closes
Ticket.comment_count = column_property(  # type: ignore[attr-defined]
    select(func.count(Comment.id))
    .where(Comment.ticket_id == Ticket.id)
    .correlate_except(Comment)
    .scalar_subquery()
)
