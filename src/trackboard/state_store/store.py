"""StateStore - Main API for State Store operations."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import StrEnum
from typing import Any, TypeVar

from sqlalchemy import String, cast, or_, select
from sqlalchemy.orm import Session

from trackboard.board.models import TicketPriority, TicketStatus, TicketType
from trackboard.state_store.database import Database
from trackboard.state_store.exceptions import (
    CommentNotFoundError,
    InvalidCommentError,
    InvalidTicketError,
    ProjectNotFoundError,
    TicketNotFoundError,
)
from trackboard.state_store.models import MAX_TITLE_LENGTH, Comment, Project, Ticket

logger = logging.getLogger("trackboard.state_store")

E = TypeVar("E", bound=StrEnum)


class _Unset:
    """Marker for "argument not given" where None is a meaningful value."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def _lenient_enum(enum_cls: type[E], value: str | None, fallback: str | None) -> str | None:
    """Return ``value`` if it names a member of ``enum_cls``, else ``fallback``."""
    if value is None:
        return fallback
    try:
        return enum_cls(value).value
    except ValueError:
        return fallback


def _clean_title(title: str) -> str:
    title = title.strip() if title else ""
    if not title:
        raise InvalidTicketError("Ticket title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise InvalidTicketError(f"Ticket title must be less than {MAX_TITLE_LENGTH} characters")
    return title


def _clean_labels(labels: list[str]) -> list[str]:
    return [label.strip() for label in labels if label and label.strip()]


class StateStore:
    """Main API for State Store operations.

    Provides CRUD operations for Projects, Tickets, and Comments.
    """

    def __init__(self, db_path: str = "trackboard.db") -> None:
        """Initialize State Store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- Project Operations ---

    def create_project(self, name: str, description: str = "") -> Project:
        """Create a new project.

        Args:
            name: Human-readable project name
            description: Free-form description

        Returns:
            Created Project object with generated ID
        """
        with self._db.session() as session:
            project = Project(name=name.strip(), description=description.strip())
            session.add(project)
            session.flush()
            session.refresh(project)
        logger.info("Project created: %s (%s)", project.name, project.id)
        return project

    def get_project(self, project_id: str) -> Project:
        """Get project by ID.

        Raises:
            ProjectNotFoundError: If project doesn't exist
        """
        with self._db.session() as session:
            return self._load_project(session, project_id)

    def list_projects(self) -> list[Project]:
        """List all projects, ordered by name."""
        with self._db.session() as session:
            stmt = select(Project).order_by(Project.name)
            return list(session.execute(stmt).scalars().all())

    def update_project(
        self,
        project_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> Project:
        """Update project fields. Only provided fields are updated.

        Raises:
            ProjectNotFoundError: If project doesn't exist
        """
        with self._db.session() as session:
            project = self._load_project(session, project_id)
            if name is not None:
                project.name = name.strip()
            if description is not None:
                project.description = description.strip()
            session.flush()
            session.refresh(project)
            return project

    def delete_project(self, project_id: str) -> None:
        """Delete a project together with its tickets and their comments.

        Raises:
            ProjectNotFoundError: If project doesn't exist
        """
        with self._db.session() as session:
            project = self._load_project(session, project_id)
            session.delete(project)
        logger.info("Project deleted: %s", project_id)

    # --- Ticket Operations ---

    def create_ticket(
        self,
        project_id: str,
        title: str,
        description: str = "",
        status: str | None = None,
        priority: str | None = None,
        type: str | None = None,
        assignee_id: str | None = None,
        due_date: datetime | None = None,
        labels: list[str] | None = None,
    ) -> Ticket:
        """Create a ticket in a project.

        Unknown status, priority or type values fall back to the defaults
        (todo, medium, bug).

        Returns:
            Created Ticket object with generated ID

        Raises:
            ProjectNotFoundError: If project doesn't exist
            InvalidTicketError: If the title is empty or too long
        """
        clean_title = _clean_title(title)
        with self._db.session() as session:
            self._load_project(session, project_id)
            ticket = Ticket(
                project_id=project_id,
                title=clean_title,
                description=(description or "").strip(),
                status=_lenient_enum(TicketStatus, status, TicketStatus.TODO.value),
                priority=_lenient_enum(TicketPriority, priority, TicketPriority.MEDIUM.value),
                type=_lenient_enum(TicketType, type, TicketType.BUG.value),
                assignee_id=assignee_id or None,
                due_date=due_date,
                labels=_clean_labels(labels or []),
            )
            session.add(ticket)
            session.flush()
            session.refresh(ticket)
        logger.info("Ticket created: %s in project %s", ticket.title, project_id)
        return ticket

    def get_ticket(self, ticket_id: str) -> Ticket:
        """Get ticket by ID.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        with self._db.session() as session:
            return self._load_ticket(session, ticket_id)

    def list_tickets(
        self,
        project_id: str,
        status: TicketStatus | None = None,
        priority: TicketPriority | None = None,
        assignee_id: str | None = None,
        search: str | None = None,
    ) -> list[Ticket]:
        """List a project's tickets with optional filters.

        Args:
            project_id: The project's unique ID
            status: Only tickets in this column (optional)
            priority: Only tickets with this priority (optional)
            assignee_id: Only tickets assigned to this user (optional)
            search: Case-insensitive match on title or description (optional)

        Returns:
            List of tickets, newest first

        Raises:
            ProjectNotFoundError: If project doesn't exist
        """
        with self._db.session() as session:
            self._load_project(session, project_id)
            stmt = select(Ticket).where(Ticket.project_id == project_id)

            if status is not None:
                stmt = stmt.where(Ticket.status == TicketStatus(status).value)
            if priority is not None:
                stmt = stmt.where(Ticket.priority == TicketPriority(priority).value)
            if assignee_id is not None:
                stmt = stmt.where(Ticket.assignee_id == assignee_id)
            if search:
                stmt = stmt.where(
                    or_(
                        Ticket.title.icontains(search, autoescape=True),
                        Ticket.description.icontains(search, autoescape=True),
                    )
                )

            stmt = stmt.order_by(Ticket.created_at.desc())
            return list(session.execute(stmt).scalars().all())

    def search_tickets(self, project_id: str, query: str) -> list[Ticket]:
        """Search a project's tickets by title, description, or label.

        Raises:
            ProjectNotFoundError: If project doesn't exist
            InvalidTicketError: If the query is empty
        """
        if not query or not query.strip():
            raise InvalidTicketError("Search query is required")
        query = query.strip()

        with self._db.session() as session:
            self._load_project(session, project_id)
            stmt = select(Ticket).where(
                Ticket.project_id == project_id,
                or_(
                    Ticket.title.icontains(query, autoescape=True),
                    Ticket.description.icontains(query, autoescape=True),
                    cast(Ticket.labels, String).icontains(query, autoescape=True),
                ),
            )
            stmt = stmt.order_by(Ticket.created_at.desc())
            return list(session.execute(stmt).scalars().all())

    def update_ticket(
        self,
        ticket_id: str,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        type: str | None = None,
        assignee_id: str | None = UNSET,
        due_date: datetime | None = UNSET,
        labels: list[str] | None = None,
    ) -> Ticket:
        """Update ticket fields. Only provided fields are updated.

        Unknown enum values are ignored. ``assignee_id`` and ``due_date``
        accept None to clear the value.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
            InvalidTicketError: If the new title is empty or too long
        """
        with self._db.session() as session:
            ticket = self._load_ticket(session, ticket_id)

            if title is not None:
                ticket.title = _clean_title(title)
            if description is not None:
                ticket.description = description.strip()
            ticket.status = _lenient_enum(TicketStatus, status, ticket.status)  # type: ignore[assignment]
            ticket.priority = _lenient_enum(TicketPriority, priority, ticket.priority)  # type: ignore[assignment]
            ticket.type = _lenient_enum(TicketType, type, ticket.type)  # type: ignore[assignment]
            if assignee_id is not UNSET:
                ticket.assignee_id = assignee_id or None
            if due_date is not UNSET:
                ticket.due_date = due_date
            if labels is not None:
                ticket.labels = _clean_labels(labels)

            session.flush()
            session.refresh(ticket)
        logger.info("Ticket updated: %s", ticket.title)
        return ticket

    def update_ticket_status(self, ticket_id: str, status: str) -> Ticket:
        """Move a ticket to another column.

        Raises:
            InvalidTicketError: If status is not a known column
            TicketNotFoundError: If ticket doesn't exist
        """
        try:
            new_status = TicketStatus(status)
        except ValueError as e:
            valid = ", ".join(s.value for s in TicketStatus)
            raise InvalidTicketError(f"Invalid status. Must be one of: {valid}") from e

        with self._db.session() as session:
            ticket = self._load_ticket(session, ticket_id)
            previous = ticket.status
            ticket.ticket_status = new_status
            session.flush()
            session.refresh(ticket)
        logger.info("Ticket %s moved from %s to %s", ticket_id, previous, new_status)
        return ticket

    def assign_ticket(self, ticket_id: str, assignee_id: str | None) -> Ticket:
        """Set or clear a ticket's assignee.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        with self._db.session() as session:
            ticket = self._load_ticket(session, ticket_id)
            ticket.assignee_id = assignee_id or None
            session.flush()
            session.refresh(ticket)
        logger.info("Ticket assigned: %s -> %s", ticket.title, ticket.assignee_id)
        return ticket

    def delete_ticket(self, ticket_id: str) -> None:
        """Delete a ticket and its comments.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        with self._db.session() as session:
            ticket = self._load_ticket(session, ticket_id)
            session.delete(ticket)
        logger.info("Ticket deleted: %s", ticket_id)

    # --- Comment Operations ---

    def add_comment(self, ticket_id: str, author: str, content: str) -> Comment:
        """Add a comment to a ticket.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
            InvalidCommentError: If the content is empty
        """
        content = content.strip() if content else ""
        if not content:
            raise InvalidCommentError("Comment content is required")

        with self._db.session() as session:
            self._load_ticket(session, ticket_id)
            comment = Comment(ticket_id=ticket_id, author=author.strip(), content=content)
            session.add(comment)
            session.flush()
            session.refresh(comment)
            return comment

    def list_comments(self, ticket_id: str) -> list[Comment]:
        """List a ticket's comments, oldest first.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        with self._db.session() as session:
            self._load_ticket(session, ticket_id)
            stmt = (
                select(Comment).where(Comment.ticket_id == ticket_id).order_by(Comment.created_at)
            )
            return list(session.execute(stmt).scalars().all())

    def delete_comment(self, comment_id: str) -> None:
        """Delete a comment.

        Raises:
            CommentNotFoundError: If comment doesn't exist
        """
        with self._db.session() as session:
            comment = session.get(Comment, comment_id)
            if comment is None:
                raise CommentNotFoundError(f"Comment with id '{comment_id}' not found")
            session.delete(comment)

    # --- Helpers ---

    @staticmethod
    def _load_project(session: Session, project_id: str) -> Project:
        project = session.get(Project, project_id)
        if project is None:
            raise ProjectNotFoundError(f"Project with id '{project_id}' not found")
        return project

    @staticmethod
    def _load_ticket(session: Session, ticket_id: str) -> Ticket:
        ticket = session.get(Ticket, ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"Ticket with id '{ticket_id}' not found")
        return ticket
