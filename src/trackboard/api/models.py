"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Project models


class ProjectCreate(BaseModel):
    """Request model for creating a project."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)


class ProjectUpdate(BaseModel):
    """Request model for updating a project (partial update)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)


class ProjectResponse(BaseModel):
    """Response model for a project."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


def project_to_response(project: Any) -> ProjectResponse:
    """Convert a Project model to ProjectResponse."""
    return ProjectResponse.model_validate(project)


# Ticket models
#
# status/priority/type are plain strings on input: unknown values are ignored
# by the store rather than rejected.


class TicketCreate(BaseModel):
    """Request model for creating a ticket."""

    project_id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    status: str | None = None
    priority: str | None = None
    type: str | None = None
    assignee_id: str | None = None
    due_date: datetime | None = None
    labels: list[str] = Field(default_factory=list)


class TicketUpdate(BaseModel):
    """Request model for updating a ticket (partial update).

    Sending ``assignee_id`` or ``due_date`` as null clears them; leaving
    them out keeps the current value.
    """

    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    type: str | None = None
    assignee_id: str | None = None
    due_date: datetime | None = None
    labels: list[str] | None = None


class TicketStatusUpdate(BaseModel):
    """Request model for moving a ticket to another column."""

    status: str


class TicketAssign(BaseModel):
    """Request model for (un)assigning a ticket."""

    assignee_id: str | None = None


class TicketResponse(BaseModel):
    """Response model for a ticket."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    title: str
    description: str
    status: str
    priority: str
    type: str
    assignee_id: str | None
    due_date: datetime | None
    labels: list[str]
    comment_count: int
    created_at: datetime
    updated_at: datetime


def ticket_to_response(ticket: Any) -> TicketResponse:
    """Convert a Ticket model to TicketResponse."""
    return TicketResponse.model_validate(ticket)


# Comment models


class CommentCreate(BaseModel):
    """Request model for adding a comment."""

    author: str = Field(default="anonymous", min_length=1, max_length=255)
    content: str = Field(..., max_length=5000)


class CommentResponse(BaseModel):
    """Response model for a comment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    ticket_id: str
    author: str
    content: str
    created_at: datetime


def comment_to_response(comment: Any) -> CommentResponse:
    """Convert a Comment model to CommentResponse."""
    return CommentResponse.model_validate(comment)
