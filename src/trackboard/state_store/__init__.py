"""State Store - Persistent storage for projects, tickets and comments."""

from trackboard.state_store.exceptions import (
    CommentNotFoundError,
    InvalidCommentError,
    InvalidTicketError,
    ProjectNotFoundError,
    StateStoreError,
    TicketNotFoundError,
)
from trackboard.state_store.models import Comment, Project, Ticket
from trackboard.state_store.store import UNSET, StateStore

__all__ = [
    "UNSET",
    "Comment",
    "CommentNotFoundError",
    "InvalidCommentError",
    "InvalidTicketError",
    "Project",
    "ProjectNotFoundError",
    "StateStore",
    "StateStoreError",
    "Ticket",
    "TicketNotFoundError",
]
