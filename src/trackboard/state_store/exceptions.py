"""Custom exceptions for State Store."""


class StateStoreError(Exception):
    """Base exception for State Store errors."""


class ProjectNotFoundError(StateStoreError):
    """Project with given ID does not exist."""


class TicketNotFoundError(StateStoreError):
    """Ticket with given ID does not exist."""


class CommentNotFoundError(StateStoreError):
    """Comment with given ID does not exist."""


class InvalidTicketError(StateStoreError):
    """Ticket data failed validation (empty title, unknown status, ...)."""


class InvalidCommentError(StateStoreError):
    """Comment data failed validation."""
