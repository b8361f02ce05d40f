"""REST API for Trackboard."""

from trackboard.api.app import app, create_app, register_exception_handlers
from trackboard.api.models import (
    APIResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    TicketCreate,
    TicketResponse,
    TicketUpdate,
)

__all__ = [
    "APIResponse",
    "ProjectCreate",
    "ProjectResponse",
    "ProjectUpdate",
    "TicketCreate",
    "TicketResponse",
    "TicketUpdate",
    "app",
    "create_app",
    "register_exception_handlers",
]
