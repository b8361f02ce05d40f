"""Async HTTP client for the Trackboard REST API."""

from trackboard.client.client import TrackboardClient
from trackboard.client.exceptions import (
    ClientError,
    RequestFailedError,
    TicketNotFoundError,
)

__all__ = [
    "ClientError",
    "RequestFailedError",
    "TicketNotFoundError",
    "TrackboardClient",
]
