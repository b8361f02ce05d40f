"""Custom exceptions for the Trackboard API client."""


class ClientError(Exception):
    """Base exception for API client errors."""


class RequestFailedError(ClientError):
    """The server answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TicketNotFoundError(RequestFailedError):
    """Ticket with given ID does not exist on the server."""
