"""TrackboardClient - talks to the Trackboard REST API over HTTP."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from trackboard.board.models import Ticket, TicketPriority, TicketStatus
from trackboard.client.exceptions import (
    ClientError,
    RequestFailedError,
    TicketNotFoundError,
)
from trackboard.logging import redact, truncate_body

logger = logging.getLogger("trackboard.client")


class TrackboardClient:
    """Async client for the ``/api/v1`` endpoints.

    Implements the board's ticket provider (``list_tickets``) and status
    update service (``update_status``), so a ``TicketBoard`` can be wired
    straight to a running server.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``http://127.0.0.1:8000/api/v1``
            token: Optional bearer token sent with every request
            timeout: Request timeout in seconds
            transport: Custom transport (for testing)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and unwrap the ``{"data", "error"}`` envelope.

        Raises:
            ClientError: If the server cannot be reached
            TicketNotFoundError: If the server reports a missing ticket
            RequestFailedError: For any other error status
        """
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self.client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            raise ClientError(f"Request to {path} failed: {e}") from e

        if response.status_code == 204:
            return None

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = _error_message(body) or response.text or response.reason_phrase
            logger.warning(
                "%s %s -> %d: %s",
                method,
                path,
                response.status_code,
                redact(truncate_body(message)),
            )
            if response.status_code == 404 and message == "Ticket not found":
                raise TicketNotFoundError(message, response.status_code)
            raise RequestFailedError(message, response.status_code)

        return body.get("data") if isinstance(body, dict) else body

    # Tickets

    async def list_tickets(
        self,
        project_id: str,
        status: TicketStatus | str | None = None,
        priority: TicketPriority | str | None = None,
        assignee: str | None = None,
        search: str | None = None,
    ) -> list[Ticket]:
        """List a project's tickets, newest first."""
        params: dict[str, Any] = {"project_id": project_id}
        if status is not None:
            params["status"] = str(status)
        if priority is not None:
            params["priority"] = str(priority)
        if assignee:
            params["assignee"] = assignee
        if search:
            params["search"] = search
        data = await self._request("GET", "/tickets", params=params)
        return [Ticket.from_dict(item) for item in data or []]

    async def search_tickets(self, project_id: str, query: str) -> list[Ticket]:
        """Search title, description and labels."""
        data = await self._request(
            "GET", "/tickets/search", params={"project_id": project_id, "q": query}
        )
        return [Ticket.from_dict(item) for item in data or []]

    async def get_ticket(self, ticket_id: str) -> Ticket:
        data = await self._request("GET", f"/tickets/{ticket_id}")
        return Ticket.from_dict(data)

    async def create_ticket(self, project_id: str, title: str, **fields: Any) -> Ticket:
        """Create a ticket.

        Extra keyword arguments (``description``, ``status``, ``priority``,
        ``type``, ``assignee_id``, ``due_date``, ``labels``) are sent as-is.
        """
        payload = {"project_id": project_id, "title": title, **_jsonable(fields)}
        data = await self._request("POST", "/tickets", json=payload)
        return Ticket.from_dict(data)

    async def update_ticket(self, ticket_id: str, **fields: Any) -> Ticket:
        """Update the given fields of a ticket. Passing ``None`` clears a field."""
        data = await self._request("PUT", f"/tickets/{ticket_id}", json=_jsonable(fields))
        return Ticket.from_dict(data)

    async def update_status(self, ticket_id: str, status: TicketStatus | str) -> Ticket:
        """Move a ticket to another column and return the stored ticket."""
        data = await self._request(
            "PATCH", f"/tickets/{ticket_id}/status", json={"status": str(status)}
        )
        return Ticket.from_dict(data)

    async def assign_ticket(self, ticket_id: str, assignee_id: str | None) -> Ticket:
        data = await self._request(
            "PATCH", f"/tickets/{ticket_id}/assign", json={"assignee_id": assignee_id}
        )
        return Ticket.from_dict(data)

    async def delete_ticket(self, ticket_id: str) -> None:
        await self._request("DELETE", f"/tickets/{ticket_id}")

    # Projects

    async def list_projects(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/projects")
        return list(data or [])

    async def create_project(self, name: str, description: str = "") -> dict[str, Any]:
        data = await self._request(
            "POST", "/projects", json={"name": name, "description": description}
        )
        return dict(data)

    # Comments

    async def list_comments(self, ticket_id: str) -> list[dict[str, Any]]:
        data = await self._request("GET", f"/tickets/{ticket_id}/comments")
        return list(data or [])

    async def add_comment(
        self, ticket_id: str, content: str, author: str = "anonymous"
    ) -> dict[str, Any]:
        data = await self._request(
            "POST",
            f"/tickets/{ticket_id}/comments",
            json={"author": author, "content": content},
        )
        return dict(data)


def _error_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    if body.get("error"):
        return str(body["error"])
    if body.get("detail"):
        # FastAPI request validation errors
        return str(body["detail"])
    return None


def _jsonable(fields: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, tuple):
            value = list(value)
        out[key] = value
    return out
