"""BoardStore - shadow ticket list kept in step with the server."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from trackboard.board.models import STATUS_COLUMNS, Ticket, TicketStatus

logger = logging.getLogger("trackboard.board.store")


class BoardStore:
    """Holds the last server ticket list and a locally mutated shadow copy.

    The shadow list is what the board renders. Outside of a drag gesture it is
    always equal to the server list; during a gesture the drag controller moves
    tickets between columns in it ahead of server confirmation.

    Every operation keeps the shadow list the same length as the server list
    and changes at most one ticket's status.
    """

    def __init__(self, server_tickets: Sequence[Ticket] = ()) -> None:
        """Initialize the store.

        Args:
            server_tickets: Initial authoritative ticket list.
        """
        self._server_tickets: list[Ticket] = list(server_tickets)
        self._tickets: list[Ticket] = list(server_tickets)

    @property
    def tickets(self) -> list[Ticket]:
        """The shadow list, as rendered."""
        return self._tickets

    @property
    def server_tickets(self) -> list[Ticket]:
        """The list most recently passed to ``sync`` or ``revert``."""
        return self._server_tickets

    def sync(self, server_tickets: Sequence[Ticket]) -> list[Ticket]:
        """Replace the shadow list with a fresh server list.

        Any optimistic change not yet confirmed by the server is discarded.

        Args:
            server_tickets: Authoritative ordered ticket list.

        Returns:
            The new shadow list.
        """
        self._server_tickets = list(server_tickets)
        self._tickets = list(server_tickets)
        logger.debug("Synced %d ticket(s)", len(self._tickets))
        return self._tickets

    def revert(self, server_tickets: Sequence[Ticket]) -> list[Ticket]:
        """Discard optimistic changes made during an aborted gesture."""
        logger.debug("Reverting shadow list to server state")
        return self.sync(server_tickets)

    def set_column_locally(self, ticket_id: str, new_status: TicketStatus) -> list[Ticket]:
        """Move one ticket to another column in the shadow list only.

        Args:
            ticket_id: Ticket to move.
            new_status: Target column.

        Returns:
            The shadow list. A new list when the ticket was found, otherwise
            the unchanged list object.
        """
        index = self._index_of(self._tickets, ticket_id)
        if index is None:
            return self._tickets

        items = list(self._tickets)
        items[index] = items[index].with_status(new_status)
        self._tickets = items
        return self._tickets

    def find(self, ticket_id: str) -> Ticket | None:
        """Look up a ticket in the shadow list."""
        index = self._index_of(self._tickets, ticket_id)
        return None if index is None else self._tickets[index]

    def find_server(self, ticket_id: str) -> Ticket | None:
        """Look up a ticket in the last synced server list."""
        index = self._index_of(self._server_tickets, ticket_id)
        return None if index is None else self._server_tickets[index]

    def column(self, status: TicketStatus) -> list[Ticket]:
        """Tickets of one column, in server order."""
        return [t for t in self._tickets if t.status == status]

    def columns(self) -> dict[TicketStatus, list[Ticket]]:
        """All columns in display order."""
        return {status: self.column(status) for status in STATUS_COLUMNS}

    @staticmethod
    def _index_of(tickets: list[Ticket], ticket_id: str) -> int | None:
        for i, ticket in enumerate(tickets):
            if ticket.id == ticket_id:
                return i
        return None
