"""Client-side ticket filtering for the board."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from trackboard.board.models import Ticket, TicketPriority, TicketType


@dataclass(frozen=True)
class TicketFilter:
    """Which tickets the board shows.

    Attributes:
        search: Case-insensitive substring of the title. Empty matches all.
        priority: Only this priority (None = all).
        type: Only this type (None = all).
        mine: Only tickets assigned to ``current_user_id``.
        current_user_id: The viewing user, used by ``mine``.
    """

    search: str = ""
    priority: TicketPriority | None = None
    type: TicketType | None = None
    mine: bool = False
    current_user_id: str | None = None

    @property
    def is_empty(self) -> bool:
        """True if the filter lets every ticket through."""
        return not self.search and self.priority is None and self.type is None and not self.mine

    def matches(self, ticket: Ticket) -> bool:
        if self.search and self.search.lower() not in ticket.title.lower():
            return False
        if self.priority is not None and ticket.priority != self.priority:
            return False
        if self.type is not None and ticket.type != self.type:
            return False
        if self.mine:
            if not ticket.assignee_id or not self.current_user_id:
                return False
            if str(ticket.assignee_id) != str(self.current_user_id):
                return False
        return True

    def apply(self, tickets: Iterable[Ticket]) -> list[Ticket]:
        """Filter tickets, keeping their order."""
        return [t for t in tickets if self.matches(t)]
