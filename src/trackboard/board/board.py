"""TicketBoard - wires data loading, filtering and drag handling for one project."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from trackboard.board.collision import DEFAULT_ACTIVATION_DISTANCE, Point, Rect
from trackboard.board.filters import TicketFilter
from trackboard.board.models import STATUS_COLUMNS, BoardColumn, Ticket, TicketStatus
from trackboard.board.notifications import LoggingNotifier, Notifier
from trackboard.board.session import (
    DragSession,
    DragSessionController,
    DropOutcome,
    StatusUpdateService,
)
from trackboard.board.store import BoardStore

logger = logging.getLogger("trackboard.board")


class TicketListProvider(Protocol):
    """Interface for loading a project's authoritative ticket list."""

    async def list_tickets(self, project_id: str) -> list[Ticket]:
        """Return the project's tickets in server order."""
        ...


class CardRenderer(Protocol):
    """Interface for drawing one ticket card."""

    def render(self, ticket: Ticket) -> Any:
        """Render a ticket; the board treats the result as opaque."""
        ...


class TicketBoard:
    """Kanban board for one project.

    Keeps the unfiltered server list, feeds the filtered view to the
    BoardStore and forwards pointer input to the DragSessionController.
    Server lists that arrive during a drag are held back and applied once the
    gesture ends, so the shadow list is never replaced mid-gesture.
    """

    def __init__(
        self,
        project_id: str,
        provider: TicketListProvider,
        updater: StatusUpdateService,
        notifier: Notifier | None = None,
        activation_distance: float = DEFAULT_ACTIVATION_DISTANCE,
        ticket_filter: TicketFilter | None = None,
    ) -> None:
        """Initialize the board.

        Args:
            project_id: Project whose tickets are shown.
            provider: Source of the authoritative ticket list.
            updater: Persists status changes made by dragging.
            notifier: Receives failure messages. Defaults to LoggingNotifier.
            activation_distance: Pointer travel before a press becomes a drag.
            ticket_filter: Initial filter. Defaults to showing everything.
        """
        self.project_id = project_id
        self.provider = provider
        self.notifier: Notifier = notifier if notifier is not None else LoggingNotifier()
        self.store = BoardStore()
        self.controller = DragSessionController(
            self.store,
            updater,
            notifier=self.notifier,
            activation_distance=activation_distance,
            on_confirmed=self._on_status_confirmed,
        )
        self.loading = False
        self._server_tickets: list[Ticket] = []
        self._filter = ticket_filter if ticket_filter is not None else TicketFilter()
        self._collapsed: set[TicketStatus] = set()
        self._sync_pending = False

    @property
    def tickets(self) -> list[Ticket]:
        """Tickets as currently rendered (filtered shadow list)."""
        return self.store.tickets

    @property
    def server_tickets(self) -> list[Ticket]:
        """Unfiltered list last received from the server."""
        return self._server_tickets

    @property
    def filter(self) -> TicketFilter:
        return self._filter

    # --- Server data ---

    async def refresh(self) -> list[Ticket]:
        """Reload the project's tickets from the provider.

        A failed load is reported through the notifier and leaves the board
        as it was.

        Returns:
            The rendered ticket list.
        """
        self.loading = True
        try:
            tickets = await self.provider.list_tickets(self.project_id)
        except Exception as e:  # surfaced to the user, board keeps last data
            logger.error("Failed to load tickets for project %s: %s", self.project_id, e)
            self.notifier.error(f"Failed to load tickets: {e}")
            return self.store.tickets
        finally:
            self.loading = False

        logger.info("Loaded %d ticket(s) for project %s", len(tickets), self.project_id)
        self.apply_server_tickets(tickets)
        return self.store.tickets

    def apply_server_tickets(self, tickets: Sequence[Ticket]) -> None:
        """Take a new authoritative ticket list."""
        self._server_tickets = list(tickets)
        self._sync_view()

    def set_filter(self, ticket_filter: TicketFilter) -> None:
        """Change which tickets are shown."""
        self._filter = ticket_filter
        self._sync_view()

    def _on_status_confirmed(self, ticket: Ticket) -> None:
        self._server_tickets = [ticket if t.id == ticket.id else t for t in self._server_tickets]
        self._sync_view()

    def _sync_view(self) -> None:
        if self.controller.is_dragging:
            self._sync_pending = True
            return
        self._sync_pending = False
        self.store.sync(self._filter.apply(self._server_tickets))

    def _after_gesture(self) -> None:
        if self._sync_pending:
            self._sync_view()

    # --- Columns ---

    def toggle_collapse(self, status: TicketStatus) -> bool:
        """Collapse or expand a column.

        Returns:
            True if the column is now collapsed.
        """
        status = TicketStatus(status)
        if status in self._collapsed:
            self._collapsed.discard(status)
            return False
        self._collapsed.add(status)
        return True

    def columns(self) -> list[BoardColumn]:
        """Column view models in display order."""
        over = self.controller.over_column
        return [
            BoardColumn(
                key=status,
                title=title,
                tickets=self.store.column(status),
                is_over=over == status,
                collapsed=status in self._collapsed,
            )
            for status, title in STATUS_COLUMNS.items()
        ]

    def render(self, renderer: CardRenderer) -> dict[TicketStatus, list[Any]]:
        """Render the cards of every expanded column."""
        return {
            column.key: [renderer.render(t) for t in column.tickets]
            for column in self.columns()
            if not column.collapsed
        }

    # --- Pointer input ---

    def press(self, ticket_id: str, point: Point) -> None:
        self.controller.press(ticket_id, point)

    def move_pointer(self, point: Point) -> bool:
        return self.controller.move_pointer(point)

    def release(self) -> str | None:
        """Release without dragging; returns the ticket to open, if any."""
        return self.controller.release()

    def start(self, ticket_id: str) -> DragSession:
        return self.controller.start(ticket_id)

    def hover(self, over_id: str | None) -> TicketStatus | None:
        return self.controller.hover(over_id)

    def hover_rect(
        self,
        dragged_rect: Rect,
        candidates: Mapping[str, Rect] | Iterable[tuple[str, Rect]],
    ) -> TicketStatus | None:
        return self.controller.hover_rect(dragged_rect, candidates)

    def drop(self, over_id: str | None) -> DropOutcome:
        outcome = self.controller.drop(over_id)
        self._after_gesture()
        return outcome

    def drop_rect(
        self,
        dragged_rect: Rect,
        candidates: Mapping[str, Rect] | Iterable[tuple[str, Rect]],
    ) -> DropOutcome:
        outcome = self.controller.drop_rect(dragged_rect, candidates)
        self._after_gesture()
        return outcome

    def cancel(self) -> None:
        self.controller.cancel()
        self._after_gesture()

    async def close(self) -> None:
        """Wait for in-flight status updates."""
        await self.controller.drain()
