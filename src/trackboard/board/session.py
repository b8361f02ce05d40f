"""Drag Session Controller - optimistic drag-and-drop between status columns."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from trackboard.board.collision import (
    DEFAULT_ACTIVATION_DISTANCE,
    Point,
    Rect,
    closest_corners,
    exceeds_activation_distance,
    parse_droppable_id,
)
from trackboard.board.exceptions import DragStateError
from trackboard.board.models import Ticket, TicketStatus
from trackboard.board.notifications import LoggingNotifier, Notifier

if TYPE_CHECKING:
    from trackboard.board.store import BoardStore

logger = logging.getLogger("trackboard.board.session")


class StatusUpdateService(Protocol):
    """Interface for persisting a ticket's new status on the server."""

    async def update_status(self, ticket_id: str, status: TicketStatus) -> Ticket:
        """Update the status and return the server's copy of the ticket.

        Raises on failure; the exception message is shown to the user.
        """
        ...


class DragPhase(StrEnum):
    """Controller state."""

    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class DragSession:
    """State of one drag gesture.

    Attributes:
        active_id: Ticket being dragged.
        original_status: Server status of the ticket when the gesture began.
            None if the server list did not contain the ticket.
        over_id: Droppable id currently under the dragged card.
        over_column: Column the hover indicator is shown on.
    """

    active_id: str
    original_status: TicketStatus | None
    over_id: str | None = None
    over_column: TicketStatus | None = None


@dataclass
class PendingPress:
    """A pointer press on a card that has not yet become a drag."""

    ticket_id: str
    origin: Point


@dataclass(frozen=True)
class DropOutcome:
    """Result of completing a drag gesture.

    Attributes:
        ticket_id: The dragged ticket.
        status: Resolved drop column, None if nothing valid was under the card.
        request_issued: Whether a status update was sent to the server.
    """

    ticket_id: str
    status: TicketStatus | None
    request_issued: bool


class DragSessionController:
    """Drives drag gestures over a BoardStore and talks to the server on drop.

    Only the shadow list is changed while dragging. On drop, exactly one
    status update is sent if the final column differs from the status the
    server reported when the gesture started. The update runs as a task on
    the running event loop; failures are reported through the notifier and
    are not rolled back here. The next ``BoardStore.sync`` corrects the board.
    """

    def __init__(
        self,
        store: BoardStore,
        updater: StatusUpdateService,
        notifier: Notifier | None = None,
        activation_distance: float = DEFAULT_ACTIVATION_DISTANCE,
        on_confirmed: Callable[[Ticket], None] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            store: Board store holding the shadow list.
            updater: Service that persists status changes.
            notifier: Receives failure messages. Defaults to LoggingNotifier.
            activation_distance: Pointer travel before a press becomes a drag.
            on_confirmed: Called with the server's ticket after a successful update.
        """
        self.store = store
        self.updater = updater
        self.notifier: Notifier = notifier if notifier is not None else LoggingNotifier()
        self.activation_distance = activation_distance
        self.on_confirmed = on_confirmed
        self._session: DragSession | None = None
        self._press: PendingPress | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def phase(self) -> DragPhase:
        """Current controller state."""
        return DragPhase.DRAGGING if self._session is not None else DragPhase.IDLE

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> DragSession | None:
        """The active drag session, if any."""
        return self._session

    @property
    def over_column(self) -> TicketStatus | None:
        """Column to highlight as the current drop target."""
        return self._session.over_column if self._session is not None else None

    @property
    def pending_requests(self) -> int:
        """Number of status updates still in flight."""
        return len(self._tasks)

    # --- Pointer input ---

    def press(self, ticket_id: str, point: Point) -> None:
        """Record a pointer press on a ticket card.

        Raises:
            DragStateError: If a drag is already in progress.
        """
        if self._session is not None:
            raise DragStateError("Cannot press a card while a drag is in progress")
        self._press = PendingPress(ticket_id=ticket_id, origin=point)

    def move_pointer(self, point: Point) -> bool:
        """Handle pointer movement while a press is pending.

        Returns:
            True if this movement started a drag.
        """
        if self._press is None or self._session is not None:
            return False
        if not exceeds_activation_distance(self._press.origin, point, self.activation_distance):
            return False

        ticket_id = self._press.ticket_id
        self._press = None
        self.start(ticket_id)
        return True

    def release(self) -> str | None:
        """Handle a pointer release that never became a drag.

        Returns:
            The pressed ticket id (the caller treats it as a click and opens
            the ticket), or None if nothing was pressed.
        """
        press, self._press = self._press, None
        return press.ticket_id if press is not None else None

    # --- Gesture lifecycle ---

    def start(self, ticket_id: str) -> DragSession:
        """Begin dragging a ticket.

        Captures the ticket's status from the last server list; drop compares
        against this value rather than the shadow list, which the gesture
        itself mutates.

        Raises:
            DragStateError: If a drag is already in progress.
        """
        if self._session is not None:
            raise DragStateError(
                f"Drag of ticket '{self._session.active_id}' is already in progress"
            )

        server_ticket = self.store.find_server(ticket_id)
        original_status = server_ticket.status if server_ticket is not None else None
        self._press = None
        self._session = DragSession(active_id=ticket_id, original_status=original_status)
        logger.debug("Drag started for ticket %s (status=%s)", ticket_id, original_status)
        return self._session

    def hover(self, over_id: str | None) -> TicketStatus | None:
        """Handle the dragged card moving over a new drop target.

        Moves the ticket to the hovered column in the shadow list so the card
        jumps there while still being dragged. Empty space clears the hover
        indicator and keeps the last optimistic position.

        Args:
            over_id: Droppable id under the card (column or ticket id), or None.

        Returns:
            The resolved column, or None.

        Raises:
            DragStateError: If no drag is in progress.
        """
        session = self._require_session()
        column = self._resolve(over_id)
        session.over_id = over_id if column is not None else None
        session.over_column = column
        if column is None:
            return None

        active = self.store.find(session.active_id)
        if active is not None and active.status != column:
            self.store.set_column_locally(session.active_id, column)
        return column

    def drop(self, over_id: str | None) -> DropOutcome:
        """Complete the gesture over a drop target.

        Raises:
            DragStateError: If no drag is in progress.
        """
        session = self._require_session()
        self._end_session()

        column = self._resolve(over_id)
        if column is None:
            logger.debug("Ticket %s dropped outside any column", session.active_id)
            return DropOutcome(ticket_id=session.active_id, status=None, request_issued=False)

        if self.store.find(session.active_id) is None:
            logger.debug("Ticket %s vanished during drag; ignoring drop", session.active_id)
            return DropOutcome(ticket_id=session.active_id, status=column, request_issued=False)

        # Covers fast drags that never produced a hover over the final column
        self.store.set_column_locally(session.active_id, column)

        request_issued = False
        if session.original_status is not None and session.original_status != column:
            logger.info(
                "Moving ticket %s from %s to %s",
                session.active_id,
                session.original_status,
                column,
            )
            request_issued = self._dispatch_update(session.active_id, column)
        return DropOutcome(ticket_id=session.active_id, status=column, request_issued=request_issued)

    def cancel(self) -> None:
        """Abort the gesture and restore the last server list."""
        if self._session is not None:
            logger.debug("Drag of ticket %s cancelled", self._session.active_id)
        self._end_session()
        self.store.revert(self.store.server_tickets)

    def hover_rect(
        self,
        dragged_rect: Rect,
        candidates: Mapping[str, Rect] | Iterable[tuple[str, Rect]],
    ) -> TicketStatus | None:
        """``hover`` with the target picked by nearest-corner collision."""
        return self.hover(closest_corners(dragged_rect, candidates))

    def drop_rect(
        self,
        dragged_rect: Rect,
        candidates: Mapping[str, Rect] | Iterable[tuple[str, Rect]],
    ) -> DropOutcome:
        """``drop`` with the target picked by nearest-corner collision."""
        return self.drop(closest_corners(dragged_rect, candidates))

    async def drain(self) -> None:
        """Wait for all in-flight status updates to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # --- Internals ---

    def _require_session(self) -> DragSession:
        if self._session is None:
            raise DragStateError("No drag in progress")
        return self._session

    def _end_session(self) -> None:
        self._session = None
        self._press = None

    def _resolve(self, over_id: str | None) -> TicketStatus | None:
        """Map a droppable id to a column; a ticket stands in for its column."""
        if over_id is None:
            return None
        column = parse_droppable_id(over_id)
        if column is not None:
            return column
        over_ticket = self.store.find(over_id)
        return over_ticket.status if over_ticket is not None else None

    def _dispatch_update(self, ticket_id: str, status: TicketStatus) -> bool:
        """Schedule the status update on the running loop.

        Without a running loop the update cannot be sent; the failure goes to
        the notifier like any other and the optimistic position stays.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Status update for ticket %s not sent: no running event loop", ticket_id
            )
            self.notifier.error("Failed to update ticket: no running event loop")
            return False

        task = loop.create_task(self._send_update(ticket_id, status))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def _send_update(self, ticket_id: str, status: TicketStatus) -> None:
        try:
            ticket = await self.updater.update_status(ticket_id, status)
        except Exception as e:  # reported to the user, never raised into the loop
            logger.warning("Status update for ticket %s failed: %s", ticket_id, e)
            self.notifier.error(f"Failed to update ticket: {e}")
            return

        logger.info("Ticket %s status confirmed as %s", ticket_id, ticket.status)
        if self.on_confirmed is None:
            return
        try:
            self.on_confirmed(ticket)
        except Exception:
            logger.exception("Confirmation handler failed for ticket %s", ticket_id)
