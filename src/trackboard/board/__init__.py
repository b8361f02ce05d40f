"""Board - optimistic Kanban board state and drag-and-drop reconciliation."""

from trackboard.board.board import CardRenderer, TicketBoard, TicketListProvider
from trackboard.board.collision import (
    DEFAULT_ACTIVATION_DISTANCE,
    Point,
    Rect,
    closest_corners,
    column_droppable_id,
    exceeds_activation_distance,
    parse_droppable_id,
)
from trackboard.board.exceptions import BoardError, DragStateError
from trackboard.board.filters import TicketFilter
from trackboard.board.models import (
    STATUS_COLUMNS,
    BoardColumn,
    Ticket,
    TicketPriority,
    TicketStatus,
    TicketType,
)
from trackboard.board.notifications import LoggingNotifier, Notifier
from trackboard.board.session import (
    DragPhase,
    DragSession,
    DragSessionController,
    DropOutcome,
    StatusUpdateService,
)
from trackboard.board.store import BoardStore

__all__ = [
    "DEFAULT_ACTIVATION_DISTANCE",
    "STATUS_COLUMNS",
    "BoardColumn",
    "BoardError",
    "BoardStore",
    "CardRenderer",
    "DragPhase",
    "DragSession",
    "DragSessionController",
    "DragStateError",
    "DropOutcome",
    "LoggingNotifier",
    "Notifier",
    "Point",
    "Rect",
    "StatusUpdateService",
    "Ticket",
    "TicketBoard",
    "TicketFilter",
    "TicketListProvider",
    "TicketPriority",
    "TicketStatus",
    "TicketType",
    "closest_corners",
    "column_droppable_id",
    "exceeds_activation_distance",
    "parse_droppable_id",
]
