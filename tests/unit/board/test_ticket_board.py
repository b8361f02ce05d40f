"""Unit tests for TicketBoard."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from trackboard.board import (
    LoggingNotifier,
    Point,
    Rect,
    Ticket,
    TicketBoard,
    TicketFilter,
    TicketStatus,
)


@pytest.fixture
def provider(server_tickets: list[Ticket]) -> AsyncMock:
    mock = AsyncMock()
    mock.list_tickets.return_value = server_tickets
    return mock


@pytest.fixture
def updater() -> AsyncMock:
    mock = AsyncMock()
    mock.update_status.side_effect = lambda ticket_id, status: Ticket(
        id=ticket_id, title="confirmed", status=status
    )
    return mock


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest_asyncio.fixture
async def board(provider: AsyncMock, updater: AsyncMock, notifier: LoggingNotifier) -> TicketBoard:
    board = TicketBoard("p1", provider, updater, notifier=notifier)
    await board.refresh()
    return board


def status_of(board: TicketBoard, ticket_id: str) -> TicketStatus:
    ticket = board.store.find(ticket_id)
    assert ticket is not None
    return ticket.status


@pytest.mark.unit
class TestRefresh:
    """Tests for loading tickets."""

    @pytest.mark.asyncio
    async def test_refresh_loads_project(
        self, board: TicketBoard, provider: AsyncMock, server_tickets: list[Ticket]
    ) -> None:
        provider.list_tickets.assert_awaited_once_with("p1")
        assert board.tickets == server_tickets
        assert board.server_tickets == server_tickets
        assert not board.loading

    @pytest.mark.asyncio
    async def test_refresh_failure_keeps_board(
        self,
        board: TicketBoard,
        provider: AsyncMock,
        notifier: LoggingNotifier,
        server_tickets: list[Ticket],
    ) -> None:
        provider.list_tickets.side_effect = ConnectionError("boom")

        result = await board.refresh()

        assert result == server_tickets
        assert notifier.messages == [("error", "Failed to load tickets: boom")]
        assert not board.loading


@pytest.mark.unit
class TestFiltering:
    """Tests for filter handling."""

    @pytest.mark.asyncio
    async def test_filter_limits_rendered_tickets(
        self, board: TicketBoard, server_tickets: list[Ticket]
    ) -> None:
        board.set_filter(TicketFilter(search="crash"))

        assert [t.id for t in board.tickets] == ["t4"]
        assert board.server_tickets == server_tickets

    @pytest.mark.asyncio
    async def test_clearing_filter_restores_all(
        self, board: TicketBoard, server_tickets: list[Ticket]
    ) -> None:
        board.set_filter(TicketFilter(search="crash"))
        board.set_filter(TicketFilter())

        assert board.tickets == server_tickets


@pytest.mark.unit
class TestDragging:
    """Drag gestures through the board."""

    @pytest.mark.asyncio
    async def test_confirmed_update_lands_in_server_list(
        self, board: TicketBoard, updater: AsyncMock
    ) -> None:
        board.start("t1")
        board.hover("column-done")
        outcome = board.drop("column-done")
        await board.close()

        assert outcome.request_issued
        updater.update_status.assert_awaited_once_with("t1", TicketStatus.DONE)
        assert status_of(board, "t1") == TicketStatus.DONE
        confirmed = [t for t in board.server_tickets if t.id == "t1"]
        assert confirmed[0].status == TicketStatus.DONE

    @pytest.mark.asyncio
    async def test_server_list_during_drag_is_deferred(
        self, board: TicketBoard, server_tickets: list[Ticket]
    ) -> None:
        board.start("t1")
        board.hover("column-in-review")
        board.apply_server_tickets(server_tickets[:3])

        # Still the optimistic list, with t4 present
        assert len(board.tickets) == 4
        assert status_of(board, "t1") == TicketStatus.IN_REVIEW

        board.cancel()

        assert [t.id for t in board.tickets] == ["t1", "t2", "t3"]
        assert status_of(board, "t1") == TicketStatus.TODO

    @pytest.mark.asyncio
    async def test_deferred_list_applied_after_drop(
        self, board: TicketBoard, server_tickets: list[Ticket]
    ) -> None:
        board.start("t2")
        board.apply_server_tickets(server_tickets[1:])
        board.drop("column-done")

        assert [t.id for t in board.tickets] == ["t2", "t3", "t4"]
        await board.close()
        assert status_of(board, "t2") == TicketStatus.DONE

    def test_sync_drop_applies_deferred_list(
        self,
        provider: AsyncMock,
        updater: AsyncMock,
        notifier: LoggingNotifier,
        server_tickets: list[Ticket],
    ) -> None:
        board = TicketBoard("p1", provider, updater, notifier=notifier)
        board.apply_server_tickets(server_tickets)

        board.start("t2")
        board.apply_server_tickets(server_tickets[1:])
        outcome = board.drop("column-done")

        assert not outcome.request_issued
        assert not board.controller.is_dragging
        assert [t.id for t in board.tickets] == ["t2", "t3", "t4"]
        assert notifier.messages == [
            ("error", "Failed to update ticket: no running event loop")
        ]

    @pytest.mark.asyncio
    async def test_failed_update_keeps_optimistic_position(
        self, board: TicketBoard, updater: AsyncMock, notifier: LoggingNotifier
    ) -> None:
        updater.update_status.side_effect = RuntimeError("forbidden")

        board.start("t3")
        board.drop("column-todo")
        await board.close()

        assert status_of(board, "t3") == TicketStatus.TODO
        assert notifier.messages == [("error", "Failed to update ticket: forbidden")]

        await board.refresh()
        assert status_of(board, "t3") == TicketStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_drop_rect(self, board: TicketBoard, updater: AsyncMock) -> None:
        candidates = {
            "column-todo": Rect(0, 0, 300, 800),
            "column-in-progress": Rect(320, 0, 300, 800),
        }
        board.start("t4")
        outcome = board.drop_rect(Rect(330, 20, 280, 80), candidates)
        await board.close()

        assert outcome.status == TicketStatus.IN_PROGRESS
        updater.update_status.assert_awaited_once_with("t4", TicketStatus.IN_PROGRESS)

    @pytest.mark.asyncio
    async def test_pointer_click_opens_ticket(self, board: TicketBoard) -> None:
        board.press("t2", Point(50, 50))
        board.move_pointer(Point(51, 51))

        assert board.release() == "t2"
        assert not board.controller.is_dragging


@pytest.mark.unit
class TestColumns:
    """Tests for column view models and rendering."""

    @pytest.mark.asyncio
    async def test_columns(self, board: TicketBoard) -> None:
        columns = board.columns()

        assert [c.title for c in columns] == ["To Do", "In Progress", "In Review", "Done"]
        assert [c.count for c in columns] == [2, 1, 0, 1]
        assert not any(c.is_over for c in columns)

    @pytest.mark.asyncio
    async def test_hovered_column_is_marked(self, board: TicketBoard) -> None:
        board.start("t1")
        board.hover("column-in-review")

        over = [c.key for c in board.columns() if c.is_over]
        assert over == [TicketStatus.IN_REVIEW]

    @pytest.mark.asyncio
    async def test_toggle_collapse(self, board: TicketBoard) -> None:
        assert board.toggle_collapse(TicketStatus.DONE) is True
        assert [c.collapsed for c in board.columns()] == [False, False, False, True]
        assert board.toggle_collapse(TicketStatus.DONE) is False

    @pytest.mark.asyncio
    async def test_render_skips_collapsed_columns(self, board: TicketBoard) -> None:
        renderer = MagicMock()
        renderer.render.side_effect = lambda ticket: f"<card {ticket.id}>"
        board.toggle_collapse(TicketStatus.IN_PROGRESS)

        rendered = board.render(renderer)

        assert list(rendered) == [TicketStatus.TODO, TicketStatus.IN_REVIEW, TicketStatus.DONE]
        assert rendered[TicketStatus.TODO] == ["<card t1>", "<card t2>"]
        assert renderer.render.call_count == 3
