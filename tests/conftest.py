"""Shared pytest fixtures and configuration."""

import pytest

from trackboard.board import Ticket, TicketStatus


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def server_tickets() -> list[Ticket]:
    """Four tickets: two in To Do, one In Progress, one Done."""
    return [
        Ticket(id="t1", title="Login fails on Safari", status=TicketStatus.TODO),
        Ticket(id="t2", title="Add dark mode", status=TicketStatus.TODO),
        Ticket(id="t3", title="Slow search", status=TicketStatus.IN_PROGRESS),
        Ticket(id="t4", title="Crash on export", status=TicketStatus.DONE),
    ]
