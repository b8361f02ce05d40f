"""CLI entry point for Trackboard.

- ``serve``: run the REST API
- ``board``: print a project's board from a running server
- ``move``: move a ticket to another column the way a drag-and-drop would
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from trackboard.board import (
    STATUS_COLUMNS,
    LoggingNotifier,
    TicketBoard,
    TicketFilter,
    TicketPriority,
    TicketStatus,
    column_droppable_id,
)
from trackboard.client import TrackboardClient
from trackboard.config import ConfigError, Settings, load_settings
from trackboard.logging import setup_logging

config_option = click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to trackboard.yaml (auto-detected if not specified)",
)


def _load(config_path: Path | None) -> Settings:
    try:
        return load_settings(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def _make_board(
    settings: Settings, project_id: str, ticket_filter: TicketFilter
) -> tuple[TrackboardClient, TicketBoard]:
    client = TrackboardClient(
        settings.api_url, token=settings.api_token, timeout=settings.request_timeout
    )
    return client, TicketBoard(
        project_id,
        provider=client,
        updater=client,
        notifier=LoggingNotifier(),
        activation_distance=settings.activation_distance,
        ticket_filter=ticket_filter,
    )


@click.group()
@click.version_option(package_name="trackboard")
def main() -> None:
    """Trackboard - kanban issue tracking."""
    pass


@main.command()
@config_option
@click.option("--host", default=None, help="Bind address (default: from config)")
@click.option("--port", type=int, default=None, help="Port (default: from config)")
@click.option("--db-path", default=None, help="SQLite database file (default: from config)")
def serve(
    config_path: Path | None, host: str | None, port: int | None, db_path: str | None
) -> None:
    """Run the REST API server."""
    import uvicorn

    from trackboard.api.app import create_app

    settings = _load(config_path)
    setup_logging("serve", level=settings.log_level)

    app = create_app(db_path or settings.db_path)
    uvicorn.run(app, host=host or settings.host, port=port or settings.port)


@main.command()
@config_option
@click.argument("project_id")
@click.option("-s", "--search", default="", help="Only tickets whose title contains this")
@click.option(
    "-p",
    "--priority",
    type=click.Choice([p.value for p in TicketPriority]),
    default=None,
    help="Only tickets with this priority",
)
@click.option("--mine", "user_id", default=None, help="Only tickets assigned to this user ID")
def board(
    config_path: Path | None,
    project_id: str,
    search: str,
    priority: str | None,
    user_id: str | None,
) -> None:
    """Print the board for PROJECT_ID."""
    settings = _load(config_path)
    setup_logging("board", level=settings.log_level, console=False)

    ticket_filter = TicketFilter(
        search=search,
        priority=TicketPriority(priority) if priority else None,
        mine=user_id is not None,
        current_user_id=user_id,
    )
    client, kanban = _make_board(settings, project_id, ticket_filter)
    ok = asyncio.run(_print_board(client, kanban))
    sys.exit(0 if ok else 1)


async def _print_board(client: TrackboardClient, kanban: TicketBoard) -> bool:
    try:
        await kanban.refresh()
    finally:
        await client.close()

    if _report_errors(kanban):
        return False

    for column in kanban.columns():
        click.echo(f"\n{column.title} ({column.count})")
        for ticket in column.tickets:
            assignee = f" @{ticket.assignee_id}" if ticket.assignee_id else ""
            click.echo(f"  [{ticket.priority}] {ticket.title}{assignee}  ({ticket.id})")
    return True


@main.command()
@config_option
@click.argument("project_id")
@click.argument("ticket_id")
@click.argument("status", type=click.Choice([s.value for s in TicketStatus]))
def move(config_path: Path | None, project_id: str, ticket_id: str, status: str) -> None:
    """Move TICKET_ID to the STATUS column."""
    settings = _load(config_path)
    setup_logging("move", level=settings.log_level, console=False)

    client, kanban = _make_board(settings, project_id, TicketFilter())
    ok = asyncio.run(_move_ticket(client, kanban, ticket_id, TicketStatus(status)))
    sys.exit(0 if ok else 1)


async def _move_ticket(
    client: TrackboardClient, kanban: TicketBoard, ticket_id: str, status: TicketStatus
) -> bool:
    try:
        await kanban.refresh()
        if _report_errors(kanban):
            return False
        if kanban.store.find(ticket_id) is None:
            click.echo(f"Error: ticket {ticket_id} not found", err=True)
            return False

        kanban.start(ticket_id)
        outcome = kanban.drop(column_droppable_id(status))
        # Wait for the status update before reporting
        await kanban.close()
    finally:
        await client.close()

    if _report_errors(kanban):
        return False
    if not outcome.request_issued:
        click.echo(f"Ticket {ticket_id} is already in {STATUS_COLUMNS[status]}")
    else:
        click.echo(f"Moved {ticket_id} to {STATUS_COLUMNS[status]}")
    return True


def _report_errors(kanban: TicketBoard) -> bool:
    notifier = kanban.notifier
    errors = [m for level, m in getattr(notifier, "messages", []) if level == "error"]
    for message in errors:
        click.echo(f"Error: {message}", err=True)
    return bool(errors)


if __name__ == "__main__":
    main()
