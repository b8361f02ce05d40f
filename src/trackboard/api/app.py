"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trackboard import __version__
from trackboard.api.dependencies import close_state_store, init_state_store
from trackboard.api.models import APIResponse
from trackboard.api.routes import comments, projects, tickets
from trackboard.state_store import (
    CommentNotFoundError,
    InvalidCommentError,
    InvalidTicketError,
    ProjectNotFoundError,
    StateStoreError,
    TicketNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger("trackboard.api")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map State Store exceptions to HTTP error responses."""

    @app.exception_handler(ProjectNotFoundError)
    async def project_not_found_handler(
        _request: Request, _exc: ProjectNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Project not found")

    @app.exception_handler(TicketNotFoundError)
    async def ticket_not_found_handler(
        _request: Request, _exc: TicketNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Ticket not found")

    @app.exception_handler(CommentNotFoundError)
    async def comment_not_found_handler(
        _request: Request, _exc: CommentNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Comment not found")

    @app.exception_handler(InvalidTicketError)
    async def invalid_ticket_handler(_request: Request, exc: InvalidTicketError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(InvalidCommentError)
    async def invalid_comment_handler(_request: Request, exc: InvalidCommentError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StateStoreError)
    async def state_store_error_handler(request: Request, exc: StateStoreError) -> JSONResponse:
        logger.error("Unhandled store error on %s %s: %s", request.method, request.url.path, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    db_path = app.state.db_path if hasattr(app.state, "db_path") else "trackboard.db"
    init_state_store(db_path)
    logger.info("Trackboard API started (db=%s)", db_path)
    yield
    close_state_store()


def create_app(db_path: str = "trackboard.db") -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Trackboard API",
        description="REST API for Trackboard projects, tickets and comments",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.db_path = db_path

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(projects.router, prefix="/api/v1")
    app.include_router(tickets.router, prefix="/api/v1")
    app.include_router(comments.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
