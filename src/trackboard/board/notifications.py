"""User-facing notification collaborators."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger("trackboard.board.notifications")


class Notifier(Protocol):
    """Interface for displaying short success/failure messages."""

    def success(self, message: str) -> None:
        """Show a success message."""
        ...

    def error(self, message: str) -> None:
        """Show a failure message."""
        ...


class LoggingNotifier:
    """Notifier that writes messages to the log and keeps the last few.

    Used when no UI is attached (CLI, tests, headless clients).
    """

    def __init__(self, max_messages: int = 50) -> None:
        self.max_messages = max_messages
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        logger.info(message)
        self._remember("success", message)

    def error(self, message: str) -> None:
        logger.error(message)
        self._remember("error", message)

    def _remember(self, level: str, message: str) -> None:
        self.messages.append((level, message))
        del self.messages[: -self.max_messages]
