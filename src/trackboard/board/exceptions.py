"""Custom exceptions for the board core."""


class BoardError(Exception):
    """Base exception for board errors."""


class DragStateError(BoardError):
    """Drag controller method called in the wrong state."""
