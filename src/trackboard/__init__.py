"""Trackboard - project and ticket tracking with an optimistic Kanban board."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the installed Trackboard version."""
    return __version__
