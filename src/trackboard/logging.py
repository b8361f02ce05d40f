"""Logging setup shared by the Trackboard server, client and CLI.

Every module logs under the ``trackboard`` logger tree
(``trackboard.board.session``, ``trackboard.client``, ...). ``setup_logging``
attaches the handlers once per process; library code never configures logging
itself.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "trackboard"

LOG_DIR_ENV = "TRACKBOARD_LOG_DIR"
LOG_LEVEL_ENV = "TRACKBOARD_LOG_LEVEL"

DEFAULT_LOG_DIR = "logs"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every request at INFO; the client logs its own failures
NOISY_LOGGERS = ("httpx", "httpcore")

_REDACTIONS = [
    (re.compile(r"Bearer [A-Za-z0-9._~+/=-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[^&\s\"']+"), "token=[REDACTED]"),
    (re.compile(r'"password"\s*:\s*"[^"]*"'), '"password": "[REDACTED]"'),
]


def setup_logging(
    command: str = "trackboard",
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = True,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """Configure the ``trackboard`` logger for one CLI command.

    Each command writes its own rotating file, ``<log_dir>/<command>.log``, so
    a long-running ``serve`` does not interleave with one-shot ``board`` or
    ``move`` runs. Calling it again replaces the previous handlers.

    Args:
        command: Log file stem, usually the CLI command name.
        log_dir: Directory for log files. Falls back to ``TRACKBOARD_LOG_DIR``,
            then ``./logs``.
        level: Level name. Falls back to ``TRACKBOARD_LOG_LEVEL``, then INFO.
            Unknown names mean INFO.
        console: Also log to stderr. The board-printing commands turn this
            off so their stdout stays readable.
        max_bytes: Rotate the file after this many bytes.
        backup_count: Rotated files to keep.

    Returns:
        The configured ``trackboard`` logger.
    """
    directory = Path(log_dir or os.environ.get(LOG_DIR_ENV) or DEFAULT_LOG_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    log_path = directory / f"{command}.log"
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logger.debug("Logging to %s at %s", log_path, logging.getLevelName(log_level))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a Trackboard area, e.g. ``get_logger("board.store")``."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def truncate_body(body: str, limit: int = 500) -> str:
    """Shorten an HTTP response body for a log line."""
    if len(body) <= limit:
        return body
    return f"{body[:limit]}... [{len(body) - limit} more chars]"


def redact(text: str) -> str:
    """Mask bearer tokens, ``token=`` query values and password fields."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text
