"""Structured logging setup for Postdesk."""

import structlog
from pathlib import Path
from typing import Any, Optional
import os


VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def default_log_file() -> Path:
    """Return the default JSON log location (~/.cache/postdesk/logs/postdesk.log)."""
    return Path.home() / ".cache" / "postdesk" / "logs" / "postdesk.log"


def configure_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """
    Configure structlog for JSON logging.

    Log level comes from the ``level`` argument, then the POSTDESK_LOG_LEVEL
    environment variable, and defaults to "INFO". Unknown levels fall back
    to "INFO".

    Log levels:
    - DEBUG: Region and block transform details, repository round-trips
    - INFO: Posts loaded, created, saved and deleted
    - WARNING: Dropped block groups, unregistered block types
    - ERROR: Rejected saves, configuration failures

    Example:
        # Enable debug logging
        export POSTDESK_LOG_LEVEL=DEBUG
        postdesk show 3f0c...

        # View logs with jq for readability:
        tail -f ~/.cache/postdesk/logs/postdesk.log | jq .

    Args:
        level: Explicit log level (overrides the environment)
        log_file: Where to append JSON log lines (default: ~/.cache/postdesk/logs/postdesk.log)
    """
    if log_file is None:
        log_file = default_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    log_level = (level or os.environ.get("POSTDESK_LOG_LEVEL", "INFO")).upper()
    if log_level not in VALID_LEVELS:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("post_saved", post_id="3f0c...", draft=True)
    """
    return structlog.get_logger(name)
