"""
dir-diff - structlog configuration.

Usage:
    from dir_diff.config.logging import configure_logging

    # At startup
    configure_logging()

    # In modules
    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("message", key=value)
"""

import logging
import sys
from typing import Optional, TextIO

import structlog
from structlog.types import EventDict, WrappedLogger

from dir_diff.models import display_text


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every log line with the application name."""
    event_dict["app"] = "dir-diff"
    return event_dict


def escape_undecodable(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Render non UTF-8 bytes in logged file names as \\xNN escapes."""
    return {
        key: display_text(value) if isinstance(value, str) else value
        for key, value in event_dict.items()
    }


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    enable_colors: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structlog for dir-diff.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, JSON lines. If False, human-readable console output
        enable_colors: Colorize console output (ignored for JSON)
        stream: Where log lines go (default: stderr, keeping stdout for reports)

    Example:
        >>> configure_logging(level="DEBUG", enable_colors=True)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )

    processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        escape_undecodable,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=enable_colors))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
