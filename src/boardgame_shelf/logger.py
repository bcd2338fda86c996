"""
Structured logging configuration using structlog.

Build and sync runs are usually scheduled (a CI job rebuilding the
site), so logs default to JSON lines; LOG_FORMAT=console gives
readable output when running the CLI by hand. Logs always go to
stderr: stdout carries only the CLI's JSON result.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict, Processor

from boardgame_shelf import __version__
from boardgame_shelf.config import get_settings

APP_NAME = "boardgame-shelf"


def add_app_context(_logger: Any, _method: str, event_dict: "EventDict") -> "EventDict":
    """Stamp every event with the application name and version."""
    event_dict.setdefault("app", APP_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def setup_logging() -> None:
    """
    Configure structured logging for a CLI run.

    Renders structlog events as JSON or console text (LOG_FORMAT) on
    stderr, filtered at LOG_LEVEL. The standard library root logger
    is pointed at stderr too, and httpx's per-request INFO lines are
    silenced; retries are already logged by the extractors.
    """
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.logging.include_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.logging.level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # httpx logs every request at INFO through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.logging.level),
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger for a shelf module.

    The returned proxy resolves its configuration on first use, so a
    module-level logger created at import time still honours a later
    setup_logging() call.

    Args:
        name: Logger name (typically __name__ of the calling module)
        **initial_context: Values bound to every event, such as the
            component ("manifest", "extractor") or the BGG endpoint

    Example:
        >>> logger = get_logger(__name__, component="extractor", source="thing")
        >>> logger.info("Fetched chunk", requested=30, received=29)
    """
    return structlog.get_logger(name, **initial_context)
