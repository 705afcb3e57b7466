"""Centralized logging setup with optional Logfire integration.

This module configures structlog for the library and for applications that
embed it. Logfire is only wired in when enabled in the settings.
"""

import logging
import sys

import logfire
import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.types import EventDict, Processor, WrappedLogger

from cypher_dsl.core.config import Settings, get_settings

from .base import get_logger

__all__ = ["get_logger", "setup_logging"]


def add_query_context(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add query-specific context to log events.

    Args:
        _logger: The wrapped logger instance
        _method_name: The name of the logging method
        event_dict: The event dictionary

    Returns:
        The event dictionary with added context
    """
    if "error" in event_dict:
        event_dict["error_type"] = type(event_dict["error"]).__name__

    # Long statements are truncated for console output; the full text stays in "query"
    query = event_dict.get("query")
    if isinstance(query, str) and len(query) > 120:
        event_dict["query_summary"] = query[:117] + "..."

    return event_dict


def _level_from_name(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def setup_logging(settings: Settings | None = None) -> None:
    """Set up logging with structlog and, when enabled, Logfire.

    Args:
        settings: Settings to read the level and renderer options from,
            defaults to the process-wide settings
    """
    settings = settings or get_settings()
    level = _level_from_name(settings.log_level)

    processors: list[Processor] = [
        # Merge context from contextvars
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        CallsiteParameterAdder(
            parameters=[
                CallsiteParameter.FILENAME,
                CallsiteParameter.LINENO,
                CallsiteParameter.FUNC_NAME,
            ]
        ),
        add_query_context,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if settings.logfire_enabled:
        logfire.configure(send_to_logfire="if-token-present")
        # MUST come before the final renderer
        processors.append(logfire.StructlogProcessor())

    renderer = structlog.dev.ConsoleRenderer(colors=settings.log_colors)

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # Use PrintLogger to avoid double logging with standard library
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # Standard library records (e.g. from the neo4j driver) go through the same chain
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[p for p in processors if not isinstance(p, logfire.StructlogProcessor)],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)
