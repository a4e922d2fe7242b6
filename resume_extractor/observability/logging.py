"""Structured logging setup.

Modules log through ``structlog.get_logger()``; this module decides how
those entries are rendered and adds the correlation ID of the extraction
in flight.

Usage:
    configure_logging(level="INFO", json_output=False)
    logger = get_logger("pdf_extractor")
    logger.info("pdf_extraction_success", file_name="cv.pdf")
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from resume_extractor.observability.context import get_correlation_id


def add_correlation_id_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds ``correlation_id`` ("none" when unset)."""
    corr_id = get_correlation_id()
    event_dict["correlation_id"] = corr_id if corr_id else "none"
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the application.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines; otherwise the coloured console format
        add_timestamp: Add an ISO timestamp to each entry

    Entries are written to stderr so command output on stdout stays clean.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        add_correlation_id_processor,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(component: Optional[str] = None, **initial_context: Any) -> Any:
    """Get a structlog logger, optionally bound to a component name and context."""
    logger = structlog.get_logger()
    if component:
        logger = logger.bind(component=component)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def bind_context(**context: Any) -> None:
    """Bind key/values to every subsequent entry in the current context."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
