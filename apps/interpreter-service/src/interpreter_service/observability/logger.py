"""
Structured logging configuration for the Interpreter Service.

Uses structlog for JSON-formatted logs with consistent context binding for
session_id, connection_id, and utterance_id throughout an utterance's lifecycle.
"""

import logging
import sys

import structlog


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """
    Configure structlog on top of the standard logging module.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO
        log_format: "json" for production, "console" for human-readable output
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured BoundLogger instance
    """
    return structlog.get_logger(name)


def bind_session_context(
    logger: structlog.BoundLogger,
    session_id: str,
    connection_id: str | None = None,
    utterance_id: str | None = None,
) -> structlog.BoundLogger:
    """
    Bind interpretation context to logger.

    Creates a new bound logger with session_id, connection_id, and utterance_id
    automatically included in all subsequent log entries.

    Args:
        logger: Base logger instance
        session_id: Conversation session identifier
        connection_id: Socket.IO connection identifier (optional)
        utterance_id: Utterance identifier (optional)

    Returns:
        BoundLogger with context bound

    Example:
        >>> logger = get_logger(__name__)
        >>> logger = bind_session_context(logger, session_id="ABC123", utterance_id="u-1")
        >>> logger.info("translation_started")  # Includes session_id and utterance_id
    """
    context = {"session_id": session_id}
    if connection_id:
        context["connection_id"] = connection_id
    if utterance_id:
        context["utterance_id"] = utterance_id

    return logger.bind(**context)
