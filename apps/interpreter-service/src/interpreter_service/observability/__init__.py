"""Logging and metrics for the Interpreter Service."""

from .logger import bind_session_context, get_logger, setup_logging

__all__ = ["bind_session_context", "get_logger", "setup_logging"]
