"""Interpreter Service event handlers.

Exports all handler registration functions for use in server setup.
"""

from interpreter_service.handlers.audio import register_audio_handlers
from interpreter_service.handlers.lifecycle import register_lifecycle_handlers
from interpreter_service.handlers.session import register_session_handlers

__all__ = [
    "register_audio_handlers",
    "register_lifecycle_handlers",
    "register_session_handlers",
]
