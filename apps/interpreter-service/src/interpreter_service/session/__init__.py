"""Session membership and per-connection state."""

from .connection import ConnectionState, ConnectionStore
from .registry import SessionRegistry

__all__ = ["ConnectionState", "ConnectionStore", "SessionRegistry"]
