"""Per-connection state for the Interpreter Service.

Provides ConnectionState dataclass and ConnectionStore for tracking what each
Socket.IO connection has joined and announced.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from interpreter_service.models.events import Role


@dataclass
class ConnectionState:
    """State attached to one Socket.IO connection.

    Each connection has exactly one ConnectionState from connect until
    disconnect. `session_id`/`role` are set while joined to a session.
    """

    sid: str
    session_id: str | None = None
    role: Role | None = None
    language: str | None = None
    is_muted: bool = False
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def in_session(self) -> bool:
        return self.session_id is not None and self.role is not None

    def join(self, session_id: str, role: Role) -> None:
        self.session_id = session_id
        self.role = role
        self.is_muted = False

    def leave(self) -> None:
        self.session_id = None
        self.role = None
        self.language = None


class ConnectionStore:
    """In-memory store of ConnectionState indexed by Socket.IO sid."""

    def __init__(self) -> None:
        self._connections: dict[str, ConnectionState] = {}

    def create(self, sid: str) -> ConnectionState:
        """Create (or reset) the state for a connection."""
        state = ConnectionState(sid=sid)
        self._connections[sid] = state
        return state

    def get(self, sid: str) -> ConnectionState | None:
        return self._connections.get(sid)

    def get_or_create(self, sid: str) -> ConnectionState:
        state = self._connections.get(sid)
        if state is None:
            state = self.create(sid)
        return state

    def delete(self, sid: str) -> ConnectionState | None:
        return self._connections.pop(sid, None)

    def count(self) -> int:
        """Return number of tracked connections."""
        return len(self._connections)
