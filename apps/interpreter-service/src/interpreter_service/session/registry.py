"""Session registry: (session_id, role) -> connection.

The registry is the single source of truth for "who is my counterpart right
now". Pipelines resolve their peer through it at every dispatch and never
keep a peer reference of their own.
"""

import logging

from interpreter_service.models.events import ParticipantInfo, Role

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-memory map of sessions to the connection registered for each role.

    All mutations are single dict updates performed from the event loop, so
    no lock is needed.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, dict[Role, str]] = {}  # session_id -> role -> sid

    def register(self, session_id: str, role: Role | str, connection: str) -> str | None:
        """Register a connection for a role, replacing any previous one.

        Args:
            session_id: Session identifier.
            role: Participant role.
            connection: Socket.IO session ID.

        Returns:
            The connection that was replaced, or None.
        """
        role = Role(role)
        participants = self._sessions.setdefault(session_id, {})
        previous = participants.get(role)
        participants[role] = connection

        if previous is not None and previous != connection:
            logger.info(
                f"Replaced participant: session_id={session_id}, role={role.value}, "
                f"old_sid={previous}, new_sid={connection}"
            )
        return previous if previous != connection else None

    def unregister(
        self,
        session_id: str,
        role: Role | str,
        connection: str | None = None,
    ) -> bool:
        """Remove a role from a session, dropping the session when empty.

        Args:
            session_id: Session identifier.
            role: Participant role.
            connection: If given, only remove the entry when it still belongs
                to this connection (a replaced socket cannot evict its successor).

        Returns:
            True if an entry was removed.
        """
        role = Role(role)
        participants = self._sessions.get(session_id)
        if participants is None or role not in participants:
            return False

        if connection is not None and participants[role] != connection:
            logger.debug(
                f"Skipping unregister of replaced connection: session_id={session_id}, "
                f"role={role.value}, sid={connection}"
            )
            return False

        del participants[role]
        if not participants:
            del self._sessions[session_id]
        return True

    def lookup(self, session_id: str, role: Role | str) -> str | None:
        """Return the connection registered for a role, or None."""
        participants = self._sessions.get(session_id)
        if participants is None:
            return None
        return participants.get(Role(role))

    def lookup_peer(self, session_id: str, my_role: Role | str) -> str | None:
        """Return the connection of the opposite role, or None if absent.

        Absence is a normal condition: the peer may not have joined yet or
        may have left.
        """
        return self.lookup(session_id, Role(my_role).peer)

    def list_participants(self, session_id: str) -> list[ParticipantInfo]:
        """List a session's participants in role order."""
        participants = self._sessions.get(session_id, {})
        return [
            ParticipantInfo(role=role, connection_id=participants[role], connected=True)
            for role in Role
            if role in participants
        ]

    def session_of(self, connection: str) -> tuple[str, Role] | None:
        """Find the (session_id, role) a connection is registered under."""
        for session_id, participants in self._sessions.items():
            for role, sid in participants.items():
                if sid == connection:
                    return session_id, role
        return None

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def count(self) -> int:
        """Return number of sessions with at least one participant."""
        return len(self._sessions)
