"""
Two-party chat session index.

Tracks which connections are paired and under which session id. The store owns
both directions of the mapping and keeps them in agreement:
every member of a session maps back to that session, and nothing else does.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .identity import ConnectionId


class SessionInvariantError(RuntimeError):
    """A session operation would break the store's consistency guarantees."""


@dataclass(frozen=True)
class ChatSession:
    """An active pairing. The id doubles as the relay authorization capability."""

    session_id: str
    members: Tuple[ConnectionId, ConnectionId]

    def partner_of(self, conn: ConnectionId) -> Optional[ConnectionId]:
        first, second = self.members
        if conn == first:
            return second
        if conn == second:
            return first
        return None


class SessionStore:
    """
    Manages chat sessions.
    Tracks sessions by session_id and by member connection.
    """

    def __init__(self):
        # Map session_id -> ChatSession
        self._sessions_by_id: Dict[str, ChatSession] = {}
        # Map connection -> ChatSession (reverse index for membership checks)
        self._sessions_by_connection: Dict[ConnectionId, ChatSession] = {}

    def create_session(self, session_id: str, first: ConnectionId, second: ConnectionId) -> ChatSession:
        """Register a new session for two distinct, currently unpaired connections.

        Raises:
            SessionInvariantError: on id collision, identical members, or a member
                that already belongs to a session. Nothing is mutated in that case.
        """
        if session_id in self._sessions_by_id:
            raise SessionInvariantError(f"session id collision: {session_id[:8]}...")
        if first == second:
            raise SessionInvariantError(f"cannot pair connection {first} with itself")
        for conn in (first, second):
            if conn in self._sessions_by_connection:
                raise SessionInvariantError(f"connection {conn} already belongs to a session")

        session = ChatSession(session_id=session_id, members=(first, second))
        self._sessions_by_id[session_id] = session
        self._sessions_by_connection[first] = session
        self._sessions_by_connection[second] = session
        return session

    def session_of(self, conn: ConnectionId) -> Optional[ChatSession]:
        """Get the session a connection currently belongs to."""
        return self._sessions_by_connection.get(conn)

    def end_session(self, session_id: str) -> Optional[ChatSession]:
        """Delete a session and both member mappings. Returns the removed session, if any."""
        session = self._sessions_by_id.pop(session_id, None)
        if session is None:
            return None
        for conn in session.members:
            if self._sessions_by_connection.get(conn) is session:
                del self._sessions_by_connection[conn]
        return session

    def paired_connections(self) -> List[ConnectionId]:
        return list(self._sessions_by_connection)

    def check_consistency(self) -> None:
        """Raise SessionInvariantError if the forward and reverse maps disagree."""
        for session_id, session in self._sessions_by_id.items():
            if session.session_id != session_id or len(set(session.members)) != 2:
                raise SessionInvariantError(f"malformed session {session_id[:8]}...")
            for conn in session.members:
                if self._sessions_by_connection.get(conn) is not session:
                    raise SessionInvariantError(f"{conn} does not map back to its session")
        for conn, session in self._sessions_by_connection.items():
            if self._sessions_by_id.get(session.session_id) is not session or conn not in session.members:
                raise SessionInvariantError(f"{conn} maps to a session it is not a member of")

    def __len__(self) -> int:
        return len(self._sessions_by_id)
