"""
The lobby: single owner of all matchmaking state.

The registry, waiting queue and session store are only ever touched from
inside `Lobby` methods, each of which runs under one lock and never blocks on
I/O. Methods return the events to deliver instead of sending them, so the
transport stays outside the lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .events import (
    EncryptedMessage,
    LeaveMessage,
    Outbound,
    SeenMessage,
    SessionEndedEvent,
    TypingMessage,
    UserInfoMessage,
    WaitingEvent,
)
from .identity import ConnectionId
from .pairing import PairingEngine, new_session_id
from .reconciler import DisconnectReconciler
from .registry import ConnectionRegistry, Profile
from .relay import RelayAuthorizer
from .session_store import ChatSession, SessionInvariantError, SessionStore
from .waiting_queue import WaitingQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LobbyStats:
    profiles: int
    waiting: int
    sessions: int


class Lobby:
    def __init__(self, session_id_factory: Callable[[], str] = new_session_id):
        self._lock = threading.Lock()
        self._registry = ConnectionRegistry()
        self._queue = WaitingQueue()
        self._sessions = SessionStore()
        self._pairing = PairingEngine(self._queue, self._sessions, self._registry, session_id_factory)
        self._relay = RelayAuthorizer(self._sessions)
        self._reconciler = DisconnectReconciler(self._sessions, self._queue, self._registry)

    def declare_profile(self, conn: ConnectionId, name: str, avatar: Optional[str] = None) -> List[Outbound]:
        """Record `conn`'s profile and, unless it is already queued or paired, look for a partner."""
        with self._lock:
            self._registry.set_profile(conn, Profile(name=name, avatar=avatar))
            if self._sessions.session_of(conn) is not None:
                logger.debug("Profile updated for paired connection %s", conn)
                return []
            if not self._queue.enqueue(conn):
                logger.debug("Profile updated for queued connection %s", conn)
                return []

            outbound = self._pairing.try_pair()
            position = self._queue.position(conn)
            if position is not None:
                outbound.append(Outbound(conn, WaitingEvent(position=position)))
            return outbound

    def relay_message(self, conn: ConnectionId, room: str, encrypted: Any, timestamp: Any = None) -> List[Outbound]:
        with self._lock:
            return self._relay.relay_message(conn, room, encrypted, timestamp)

    def mark_seen(self, conn: ConnectionId, room: str, sender_id: str) -> List[Outbound]:
        with self._lock:
            return self._relay.relay_seen(conn, room, sender_id)

    def typing(self, conn: ConnectionId, room: str, name: str) -> List[Outbound]:
        with self._lock:
            return self._relay.relay_typing(conn, room, name)

    def leave(self, conn: ConnectionId) -> List[Outbound]:
        """End `conn`'s session or cancel its wait. The profile is kept for a later requeue."""
        with self._lock:
            session, outbound = self._reconciler.end_session_for(conn)
            self._queue.remove(conn)
            room = session.session_id if session else None
            outbound.append(Outbound(conn, SessionEndedEvent(room=room)))
            return outbound

    def disconnect(self, conn: ConnectionId) -> List[Outbound]:
        with self._lock:
            return self._reconciler.disconnect(conn)

    def handle(self, conn: ConnectionId, message: Any) -> List[Outbound]:
        """Dispatch a validated inbound message."""
        if isinstance(message, UserInfoMessage):
            return self.declare_profile(conn, message.name, message.avatar)
        if isinstance(message, EncryptedMessage):
            return self.relay_message(conn, message.room, message.encrypted, message.timestamp)
        if isinstance(message, SeenMessage):
            return self.mark_seen(conn, message.room, message.sender_id)
        if isinstance(message, TypingMessage):
            return self.typing(conn, message.room, message.name)
        if isinstance(message, LeaveMessage):
            return self.leave(conn)
        raise TypeError(f"Unsupported message: {type(message).__name__}")

    def session_of(self, conn: ConnectionId) -> Optional[ChatSession]:
        with self._lock:
            return self._sessions.session_of(conn)

    def is_queued(self, conn: ConnectionId) -> bool:
        with self._lock:
            return conn in self._queue

    def check_consistency(self) -> None:
        with self._lock:
            self._sessions.check_consistency()
            for conn in self._sessions.paired_connections():
                if conn in self._queue:
                    raise SessionInvariantError(f"{conn} is both queued and paired")

    def stats(self) -> LobbyStats:
        with self._lock:
            return LobbyStats(
                profiles=len(self._registry),
                waiting=len(self._queue),
                sessions=len(self._sessions),
            )


# Global lobby instance
lobby = Lobby()
