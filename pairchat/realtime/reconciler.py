"""
Teardown of all state held for a connection that went away.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .events import Outbound, PartnerDisconnectedEvent
from .identity import ConnectionId
from .registry import ConnectionRegistry
from .session_store import ChatSession, SessionStore
from .waiting_queue import WaitingQueue

logger = logging.getLogger(__name__)


class DisconnectReconciler:
    def __init__(self, sessions: SessionStore, queue: WaitingQueue, registry: ConnectionRegistry):
        self._sessions = sessions
        self._queue = queue
        self._registry = registry

    def end_session_for(self, conn: ConnectionId) -> Tuple[Optional[ChatSession], List[Outbound]]:
        """Tear down `conn`'s session, if any, and notify the partner.

        The partner is left unpaired and is not requeued.
        """
        session = self._sessions.session_of(conn)
        if session is None:
            return None, []

        outbound: List[Outbound] = []
        partner = session.partner_of(conn)
        if partner is not None:
            outbound.append(Outbound(partner, PartnerDisconnectedEvent(connection_id=str(conn))))
        self._sessions.end_session(session.session_id)
        logger.info("Session ended by %s (partner=%s)", conn, partner)
        return session, outbound

    def disconnect(self, conn: ConnectionId) -> List[Outbound]:
        _, outbound = self.end_session_for(conn)
        self._queue.remove(conn)
        self._registry.remove(conn)
        return outbound
