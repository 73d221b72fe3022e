"""
Pairing engine.

Drains the waiting queue two at a time into new sessions. Pairing is greedy
and immediate: it never waits for a better match, and calling it with fewer
than two queued connections does nothing.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, List, Optional

from .events import Outbound, PartnerProfile, RoomCreatedEvent
from .identity import ConnectionId
from .registry import ConnectionRegistry
from .session_store import SessionInvariantError, SessionStore
from .waiting_queue import WaitingQueue

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return str(uuid.uuid4())


class PairingEngine:
    def __init__(
        self,
        queue: WaitingQueue,
        sessions: SessionStore,
        registry: ConnectionRegistry,
        session_id_factory: Callable[[], str] = new_session_id,
    ):
        self._queue = queue
        self._sessions = sessions
        self._registry = registry
        self._session_id_factory = session_id_factory

    def _partner_profile(self, conn: ConnectionId) -> Optional[PartnerProfile]:
        profile = self._registry.get_profile(conn)
        if profile is None:
            logger.info("Pairing %s without a declared profile", conn)
            return None
        return PartnerProfile(name=profile.name, avatar=profile.avatar)

    def try_pair(self) -> List[Outbound]:
        """Pair queued connections in arrival order until fewer than two remain."""
        outbound: List[Outbound] = []
        while True:
            pair = self._queue.dequeue_two()
            if pair is None:
                break
            first, second = pair

            try:
                session = self._sessions.create_session(self._session_id_factory(), first, second)
            except SessionInvariantError:
                # Abort this attempt only; the pair keeps its place at the head of the queue.
                logger.exception("Pairing aborted for %s <-> %s", first, second)
                self._queue.requeue_front(first, second)
                break

            outbound.append(
                Outbound(first, RoomCreatedEvent(room=session.session_id, partner=self._partner_profile(second)))
            )
            outbound.append(
                Outbound(second, RoomCreatedEvent(room=session.session_id, partner=self._partner_profile(first)))
            )
            logger.info("Paired: %s <-> %s", first, second)
        return outbound
