"""
Relay authorization.

Every partner-bound event is checked against the sender's actual session. A
mismatch is dropped silently: the sender gets no error frame, so nothing is
revealed about which sessions exist. Payloads are forwarded verbatim and never
inspected.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .events import (
    DeliveredEvent,
    Outbound,
    PartnerTypingEvent,
    ReceiveEncryptedEvent,
    SeenByPartnerEvent,
)
from .identity import ConnectionId
from .session_store import SessionStore

logger = logging.getLogger(__name__)


def _shorten(room: str) -> str:
    # Session ids are capabilities; keep full values out of the logs.
    return f"{room[:8]}..." if len(room) > 8 else room


class RelayAuthorizer:
    def __init__(self, sessions: SessionStore):
        self._sessions = sessions

    def authorize(self, sender: ConnectionId, claimed_room: str, *, kind: str) -> Optional[ConnectionId]:
        """Return the partner to forward to, or None if `sender` is not a member of `claimed_room`."""
        session = self._sessions.session_of(sender)
        if session is None or session.session_id != claimed_room:
            logger.warning(
                "Unauthorized %s attempt from %s (claimed room=%s, paired=%s)",
                kind,
                sender,
                _shorten(claimed_room),
                session is not None,
            )
            return None

        partner = session.partner_of(sender)
        if partner is None:
            # Reverse index pointed at a session that does not list the sender.
            logger.error("Session %s does not contain its member %s", _shorten(claimed_room), sender)
        return partner

    def relay_message(self, sender: ConnectionId, room: str, encrypted: Any, timestamp: Any = None) -> List[Outbound]:
        partner = self.authorize(sender, room, kind="message")
        if partner is None:
            return []
        return [
            Outbound(partner, ReceiveEncryptedEvent(encrypted=encrypted, sender=str(sender), timestamp=timestamp)),
            Outbound(partner, DeliveredEvent(sender=str(sender))),
        ]

    def relay_seen(self, sender: ConnectionId, room: str, sender_id: str) -> List[Outbound]:
        partner = self.authorize(sender, room, kind="seen")
        if partner is None:
            return []
        return [Outbound(partner, SeenByPartnerEvent(sender_id=sender_id))]

    def relay_typing(self, sender: ConnectionId, room: str, name: str) -> List[Outbound]:
        partner = self.authorize(sender, room, kind="typing")
        if partner is None:
            return []
        return [Outbound(partner, PartnerTypingEvent(name=name))]
