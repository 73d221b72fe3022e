"""
FIFO waiting queue of connections looking for a partner.

Pairing is anonymous and order-only: the two longest-waiting connections are
always the next pair. A connection is queued at most once.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Tuple

from .identity import ConnectionId


class WaitingQueue:
    def __init__(self):
        self._entries: Deque[ConnectionId] = deque()

    def enqueue(self, conn: ConnectionId) -> bool:
        """Append `conn` to the tail. Returns False if it was already queued."""
        if conn in self._entries:
            return False
        self._entries.append(conn)
        return True

    def dequeue_two(self) -> Optional[Tuple[ConnectionId, ConnectionId]]:
        """Pop the two oldest entries, or return None (without mutating) if fewer than two."""
        if len(self._entries) < 2:
            return None
        first = self._entries.popleft()
        second = self._entries.popleft()
        return first, second

    def requeue_front(self, first: ConnectionId, second: ConnectionId) -> None:
        """Put back a pair whose pairing attempt was aborted, keeping their original order."""
        self._entries.appendleft(second)
        self._entries.appendleft(first)

    def remove(self, conn: ConnectionId) -> bool:
        try:
            self._entries.remove(conn)
        except ValueError:
            return False
        return True

    def position(self, conn: ConnectionId) -> Optional[int]:
        """1-based position in the queue, None if not queued."""
        for index, entry in enumerate(self._entries):
            if entry == conn:
                return index + 1
        return None

    def __contains__(self, conn: object) -> bool:
        return conn in self._entries

    def __len__(self) -> int:
        return len(self._entries)
