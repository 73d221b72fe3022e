"""
Connection identity.

A `ConnectionId` is assigned when a socket is accepted and is the only key the
matchmaking core uses. It is deliberately unrelated to the Channels channel
name so the core never depends on transport handles.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class ConnectionId:
    value: str

    @classmethod
    def new(cls) -> "ConnectionId":
        return cls(uuid.uuid4().hex)

    def __str__(self) -> str:
        return self.value
