"""
Connection registry: declared profile per live connection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .identity import ConnectionId


@dataclass(frozen=True)
class Profile:
    name: str
    avatar: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "avatar": self.avatar}


class ConnectionRegistry:
    """Profiles keyed by connection. Absence is a normal outcome, never an error."""

    def __init__(self):
        self._profiles: Dict[ConnectionId, Profile] = {}

    def set_profile(self, conn: ConnectionId, profile: Profile) -> None:
        self._profiles[conn] = profile

    def get_profile(self, conn: ConnectionId) -> Optional[Profile]:
        return self._profiles.get(conn)

    def remove(self, conn: ConnectionId) -> None:
        self._profiles.pop(conn, None)

    def __contains__(self, conn: object) -> bool:
        return conn in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
