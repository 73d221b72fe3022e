import itertools

import pytest

from pairchat.realtime.identity import ConnectionId
from pairchat.realtime.lobby import Lobby


@pytest.fixture
def session_ids():
    """Deterministic session id factory: room-1, room-2, ..."""
    counter = itertools.count(1)
    return lambda: f"room-{next(counter)}"


@pytest.fixture
def lobby(session_ids):
    return Lobby(session_id_factory=session_ids)


@pytest.fixture
def a():
    return ConnectionId("conn-a")


@pytest.fixture
def b():
    return ConnectionId("conn-b")


@pytest.fixture
def c():
    return ConnectionId("conn-c")


@pytest.fixture
def d():
    return ConnectionId("conn-d")
