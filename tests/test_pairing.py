import logging

from pairchat.realtime.pairing import PairingEngine, new_session_id
from pairchat.realtime.registry import ConnectionRegistry, Profile
from pairchat.realtime.session_store import SessionStore
from pairchat.realtime.identity import ConnectionId
from pairchat.realtime.waiting_queue import WaitingQueue

from tests.helpers import wire


def build(session_id_factory):
    queue, store, registry = WaitingQueue(), SessionStore(), ConnectionRegistry()
    return PairingEngine(queue, store, registry, session_id_factory), queue, store, registry


def test_fewer_than_two_is_a_noop(session_ids, a):
    engine, queue, store, _ = build(session_ids)
    assert engine.try_pair() == []

    queue.enqueue(a)
    assert engine.try_pair() == []
    assert a in queue
    assert len(store) == 0


def test_pairs_in_arrival_order_and_notifies_both(session_ids, a, b, c):
    engine, queue, store, registry = build(session_ids)
    registry.set_profile(a, Profile(name="Ada", avatar="a.png"))
    registry.set_profile(b, Profile(name="Bob"))
    for conn in (a, b, c):
        queue.enqueue(conn)

    outbound = engine.try_pair()

    assert wire(outbound) == [
        (a, {"type": "room_created", "room": "room-1", "partner": {"name": "Bob", "avatar": None}}),
        (b, {"type": "room_created", "room": "room-1", "partner": {"name": "Ada", "avatar": "a.png"}}),
    ]
    assert store.session_of(a).session_id == "room-1"
    assert store.session_of(b).members == (a, b)
    assert list(queue._entries) == [c]


def test_missing_profile_pairs_with_placeholder(session_ids, a, b):
    engine, queue, _, registry = build(session_ids)
    registry.set_profile(a, Profile(name="Ada"))
    queue.enqueue(a)
    queue.enqueue(b)

    outbound = engine.try_pair()

    partners = {item.recipient: item.event.partner for item in outbound}
    assert partners[a] is None
    assert partners[b].name == "Ada"


def test_queue_parity_after_every_pairing_run(session_ids):
    engine, queue, store, _ = build(session_ids)
    for i in range(9):
        queue.enqueue(ConnectionId(f"conn-{i}"))
        engine.try_pair()
        assert len(queue) <= 1

    assert len(store) == 4
    for i in range(0, 8, 2):
        assert store.session_of(ConnectionId(f"conn-{i}")).members[0].value == f"conn-{i}"
    store.check_consistency()


def test_draining_a_backlog_pairs_everyone(session_ids):
    engine, queue, store, _ = build(session_ids)
    for i in range(6):
        queue.enqueue(ConnectionId(f"conn-{i}"))

    outbound = engine.try_pair()

    assert len(outbound) == 6
    assert len(store) == 3
    assert len(queue) == 0


def test_session_id_collision_aborts_the_attempt(caplog, a, b, c, d):
    engine, queue, store, _ = build(lambda: "same-id")
    for conn in (a, b, c, d):
        queue.enqueue(conn)

    with caplog.at_level(logging.ERROR, logger="pairchat.realtime.pairing"):
        outbound = engine.try_pair()

    assert {item.recipient for item in outbound} == {a, b}
    assert len(store) == 1
    assert list(queue._entries) == [c, d]
    assert store.session_of(c) is None
    assert "Pairing aborted" in caplog.text
    store.check_consistency()


def test_default_session_ids_are_random_uuids():
    ids = {new_session_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(len(i) == 36 for i in ids)
