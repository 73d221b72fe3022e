from pairchat.realtime.identity import ConnectionId
from pairchat.realtime.registry import ConnectionRegistry, Profile


def test_connection_ids_are_unique_and_hashable():
    first, second = ConnectionId.new(), ConnectionId.new()
    assert first != second
    assert {first: 1}[ConnectionId(first.value)] == 1
    assert str(first) == first.value


def test_set_profile_overwrites(a):
    registry = ConnectionRegistry()
    registry.set_profile(a, Profile(name="Ada"))
    registry.set_profile(a, Profile(name="Ada L.", avatar="cat.png"))

    assert registry.get_profile(a) == Profile(name="Ada L.", avatar="cat.png")
    assert len(registry) == 1


def test_missing_profile_is_none(a):
    assert ConnectionRegistry().get_profile(a) is None


def test_remove_is_a_noop_when_absent(a, b):
    registry = ConnectionRegistry()
    registry.set_profile(a, Profile(name="Ada"))

    registry.remove(b)
    registry.remove(a)
    registry.remove(a)

    assert a not in registry
    assert len(registry) == 0
