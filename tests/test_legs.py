import threading

import pytest

from legtensor import Leg, LegRegistry, default_registry, display, leg, raw_leg


def test_same_name_returns_same_identity(registry):
    first = registry.identity_for_name("Up")
    second = registry.identity_for_name("Up")
    assert first == second
    assert first.id == second.id
    assert len(registry) == 1


def test_distinct_names_get_monotonic_ids(registry):
    ids = [registry.identity_for_name(name).id for name in ("Up", "Down", "Left")]
    assert ids == [0, 1, 2]
    assert registry.names() == ["Up", "Down", "Left"]


def test_display_round_trips_names(registry):
    for name in ("Phy", "Right3", "Leg42"):
        assert registry.display(registry.identity_for_name(name)) == name


def test_raw_identity_does_not_touch_registry(registry):
    synthetic = registry.identity_from_raw(1000)
    assert synthetic == raw_leg(1000)
    assert synthetic not in registry
    assert len(registry) == 0
    assert registry.display(synthetic) == "UserDefinedLeg1000"
    assert str(synthetic) == "UserDefinedLeg1000"


def test_raw_identity_may_collide_with_named(registry):
    named = registry.identity_for_name("Up")
    collided = raw_leg(named.id)
    assert collided == named
    assert registry.display(collided) == "Up"


def test_equality_and_ordering_ignore_name():
    assert Leg(3, "A") == Leg(3, "B")
    assert hash(Leg(3, "A")) == hash(Leg(3))
    assert sorted([Leg(5), Leg(1, "x"), Leg(3)]) == [Leg(1), Leg(3), Leg(5)]
    assert {Leg(2, "Down"): 1}[Leg(2)] == 1


def test_raw_leg_rejects_non_integers():
    with pytest.raises(TypeError):
        raw_leg("3")
    with pytest.raises(TypeError):
        raw_leg(True)


def test_identity_for_name_rejects_non_strings(registry):
    with pytest.raises(TypeError):
        registry.identity_for_name(3)


def test_lookup_never_allocates(registry):
    assert registry.lookup("Missing") is None
    assert len(registry) == 0
    registry("Up")
    assert registry.lookup("Up") == registry("Up")


def test_resolve_accepts_legs_names_and_ints(registry):
    up = registry.resolve("Up")
    assert registry.resolve(up) is up
    assert registry.resolve(7) == Leg(7)
    with pytest.raises(TypeError):
        registry.resolve(1.5)


def test_registries_are_independent():
    a = LegRegistry()
    b = LegRegistry(first_id=100)
    a("Left")
    assert b("Right").id == 100
    assert "Right" not in a
    assert "Left" not in b


def test_reset_restarts_allocation(registry):
    registry("Up")
    registry("Down")
    registry.reset()
    assert len(registry) == 0
    assert registry("Left").id == 0


def test_iteration_yields_named_legs(registry):
    registry("Up")
    registry("Down")
    assert [(item.id, item.name) for item in registry] == [(0, "Up"), (1, "Down")]


def test_default_registry_is_shared():
    name = "test_default_registry_is_shared"
    assert default_registry() is default_registry()
    assert leg(name) == default_registry().identity_for_name(name)
    assert display(leg(name)) == name


def test_concurrent_allocation_keeps_bijection(registry):
    names = [f"Tmp{i}" for i in range(50)]
    results = {}

    def worker(offset):
        for name in names[offset:] + names[:offset]:
            results.setdefault(name, set()).add(registry.identity_for_name(name).id)

    threads = [threading.Thread(target=worker, args=(k,)) for k in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == len(names)
    assert all(len(ids) == 1 for ids in results.values())
    assert sorted(next(iter(ids)) for ids in results.values()) == list(range(len(names)))
