from protodel.core.config import SpaceConfig
from protodel.core.registry.space import PrototypeSpace
from protodel.core.runtime.binding import MethodBinding, bind
from protodel.core.runtime.cache import CachedResolution, PropertyCache


def _make_chain(space: PrototypeSpace, depth: int):
    chain = [space.create({"x": "v0"})]
    for _ in range(depth):
        chain.append(space.extend(chain[-1], {}))
    return chain


def test_write_on_root_is_visible_through_cached_chain():
    space = PrototypeSpace()
    p0, p1, p2, p3 = _make_chain(space, 3)

    assert p3.get("x") == "v0"
    assert ("x", p2.handle) in space.cache

    p0.set("x", "v1")

    assert ("x", p2.handle) not in space.cache
    assert p3.get("x") == "v1"


def test_delete_on_root_is_visible_through_cached_chain():
    space = PrototypeSpace()
    p0, p1, p2 = _make_chain(space, 2)

    assert p2.get("x") == "v0"

    p0.delete("x")

    assert p2.get("x") is None
    assert not p2.has("x")


def test_write_anywhere_invalidates_every_entry_for_the_name():
    space = PrototypeSpace()
    a = space.create({"x": 1, "y": 1})
    b = space.create({"x": 2})
    a_child = space.extend(a, {})
    b_child = space.extend(b, {})

    a_child.get("x")
    a_child.get("y")
    b_child.get("x")

    unrelated = space.create({})
    unrelated.set("x", "anything")

    assert ("x", a.handle) not in space.cache
    assert ("x", b.handle) not in space.cache
    assert ("y", a.handle) in space.cache


def test_siblings_share_one_entry_but_get_their_own_binding():
    space = PrototypeSpace()
    base = space.create({"me": lambda this: this})
    first = space.extend(base, {})
    second = space.extend(base, {})

    assert first.call("me") is first
    hits_before = space.cache.stats.hits

    assert second.call("me") is second
    assert space.cache.stats.hits == hits_before + 1
    assert len(space.cache) == 1


def test_absence_is_cached_and_invalidated_by_a_later_write():
    space = PrototypeSpace()
    base = space.create({})
    child = space.extend(base, {})

    assert not child.has("late")
    assert ("late", base.handle) in space.cache

    base.set("late", "here")

    assert child.get("late") == "here"


def test_disabled_cache_stores_nothing():
    space = PrototypeSpace(SpaceConfig(cache_enabled=False))
    p0, p1, p2 = _make_chain(space, 2)

    assert p2.get("x") == "v0"
    assert len(space.cache) == 0

    p0.set("x", "v1")
    assert p2.get("x") == "v1"


def test_property_cache_lookup_store_and_invalidate():
    cache = PropertyCache()
    entry = CachedResolution(value=1)

    assert cache.lookup("x", 1) is None
    cache.store("x", 1, entry)
    cache.store("x", 2, entry)
    cache.store("y", 1, entry)

    assert cache.lookup("x", 1) is entry
    assert cache.stats.hits == 1
    assert cache.stats.misses == 1
    assert cache.stats.hit_rate == 0.5

    cache.invalidate("x")

    assert cache.lookup("x", 2) is None
    assert cache.lookup("y", 1) is entry
    assert cache.stats.invalidations == 1


def test_property_cache_forget_prototype():
    cache = PropertyCache()
    cache.store("x", 1, CachedResolution(value=1))
    cache.store("y", 1, CachedResolution(value=2))
    cache.store("y", 2, CachedResolution(value=3))

    cache.forget_prototype(1)

    assert ("x", 1) not in cache
    assert ("y", 1) not in cache
    assert ("y", 2) in cache
    assert len(cache) == 1


def test_bind_wraps_functions_and_leaves_other_callables():
    owner = object()
    other = object()

    def method(this):
        return this

    bound = bind(method, owner)

    assert isinstance(bound, MethodBinding)
    assert bound() is owner
    assert bind(bound, owner) is bound
    assert bind(bound, other)() is other
    assert bind(len, owner) is len
    assert bind(5, owner) == 5
