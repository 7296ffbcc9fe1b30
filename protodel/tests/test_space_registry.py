import gc

import pytest

from protodel.core.registry.space import PrototypeSpace


def _make_tree(space: PrototypeSpace):
    root = space.create({"x": "root"})
    c1 = space.extend(root, {"name": "c1"})
    c2 = space.extend(root, {"name": "c2"})
    g1 = space.extend(c1, {"name": "g1"})
    return root, c1, c2, g1


def test_extend_registers_children_in_creation_order():
    space = PrototypeSpace()
    root, c1, c2, g1 = _make_tree(space)

    assert space.get_instances(root) == [c1, c2]
    assert space.get_instances(c1) == [g1]
    assert space.get_instances(g1) == []


def test_extend_refuses_non_extensible_prototype():
    space = PrototypeSpace()
    root, c1, c2, g1 = _make_tree(space)

    space.prevent_extensions(root)

    assert not space.is_extensible(root)
    assert space.extend(root, {"name": "late"}) is None
    assert space.assign(root, c1) is None
    assert space.get_instances(root) == [c1, c2]

    assert root.set("x", "still writable") is True
    assert root.get("x") == "still writable"
    assert space.extend(c1, {}) is not None


def test_extend_requires_an_instance():
    space = PrototypeSpace()

    with pytest.raises(TypeError):
        space.extend({"x": 1}, {})


def test_assign_later_objects_win():
    space = PrototypeSpace()
    proto = space.create({})
    a = space.create({"x": 1, "y": "a"})
    b = space.create({"x": 2})

    merged = space.assign(proto, a, b)

    assert merged.prototype is proto
    assert merged.get("x") == 2
    assert merged.get("y") == "a"
    assert merged in space.get_instances(proto)


def test_assign_flattens_inherited_properties_and_rebinds_methods():
    space = PrototypeSpace()
    proto = space.create({})
    source_base = space.create({"inherited": True})
    source = space.extend(
        source_base,
        {
            "tag": "source",
            "who": lambda this: this.get("tag"),
            ":static_who": lambda this: this.get("tag"),
        },
    )

    merged = space.assign(proto, source)
    merged.set("tag", "merged")

    assert merged.own_properties["inherited"] is True
    assert merged.call("who") == "merged"
    assert merged.call("static_who") == "merged"
    assert merged.is_static("static_who")
    assert source.call("who") == "source"


def test_assign_requires_sources():
    space = PrototypeSpace()
    proto = space.create({})

    with pytest.raises(ValueError):
        space.assign(proto)


def test_get_descendants_is_the_transitive_set():
    space = PrototypeSpace()
    root, c1, c2, g1 = _make_tree(space)

    descendants = space.get_descendants(root)

    assert {d.handle for d in descendants} == {c1.handle, c2.handle, g1.handle}
    assert len(descendants) == 3
    assert space.get_descendants(c2) == []


def test_get_descendants_keeps_every_member_of_wide_subtrees():
    space = PrototypeSpace()
    root = space.create({})
    left = space.extend(root, {})
    right = space.extend(root, {})
    left_kids = [space.extend(left, {}) for _ in range(3)]
    right_kids = [space.extend(right, {}) for _ in range(3)]

    handles = {d.handle for d in space.get_descendants(root)}

    expected = {left.handle, right.handle}
    expected.update(k.handle for k in left_kids + right_kids)
    assert handles == expected


def test_get_prototypes_and_has_prototype():
    space = PrototypeSpace()
    root, c1, c2, g1 = _make_tree(space)

    assert space.get_prototypes(g1) == [c1, root]
    assert space.get_prototypes(root) == []
    assert space.has_prototype(g1, root)
    assert space.has_prototype(g1, c1)
    assert not space.has_prototype(c2, g1)
    assert not space.has_prototype(root, root)


def test_has_prototype_compares_identity_not_content():
    space = PrototypeSpace()
    root = space.create({"x": 1})
    lookalike = space.create({"x": 1})
    child = space.extend(root, {})

    assert not space.has_prototype(child, lookalike)


def test_enumeration_views():
    space = PrototypeSpace()
    base = space.create({"a": 1})
    child = space.extend(base, {"b": 2})

    assert space.keys(child) == ["prototype", "a", "b"]
    assert space.values(child) == [base, 1, 2]
    assert space.entries(child) == {"prototype": base, "a": 1, "b": 2}
    assert space.has_property(child, "a")
    assert not space.has_property(child, "c")

    assert space.own_keys(child) == ["b"]
    assert space.own_values(child) == [2]
    assert space.own_entries(child) == {"b": 2}
    assert space.has_own_property(child, "b")
    assert not space.has_own_property(child, "a")


def test_dispose_cleans_every_registry():
    space = PrototypeSpace()
    root, c1, c2, g1 = _make_tree(space)
    calls = []
    c1.set("__dispose__", lambda this: calls.append(this))

    space.observe(c1, lambda target, name, value: None)
    space.freeze(c1)
    space.prevent_extensions(c1)
    assert g1.get("x") == "root"
    assert ("x", c1.handle) in space.cache

    space.dispose(c1)
    space.dispose(c1)

    assert calls == [c1]
    assert c1.disposed
    assert space.get_instances(root) == [c2]
    assert space.get_observers(c1) == []
    assert not space.is_frozen(c1)
    assert space.is_extensible(c1)
    assert space.get_instances(c1) == []
    assert ("x", c1.handle) not in space.cache
    assert c1.handle not in space.instances


def test_dispose_hook_runs_on_frozen_instance():
    space = PrototypeSpace()
    calls = []
    obj = space.create({"__dispose__": lambda this: calls.append("disposed")})
    space.freeze(obj)

    obj.dispose()

    assert calls == ["disposed"]


def test_collected_instances_leave_the_registry():
    space = PrototypeSpace()
    root = space.create({})
    child = space.extend(root, {})
    handle = child.handle

    del child
    gc.collect()

    assert space.get_instances(root) == []
    assert handle not in space.instances


def test_assign_keeps_merged_names_verbatim():
    space = PrototypeSpace()
    proto = space.create()
    source = space.create()
    assert source.set(":tag", "v")
    assert source.set("7", "seven")

    merged = space.assign(proto, source)

    assert merged.own_properties == {":tag": "v", "7": "seven"}
    assert merged.static_names == frozenset()
    assert merged.get(":tag") == "v"


def test_resolution_through_disposed_prototype_is_not_cached():
    space = PrototypeSpace()
    base = space.create({"x": 1})
    child = space.extend(base)
    handle = base.handle

    space.dispose(base)
    assert child.get("x") == 1
    assert ("x", handle) not in space.cache

    del base
    gc.collect()
    assert ("x", handle) not in space.cache
    assert child.get("x") == 1
