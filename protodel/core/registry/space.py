from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from protodel.core.config import SpaceConfig
from protodel.core.observers import ExtensibilityLedger, FreezeLedger, Observer, ObserverRegistry
from protodel.core.runtime.binding import DISPOSE_HOOK
from protodel.core.runtime.cache import PropertyCache
from protodel.core.runtime.inspection import InstanceReport, inspect_instance
from protodel.core.runtime.instance import Instance
from protodel.core.runtime.resolver import Resolver

from .instances import InstanceRegistry

log = logging.getLogger("protodel.registry")


def _require_instance(value: Any, what: str = "obj") -> Instance:
    if not isinstance(value, Instance):
        raise TypeError(f"{what} must be an Instance")
    return value


class PrototypeSpace:
    """
    Factory and shared state for one family of Instances.

    Owns the PropertyCache, the ObserverRegistry with its freeze and
    extensibility ledgers, and the InstanceRegistry. Instances created by a
    space may only delegate to prototypes of the same space.

    Failure channels
    - set/delete report vetoes as False
    - extend/assign return None when the prototype is not extensible
    - call/invoke raise MethodNotFound
    """

    def __init__(self, config: Optional[SpaceConfig] = None) -> None:
        self.config = config or SpaceConfig()
        self.cache = PropertyCache(enabled=self.config.cache_enabled)
        self.resolver = Resolver(self.cache)
        self.observers = ObserverRegistry(on_error=self.config.observer_errors)
        self.freezes = FreezeLedger(self.observers)
        self.extensibility = ExtensibilityLedger()
        self.instances = InstanceRegistry()

    # -- creation ---------------------------------------------------------

    def create(self, properties: Optional[Mapping] = None) -> Instance:
        """Build an Instance from ``properties``; a ``prototype`` key is honored but not registered."""

        return Instance(self, properties)

    def extend(self, prototype: Instance, properties: Optional[Mapping] = None) -> Optional[Instance]:
        """Build a child of ``prototype`` and register it, or return None if ``prototype`` is not extensible."""

        return self._spawn(prototype, properties=properties)

    def _spawn(
        self,
        prototype: Instance,
        *,
        properties: Optional[Mapping] = None,
        definitions: Optional[Dict[str, Tuple[Any, bool]]] = None,
    ) -> Optional[Instance]:
        _require_instance(prototype, "prototype")
        if not self.extensibility.is_extensible(prototype):
            log.debug("extend refused: #%s is not extensible", prototype.handle)
            return None

        instance = Instance(self, properties, prototype=prototype, definitions=definitions)
        self.instances.add_child(prototype.handle, instance.handle)
        return instance

    def assign(self, prototype: Instance, *objects: Instance) -> Optional[Instance]:
        """
        Extend ``prototype`` with the merged resolved views of ``objects``.

        Later objects win on conflicting names. Merged names are taken
        verbatim, never reparsed as construction keys, and static methods
        stay static.
        """

        if not objects:
            raise ValueError("assign requires at least one source Instance")

        merged: Dict[str, Tuple[Any, bool]] = {}
        for obj in objects:
            _require_instance(obj)
            for name, value in obj.properties.items():
                if name == "prototype":
                    continue
                merged[name] = (value, obj.is_static(name))

        return self._spawn(prototype, definitions=merged)

    # -- observers, freezing, extensibility -------------------------------

    def observe(self, obj: Instance, callback: Observer) -> None:
        self.observers.observe(_require_instance(obj), callback)

    def unobserve(self, obj: Instance, callback: Observer) -> None:
        self.observers.unobserve(_require_instance(obj), callback)

    def get_observers(self, obj: Instance) -> List[Observer]:
        return self.observers.get_observers(_require_instance(obj))

    def freeze(self, obj: Instance) -> None:
        self.freezes.freeze(_require_instance(obj))

    def unfreeze(self, obj: Instance) -> None:
        self.freezes.unfreeze(_require_instance(obj))

    def is_frozen(self, obj: Instance) -> bool:
        return self.freezes.is_frozen(_require_instance(obj))

    def prevent_extensions(self, obj: Instance) -> None:
        self.extensibility.prevent_extensions(_require_instance(obj))

    def is_extensible(self, obj: Instance) -> bool:
        return self.extensibility.is_extensible(_require_instance(obj))

    # -- enumeration ------------------------------------------------------

    def entries(self, obj: Instance) -> Dict[str, Any]:
        return _require_instance(obj).properties

    def keys(self, obj: Instance) -> List[str]:
        return list(self.entries(obj))

    def values(self, obj: Instance) -> List[Any]:
        return list(self.entries(obj).values())

    def has_property(self, obj: Instance, name: str) -> bool:
        return name in self.entries(obj)

    def own_entries(self, obj: Instance) -> Dict[str, Any]:
        return _require_instance(obj).own_properties

    def own_keys(self, obj: Instance) -> List[str]:
        return list(self.own_entries(obj))

    def own_values(self, obj: Instance) -> List[Any]:
        return list(self.own_entries(obj).values())

    def has_own_property(self, obj: Instance, name: str) -> bool:
        return _require_instance(obj).has_own(name)

    # -- chain introspection ----------------------------------------------

    def get_prototypes(self, obj: Instance) -> List[Instance]:
        """Ancestor chain from ``obj.prototype`` up to the root."""

        chain: List[Instance] = []
        current = _require_instance(obj).prototype
        while current is not None:
            chain.append(current)
            current = current.prototype
        return chain

    def has_prototype(self, obj: Instance, candidate: Instance) -> bool:
        _require_instance(candidate, "candidate")
        return any(p is candidate for p in self.get_prototypes(obj))

    def get_instances(self, prototype: Instance) -> List[Instance]:
        return self.instances.children(_require_instance(prototype, "prototype").handle)

    def get_descendants(self, prototype: Instance) -> List[Instance]:
        """
        Every Instance transitively registered under ``prototype``.

        Deduplicated by handle, depth first. Treat the result as a set.
        """

        seen: Dict[int, Instance] = {}
        stack = list(reversed(self.get_instances(prototype)))
        while stack:
            child = stack.pop()
            if child.handle in seen:
                continue
            seen[child.handle] = child
            stack.extend(reversed(self.instances.children(child.handle)))
        return list(seen.values())

    def inspect(self, obj: Instance) -> InstanceReport:
        return inspect_instance(_require_instance(obj), self)

    # -- lifecycle --------------------------------------------------------

    def dispose(self, obj: Instance) -> None:
        """
        Retire ``obj`` deterministically.

        Runs the dispose hook, then removes ``obj`` from its prototype's child
        list and drops its observers, freeze and extensibility marks and the
        cache entries resolved against it. Idempotent.
        """

        _require_instance(obj)
        if obj.disposed:
            return
        obj._disposed = True
        obj.try_call(DISPOSE_HOOK)
        obj._finalizer.detach()
        self.forget(obj.handle)
        log.debug("disposed #%s", obj.handle)

    def forget(self, handle: int) -> None:
        """Registry cleanup for ``handle``; also runs when an Instance is collected."""

        self.observers.drop(handle)
        self.freezes.forget(handle)
        self.extensibility.forget(handle)
        self.instances.remove(handle)
        self.cache.forget_prototype(handle)
