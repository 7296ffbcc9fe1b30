from __future__ import annotations

import logging
import weakref
from collections.abc import Mapping
from typing import Any, Callable, Dict, FrozenSet, Optional, Set, Tuple

from protodel.core.errors import MethodNotFound

from .binding import (
    CLONE_HOOK,
    INVOKE_HOOK,
    MISSING,
    RESERVED_NAMES,
    STRING_HOOK,
    bind,
    check_name,
    parse_definition,
)

log = logging.getLogger("protodel.runtime")


class Instance:
    """
    A single object in the prototype model.

    Holds an ordered mapping of own properties, the set of names defined as
    static methods, and at most one prototype, fixed at construction. Any
    name missing from the own properties is delegated to the prototype chain
    through the owning space's Resolver.

    Invariants
    - prototype is read-only after construction
    - every write and delete is gated by the space's ObserverRegistry
    - an accepted write or delete invalidates the PropertyCache for that name
    - plain functions are bound to the Instance holding them, except static
      methods, which receive the calling Instance as an explicit first argument
    """

    def __init__(
        self,
        space: Any,
        properties: Optional[Mapping] = None,
        *,
        prototype: Optional["Instance"] = None,
        definitions: Optional[Mapping[str, Tuple[Any, bool]]] = None,
    ) -> None:
        if properties is None:
            properties = {}
        if not isinstance(properties, Mapping):
            raise TypeError("properties must be a mapping")

        self._space = space
        self._own: Dict[str, Any] = {}
        self._static: Set[str] = set()
        self._prototype: Optional[Instance] = None
        self._disposed = False

        for key, value in properties.items():
            parsed = parse_definition(key)
            if parsed is None:
                continue
            name, static = parsed
            if static:
                self._static.add(name)
                self._own[name] = value
            elif name == "prototype":
                self._prototype = self._check_prototype(value)
            else:
                self._own[name] = bind(value, self)

        # Pre-parsed (value, is_static) pairs; names are taken verbatim.
        for name, (value, static) in (definitions or {}).items():
            if static:
                self._static.add(name)
                self._own[name] = value
            else:
                self._own[name] = bind(value, self)

        if prototype is not None:
            self._prototype = self._check_prototype(prototype)

        self._handle = space.instances.track(self)
        self._finalizer = weakref.finalize(self, space.forget, self._handle)
        self._finalizer.atexit = False

    def _check_prototype(self, value: Any) -> Optional["Instance"]:
        if value is None:
            return None
        if not isinstance(value, Instance):
            raise TypeError("prototype must be an Instance or None")
        if value._space is not self._space:
            raise ValueError("prototype belongs to a different PrototypeSpace")
        return value

    # -- identity ---------------------------------------------------------

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def prototype(self) -> Optional["Instance"]:
        return self._prototype

    @property
    def space(self) -> Any:
        return self._space

    @property
    def disposed(self) -> bool:
        return self._disposed

    # -- views ------------------------------------------------------------

    @property
    def properties(self) -> Dict[str, Any]:
        """Resolved view: the prototype's view overlaid with this Instance's own."""

        local: Dict[str, Any] = {"prototype": self._prototype, **self._own}
        if self._prototype is None:
            return local
        return {**self._prototype.properties, **local}

    @property
    def own_properties(self) -> Dict[str, Any]:
        return dict(self._own)

    @property
    def static_names(self) -> FrozenSet[str]:
        return frozenset(self._static)

    # -- resolution -------------------------------------------------------

    def lookup(self, name: str) -> Any:
        """Own property, else the chain's resolution, else MISSING."""

        if name in self._own:
            return self._own[name]
        return self._space.resolver.resolve(self, name)

    def marked_static(self, name: str) -> bool:
        return name in self._static

    def mark_static(self, name: str) -> None:
        self._static.add(name)

    def is_static(self, name: str) -> bool:
        """True if ``name`` dispatches as a static method on this Instance."""

        if name in self._static:
            return True
        if name in self._own or self._prototype is None:
            return False
        return self._prototype.is_static(name)

    def get(self, name: str, default: Any = None) -> Any:
        if name == "prototype":
            return self._prototype
        if name == "properties":
            return self.properties
        value = self.lookup(name)
        return default if value is MISSING else value

    def has(self, name: str) -> bool:
        if name == "prototype":
            return self._prototype is not None
        if name == "properties":
            return True
        return self.lookup(name) is not MISSING

    def has_own(self, name: str) -> bool:
        return name in self._own

    # -- gated mutation ---------------------------------------------------

    def set(self, name: str, value: Any) -> bool:
        """
        Write an own property.

        Returns False without mutating when ``name`` is reserved or any
        observer rejects the write.
        """

        check_name(name)
        if name in RESERVED_NAMES:
            log.debug("refused write to reserved name %r on #%s", name, self._handle)
            return False

        verdict = self._space.observers.evaluate(self, name, value)
        if not verdict.accepted:
            log.debug("write of %r on #%s rejected by %s", name, self._handle, verdict.rejected_by)
            return False

        if name in self._static:
            self._own[name] = value
        else:
            self._own[name] = bind(value, self)
        self._space.cache.invalidate(name)
        return True

    def delete(self, name: str) -> bool:
        """
        Remove an own property and its static flag.

        Returns False without mutating when ``name`` is reserved or any
        observer rejects the delete.
        """

        check_name(name)
        if name in RESERVED_NAMES:
            log.debug("refused delete of reserved name %r on #%s", name, self._handle)
            return False

        verdict = self._space.observers.evaluate(self, name, None)
        if not verdict.accepted:
            log.debug("delete of %r on #%s rejected by %s", name, self._handle, verdict.rejected_by)
            return False

        self._static.discard(name)
        self._own.pop(name, None)
        self._space.cache.invalidate(name)
        return True

    # -- dispatch ---------------------------------------------------------

    def _find_callable(self, name: str) -> Optional[Callable[..., Any]]:
        own = self._own.get(name, MISSING)
        if own is not MISSING and callable(own):
            return own
        if self._prototype is None:
            return None
        method = self._space.resolver.resolve(self, name)
        return method if callable(method) else None

    def _dispatch(self, name: str, method: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
        if name in self._static:
            return method(self, *args, **kwargs)
        return method(*args, **kwargs)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        method = self._find_callable(name)
        if method is None:
            raise MethodNotFound(name)
        return self._dispatch(name, method, args, kwargs)

    def try_call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call ``name`` if it resolves to a callable, else return None."""

        method = self._find_callable(name)
        if method is None:
            return None
        return self._dispatch(name, method, args, kwargs)

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        method = self._find_callable(INVOKE_HOOK)
        if method is None:
            raise MethodNotFound(INVOKE_HOOK, f"No {INVOKE_HOOK} method found on this Instance")
        return self._dispatch(INVOKE_HOOK, method, args, kwargs)

    def to_string(self) -> str:
        method = self._find_callable(STRING_HOOK)
        if method is None:
            return f"<Instance #{self._handle}>"
        return str(self._dispatch(STRING_HOOK, method, (), {}))

    def clone(self) -> "Instance":
        """
        Copy this Instance under the same prototype.

        Functions are rebound to the clone, never left pointing at the
        original. Observers and freeze/extensibility marks are not copied.
        The clone hook runs on the clone once it is registered.
        """

        twin = Instance(self._space, prototype=self._prototype)
        twin._static = set(self._static)
        for name, value in self._own.items():
            twin._own[name] = value if name in self._static else bind(value, twin)
        if self._prototype is not None:
            self._space.instances.add_child(self._prototype.handle, twin.handle)
        twin.try_call(CLONE_HOOK)
        return twin

    def dispose(self) -> None:
        self._space.dispose(self)

    def snapshot(self) -> Dict[str, Any]:
        return self._space.inspect(self).model_dump()

    # -- Python protocol --------------------------------------------------

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.invoke(*args, **kwargs)

    def __str__(self) -> str:
        return self.to_string()

    def __copy__(self) -> "Instance":
        return self.clone()

    def __repr__(self) -> str:
        proto = self._prototype.handle if self._prototype is not None else None
        return f"Instance(handle={self._handle}, prototype={proto}, own={list(self._own)})"
