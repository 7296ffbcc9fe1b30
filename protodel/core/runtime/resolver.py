from __future__ import annotations

from typing import Any

from .binding import MISSING, MethodBinding, is_bindable, unbind
from .cache import CachedResolution, PropertyCache


class Resolver:
    """
    Resolves a miss on an Instance's own properties through its prototype chain.

    The cache is keyed by the *prototype* consulted, not by the requester, so
    every Instance sharing a prototype shares one entry. Entries keep the
    underlying function; each requester receives its own binding, so a
    non-static inherited method always runs against the most specific
    Instance. Static methods are handed back untouched and the requester is
    marked static for that name so call() prepends it as the first argument.
    """

    def __init__(self, cache: PropertyCache) -> None:
        self._cache = cache

    def resolve(self, requester: Any, name: str) -> Any:
        prototype = requester.prototype
        if prototype is None:
            return MISSING

        entry = self._cache.lookup(name, prototype.handle)
        if entry is None:
            entry = self._resolve_on(prototype, name)
            if not prototype.disposed:
                self._cache.store(name, prototype.handle, entry)

        return self._materialize(requester, name, entry)

    def _resolve_on(self, prototype: Any, name: str) -> CachedResolution:
        value = prototype.lookup(name)
        if value is MISSING or not callable(value):
            return CachedResolution(value=value)
        if prototype.marked_static(name):
            return CachedResolution(value=value, static=True)
        if is_bindable(value):
            return CachedResolution(value=unbind(value), bindable=True)
        return CachedResolution(value=value)

    @staticmethod
    def _materialize(requester: Any, name: str, entry: CachedResolution) -> Any:
        if entry.static:
            requester.mark_static(name)
            return entry.value
        if entry.bindable:
            return MethodBinding(entry.value, requester)
        return entry.value
