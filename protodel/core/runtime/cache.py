from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, Optional

log = logging.getLogger("protodel.runtime")


@dataclass(frozen=True)
class CachedResolution:
    """
    Owner-neutral result of resolving a name against one prototype.

    ``value`` holds the underlying function (never a binding) for bindable
    values, so the entry can be shared by every Instance delegating to the
    same prototype.
    """

    value: Any
    static: bool = False
    bindable: bool = False


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


@dataclass
class PropertyCache:
    """Per-property-name cache of prototype-chain resolutions.

    Entries are keyed by ``(name, prototype handle)``. Invalidation is
    coarse: a write or delete of ``name`` on any Instance drops every entry
    for ``name`` regardless of which prototype it belonged to.

    - lookup / store: O(1) average
    - invalidate: O(1) (drops the whole bucket)
    - forget_prototype: O(number of cached names)
    """

    enabled: bool = True
    stats: CacheStats = field(default_factory=CacheStats)

    _buckets: Dict[str, Dict[int, CachedResolution]] = field(
        default_factory=dict, init=False, repr=False
    )
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def lookup(self, name: str, prototype_handle: int) -> Optional[CachedResolution]:
        if not self.enabled:
            return None
        with self._lock:
            entry = self._buckets.get(name, {}).get(prototype_handle)
            if entry is None:
                self.stats.misses += 1
            else:
                self.stats.hits += 1
            return entry

    def store(self, name: str, prototype_handle: int, entry: CachedResolution) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._buckets.setdefault(name, {})[prototype_handle] = entry

    def invalidate(self, name: str) -> None:
        with self._lock:
            if self._buckets.pop(name, None) is not None:
                self.stats.invalidations += 1
                log.debug("cache invalidated for %r", name)

    def forget_prototype(self, prototype_handle: int) -> None:
        """Drop every entry resolved against a disposed prototype."""

        with self._lock:
            for name in list(self._buckets):
                bucket = self._buckets[name]
                bucket.pop(prototype_handle, None)
                if not bucket:
                    del self._buckets[name]

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()

    def __contains__(self, key: tuple) -> bool:
        name, prototype_handle = key
        with self._lock:
            return prototype_handle in self._buckets.get(name, {})

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._buckets.values())
