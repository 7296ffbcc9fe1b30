from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, Set

from .models import FreezeGuard
from .registry import ObserverRegistry


@dataclass
class FreezeLedger:
    """Tracks the FreezeGuard installed on each frozen Instance.

    Freezing is idempotent: a second freeze keeps the existing guard so
    unfreeze always removes exactly the observer freeze installed. A guard
    unregistered behind the ledger's back no longer counts as frozen.
    """

    observers: ObserverRegistry

    _guards: Dict[int, FreezeGuard] = field(default_factory=dict, init=False, repr=False)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def freeze(self, target: Any) -> None:
        with self._lock:
            current = self._guards.get(target.handle)
            if current is not None and self.observers.is_observing(target, current):
                return
            guard = FreezeGuard(target.handle)
            self._guards[target.handle] = guard
        self.observers.observe(target, guard)

    def unfreeze(self, target: Any) -> None:
        with self._lock:
            guard = self._guards.pop(target.handle, None)
        if guard is not None:
            self.observers.unobserve(target, guard)

    def is_frozen(self, target: Any) -> bool:
        with self._lock:
            guard = self._guards.get(target.handle)
            if guard is None:
                return False
            if not self.observers.is_observing(target, guard):
                del self._guards[target.handle]
                return False
            return True

    def forget(self, handle: int) -> None:
        with self._lock:
            self._guards.pop(handle, None)


@dataclass
class ExtensibilityLedger:
    """Handles of Instances that refuse to parent new children.

    Consulted only when a child is created, never on mutation.
    """

    _sealed: Set[int] = field(default_factory=set, init=False, repr=False)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def prevent_extensions(self, target: Any) -> None:
        with self._lock:
            self._sealed.add(target.handle)

    def is_extensible(self, target: Any) -> bool:
        with self._lock:
            return target.handle not in self._sealed

    def forget(self, handle: int) -> None:
        with self._lock:
            self._sealed.discard(handle)
