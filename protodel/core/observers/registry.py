from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, List

from protodel.core.errors import ObserverError

from .models import MutationDecision, MutationVerdict, Observer, is_rejection, observer_name

log = logging.getLogger("protodel.observers")


@dataclass
class ObserverRegistry:
    """
    Mutation gate consulted before every property write or delete.

    Invariants
    - Observers are keyed by the target's handle, never by the Instance itself
    - Registration is idempotent per identical callback
    - Every observer is called, in registration order, even after a veto
    - on_error="reject" fails closed when an observer raises
    """

    on_error: str = "reject"

    _observers: Dict[int, Dict[Observer, None]] = field(default_factory=dict, init=False, repr=False)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def observe(self, target: Any, callback: Observer) -> None:
        if not callable(callback):
            raise TypeError("observer must be callable")
        with self._lock:
            self._observers.setdefault(target.handle, {})[callback] = None

    def unobserve(self, target: Any, callback: Observer) -> None:
        with self._lock:
            callbacks = self._observers.get(target.handle)
            if callbacks is None:
                return
            callbacks.pop(callback, None)
            if not callbacks:
                del self._observers[target.handle]

    def is_observing(self, target: Any, callback: Observer) -> bool:
        with self._lock:
            return callback in self._observers.get(target.handle, {})

    def get_observers(self, target: Any) -> List[Observer]:
        # Copy so observers may unregister themselves while being notified.
        with self._lock:
            return list(self._observers.get(target.handle, {}))

    def drop(self, handle: int) -> None:
        with self._lock:
            self._observers.pop(handle, None)

    def evaluate(self, target: Any, name: str, value: Any) -> MutationVerdict:
        rejected_by: List[str] = []
        reason = None

        for callback in self.get_observers(target):
            try:
                result = callback(target, name, value)
            except Exception as e:
                if self.on_error == "raise":
                    raise ObserverError(observer_name(callback), name) from e
                log.warning(
                    "observer %s raised %s while gating %r; rejecting",
                    observer_name(callback),
                    e.__class__.__name__,
                    name,
                )
                rejected_by.append(observer_name(callback))
                reason = f"Observer exception: {e.__class__.__name__}"
                continue

            if is_rejection(result):
                rejected_by.append(observer_name(callback))

        if rejected_by:
            return MutationVerdict(
                status=MutationDecision.REJECT,
                property_name=name,
                rejected_by=tuple(rejected_by),
                reason=reason or "Rejected by observer",
            )

        return MutationVerdict(status=MutationDecision.ACCEPT, property_name=name)
