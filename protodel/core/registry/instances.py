from __future__ import annotations

import itertools
import weakref
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class InstanceRegistry:
    """Arena of Instances keyed by opaque integer handles.

    The registry never keeps an Instance alive: the arena holds weak
    references and child lists hold handles only.

    - track / add_child / lookup: O(1) average
    - remove: O(k) for k siblings of the removed handle
    - children: O(k)
    """

    _refs: Dict[int, weakref.ref] = field(default_factory=dict, init=False, repr=False)
    _children: Dict[int, List[int]] = field(default_factory=dict, init=False, repr=False)
    _parents: Dict[int, int] = field(default_factory=dict, init=False, repr=False)
    _counter: Iterator[int] = field(default_factory=lambda: itertools.count(1), init=False, repr=False)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def track(self, instance: Any) -> int:
        """Issue a handle for ``instance`` and hold it weakly."""

        with self._lock:
            handle = next(self._counter)
            self._refs[handle] = weakref.ref(instance)
            return handle

    def add_child(self, prototype_handle: int, child_handle: int) -> None:
        with self._lock:
            self._children.setdefault(prototype_handle, []).append(child_handle)
            self._parents[child_handle] = prototype_handle

    def lookup(self, handle: int) -> Optional[Any]:
        with self._lock:
            ref = self._refs.get(handle)
        return ref() if ref is not None else None

    def children(self, prototype_handle: int) -> List[Any]:
        """Live children registered under ``prototype_handle`` in creation order."""

        with self._lock:
            handles = list(self._children.get(prototype_handle, ()))
        out: List[Any] = []
        for handle in handles:
            child = self.lookup(handle)
            if child is not None:
                out.append(child)
        return out

    def remove(self, handle: int) -> None:
        """Forget ``handle``: its arena slot, its own child list and its entry in its parent's list."""

        with self._lock:
            self._refs.pop(handle, None)
            self._children.pop(handle, None)
            parent = self._parents.pop(handle, None)
            if parent is None:
                return
            siblings = self._children.get(parent)
            if siblings is None:
                return
            if handle in siblings:
                siblings.remove(handle)
            if not siblings:
                del self._children[parent]

    def __contains__(self, handle: int) -> bool:
        with self._lock:
            return handle in self._refs

    def __len__(self) -> int:
        with self._lock:
            return len(self._refs)
