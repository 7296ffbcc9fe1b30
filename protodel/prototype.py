"""Module-level prototype API bound to a process-wide default space.

The default space is configured from PROTODEL_* environment variables when
this module is first imported. Use ``PrototypeSpace`` directly for isolated
families of Instances.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from protodel.core.config import SpaceConfig
from protodel.core.observers import Observer
from protodel.core.registry import PrototypeSpace
from protodel.core.runtime import Instance, InstanceReport

_config = SpaceConfig.from_env()
_config.apply_logging()
_space = PrototypeSpace(_config)


def default_space() -> PrototypeSpace:
    return _space


def create(properties: Optional[Mapping] = None) -> Instance:
    return _space.create(properties)


def extend(prototype: Instance, properties: Optional[Mapping] = None) -> Optional[Instance]:
    return _space.extend(prototype, properties)


def assign(prototype: Instance, *objects: Instance) -> Optional[Instance]:
    return _space.assign(prototype, *objects)


def dispose(obj: Instance) -> None:
    _space.dispose(obj)


def observe(obj: Instance, callback: Observer) -> None:
    _space.observe(obj, callback)


def unobserve(obj: Instance, callback: Observer) -> None:
    _space.unobserve(obj, callback)


def get_observers(obj: Instance) -> List[Observer]:
    return _space.get_observers(obj)


def freeze(obj: Instance) -> None:
    _space.freeze(obj)


def unfreeze(obj: Instance) -> None:
    _space.unfreeze(obj)


def is_frozen(obj: Instance) -> bool:
    return _space.is_frozen(obj)


def prevent_extensions(obj: Instance) -> None:
    _space.prevent_extensions(obj)


def is_extensible(obj: Instance) -> bool:
    return _space.is_extensible(obj)


def keys(obj: Instance) -> List[str]:
    return _space.keys(obj)


def entries(obj: Instance) -> Dict[str, Any]:
    return _space.entries(obj)


def values(obj: Instance) -> List[Any]:
    return _space.values(obj)


def has_property(obj: Instance, name: str) -> bool:
    return _space.has_property(obj, name)


def own_keys(obj: Instance) -> List[str]:
    return _space.own_keys(obj)


def own_entries(obj: Instance) -> Dict[str, Any]:
    return _space.own_entries(obj)


def own_values(obj: Instance) -> List[Any]:
    return _space.own_values(obj)


def has_own_property(obj: Instance, name: str) -> bool:
    return _space.has_own_property(obj, name)


def has_prototype(obj: Instance, candidate: Instance) -> bool:
    return _space.has_prototype(obj, candidate)


def get_prototypes(obj: Instance) -> List[Instance]:
    return _space.get_prototypes(obj)


def get_instances(prototype: Instance) -> List[Instance]:
    return _space.get_instances(prototype)


def get_descendants(prototype: Instance) -> List[Instance]:
    return _space.get_descendants(prototype)


def inspect(obj: Instance) -> InstanceReport:
    return _space.inspect(obj)
